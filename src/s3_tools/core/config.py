"""Configuration management for s3-tools."""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"
    otel_enabled: bool = False
    otel_service_name: str = "s3-tools"
    default_serializer: Literal["json", "msgpack"] = "json"

    model_config = {
        "env_prefix": "S3_TOOLS_",
        "case_sensitive": False,
    }


settings = Settings()
