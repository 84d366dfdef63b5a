"""S3 client configuration and management.

This module provides S3 client configuration and creation of the underlying
boto3 client, with support for multiple authentication methods and
S3-compatible services.

Authentication Methods Supported:
    1. Explicit credentials (access_key_id, secret_access_key)
    2. AWS CLI profiles (aws_profile)
    3. IAM roles / environment variables (no explicit credentials)
    4. Temporary credentials (session_token)

S3-Compatible Services:
    Supports custom endpoints for services like MinIO, DigitalOcean Spaces,
    and other S3-compatible object storage providers. Endpoints may be given
    as a full URL or as ``host:port``, in which case ``secure`` selects the
    scheme.
"""

from typing import Any, Dict, Literal, Optional

import boto3
from botocore.config import Config
from pydantic import BaseModel, ConfigDict, Field

from s3_tools.core import get_logger
from s3_tools.core.exceptions import ValidationError

logger = get_logger(__name__)


class S3ClientConfig(BaseModel):
    """Configuration for S3 client connections.

    Authentication Priority:
        1. If aws_profile is provided, use profile-based authentication
        2. If explicit credentials are provided, use them
        3. Otherwise, fall back to default AWS credential chain

    Example:
        # MinIO endpoint
        config = S3ClientConfig(
            endpoint_url="localhost:9000",
            access_key_id="minioadmin",
            secret_access_key="minioadmin",
            secure=False,
        )
    """

    model_config = ConfigDict(extra="forbid")

    access_key_id: Optional[str] = Field(None, description="AWS access key ID")
    secret_access_key: Optional[str] = Field(None, description="AWS secret access key")
    session_token: Optional[str] = Field(
        None, description="AWS session token for temporary credentials"
    )
    region_name: str = Field("us-east-1", description="AWS region name")
    endpoint_url: Optional[str] = Field(
        None, description="Custom S3 endpoint (URL or host:port)"
    )
    secure: bool = Field(True, description="Use TLS when talking to the endpoint")
    aws_profile: Optional[str] = Field(
        None, description="AWS CLI profile name to use for credentials"
    )
    addressing_style: Literal["auto", "path", "virtual"] = Field(
        "auto", description="Bucket addressing style; MinIO usually needs 'path'"
    )
    connect_timeout: Optional[float] = Field(
        None, description="Connection timeout in seconds"
    )
    read_timeout: Optional[float] = Field(None, description="Read timeout in seconds")

    def resolved_endpoint_url(self) -> Optional[str]:
        """Return the endpoint as a URL, adding a scheme to ``host:port`` forms."""
        if not self.endpoint_url:
            return None
        if "://" in self.endpoint_url:
            return self.endpoint_url
        if "/" in self.endpoint_url:
            raise ValidationError(
                f"Endpoint must be a URL or host[:port]: {self.endpoint_url}"
            )
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.endpoint_url}"


def new_options(
    access_key_id: str,
    secret_access_key: str,
    session_token: Optional[str] = None,
    secure: bool = True,
    **kwargs: Any,
) -> S3ClientConfig:
    """Build a static-credentials configuration.

    Extra keyword arguments are passed to :class:`S3ClientConfig`.
    """
    return S3ClientConfig(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        session_token=session_token or None,
        secure=secure,
        **kwargs,
    )


class S3ClientManager:
    """Manages the boto3 S3 client for a configuration."""

    def __init__(self, config: S3ClientConfig):
        self.config = config
        self._client = None
        logger.info(
            "S3 client manager initialized",
            region=config.region_name,
            endpoint=config.endpoint_url,
        )

    @property
    def client(self):
        """Get or create S3 client instance."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _botocore_config(self) -> Config:
        options: Dict[str, Any] = {
            "signature_version": "s3v4",
            "s3": {"addressing_style": self.config.addressing_style},
        }
        if self.config.connect_timeout is not None:
            options["connect_timeout"] = self.config.connect_timeout
        if self.config.read_timeout is not None:
            options["read_timeout"] = self.config.read_timeout
        return Config(**options)

    def _create_client(self):
        """Create boto3 S3 client with the configured settings."""
        kwargs: Dict[str, Any] = {
            "region_name": self.config.region_name,
            "use_ssl": self.config.secure,
            "config": self._botocore_config(),
        }

        endpoint_url = self.config.resolved_endpoint_url()
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        if self.config.aws_profile:
            session = boto3.Session(profile_name=self.config.aws_profile)
            client = session.client("s3", **kwargs)  # type: ignore
            logger.info(
                "S3 client created with profile", profile=self.config.aws_profile
            )
        else:
            if self.config.access_key_id and self.config.secret_access_key:
                kwargs.update(
                    {
                        "aws_access_key_id": self.config.access_key_id,
                        "aws_secret_access_key": self.config.secret_access_key,
                    }
                )
                if self.config.session_token:
                    kwargs["aws_session_token"] = self.config.session_token
                logger.info("S3 client created with explicit credentials")
            else:
                logger.info("S3 client created with default credential chain")

            client = boto3.client("s3", **kwargs)  # type: ignore

        return client
