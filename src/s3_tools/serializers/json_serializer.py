"""JSON serializer, the default codec."""

import math
from typing import Any, Optional

from pydantic import PydanticSchemaGenerationError
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from s3_tools.core.exceptions import DecodeError, EncodeError

from .base import T, target_adapter, type_adapter


def _reject_non_finite(obj: Any) -> None:
    """Raise EncodeError for NaN or infinite floats anywhere in ``obj``.

    JSON has no representation for them; pydantic would write ``null``.
    """
    if isinstance(obj, float):
        if not math.isfinite(obj):
            raise EncodeError(f"Failed to encode as JSON: unsupported value {obj!r}")
    elif isinstance(obj, dict):
        for item in obj.values():
            _reject_non_finite(item)
    elif isinstance(obj, (list, tuple, set, frozenset)):
        for item in obj:
            _reject_non_finite(item)


class JSONSerializer:
    """Encodes values as compact JSON.

    Structured values are written with their field names (or aliases), so a
    model ``Item(name="TestName", amount=12)`` is stored as
    ``{"name":"TestName","amount":12}``. NaN and infinite floats are
    rejected.
    """

    name = "json"

    def serialize(self, value: Any) -> bytes:
        try:
            adapter = type_adapter(type(value))
            _reject_non_finite(adapter.dump_python(value))
            return adapter.dump_json(value, by_alias=True)
        except (PydanticSerializationError, PydanticSchemaGenerationError) as e:
            raise EncodeError(
                f"Failed to encode {type(value).__name__} as JSON: {e}"
            ) from e

    def deserialize(self, data: bytes, target: Optional[type[T]] = None) -> T:
        try:
            return target_adapter(target).validate_json(data)
        except PydanticValidationError as e:
            raise DecodeError(f"Failed to decode JSON payload: {e}") from e

    def __repr__(self) -> str:
        return "JSONSerializer()"
