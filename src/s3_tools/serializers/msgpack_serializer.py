"""MessagePack serializer for compact binary payloads."""

from typing import Any, Optional

import msgpack
from pydantic import PydanticSchemaGenerationError
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from s3_tools.core.exceptions import DecodeError, EncodeError

from .base import T, target_adapter, type_adapter


class MsgPackSerializer:
    """Encodes values as MessagePack.

    Values are first dumped to builtins through pydantic, so models and
    dataclasses are packed as maps keyed by field name. Bytes and
    timezone-aware datetimes use native MessagePack types (aware datetimes
    come back in UTC). Anything else msgpack cannot pack, such as UUIDs,
    dates, decimals and enums, is stored in its JSON-compatible form and
    restored when decoding into a typed target.
    """

    name = "msgpack"

    def serialize(self, value: Any) -> bytes:
        try:
            obj = type_adapter(type(value)).dump_python(value, by_alias=True)
            return msgpack.packb(
                obj, use_bin_type=True, datetime=True, default=to_jsonable_python
            )
        except (
            PydanticSerializationError,
            PydanticSchemaGenerationError,
            TypeError,
            ValueError,
            OverflowError,
        ) as e:
            raise EncodeError(
                f"Failed to encode {type(value).__name__} as MessagePack: {e}"
            ) from e

    def deserialize(self, data: bytes, target: Optional[type[T]] = None) -> T:
        try:
            # Map keys may be any packable scalar, not only strings
            obj = msgpack.unpackb(data, raw=False, timestamp=3, strict_map_key=False)
        except (msgpack.UnpackException, ValueError) as e:
            raise DecodeError(f"Failed to unpack MessagePack payload: {e}") from e

        try:
            return target_adapter(target).validate_python(obj)
        except PydanticValidationError as e:
            raise DecodeError(f"Failed to decode MessagePack payload: {e}") from e

    def __repr__(self) -> str:
        return "MsgPackSerializer()"
