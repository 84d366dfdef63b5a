"""Serializer capability shared by all value codecs.

A serializer turns a value into bytes and back. Values are described by
their Python type: pydantic models, dataclasses, TypedDicts, builtins and
typing generics are all accepted because conversion goes through a pydantic
``TypeAdapter`` of that type.
"""

from functools import lru_cache
from typing import Any, Optional, Protocol, TypeVar, runtime_checkable

from pydantic import TypeAdapter

T = TypeVar("T")


@runtime_checkable
class Serializer(Protocol):
    """Protocol for value <-> bytes codecs."""

    def serialize(self, value: Any) -> bytes:
        """Encode ``value`` to bytes.

        Raises:
            EncodeError: If the value cannot be encoded
        """
        ...

    def deserialize(self, data: bytes, target: Optional[type[T]] = None) -> T:
        """Decode ``data`` into an instance of ``target``.

        With no target the plain decoded builtins are returned.

        Raises:
            DecodeError: If the bytes cannot be decoded into ``target``
        """
        ...


@lru_cache(maxsize=256)
def type_adapter(tp: Any) -> TypeAdapter:
    """Return a cached TypeAdapter for ``tp``."""
    return TypeAdapter(tp)


def target_adapter(target: Optional[type]) -> TypeAdapter:
    """Return the adapter used to validate decoded data into ``target``."""
    return type_adapter(Any if target is None else target)
