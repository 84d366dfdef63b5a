"""Pluggable value serializers."""

from typing import Optional

from s3_tools.core import settings
from s3_tools.core.exceptions import ValidationError

from .base import Serializer
from .json_serializer import JSONSerializer
from .msgpack_serializer import MsgPackSerializer

_SERIALIZERS: dict[str, type] = {
    "json": JSONSerializer,
    "msgpack": MsgPackSerializer,
}


def get_serializer(name: Optional[str] = None) -> Serializer:
    """Return a serializer by name.

    Args:
        name: ``"json"`` or ``"msgpack"``; defaults to the configured
            ``default_serializer`` setting

    Raises:
        ValidationError: If the name is unknown
    """
    name = (name or settings.default_serializer).lower()
    try:
        return _SERIALIZERS[name]()
    except KeyError:
        raise ValidationError(
            f"Unknown serializer: {name}. Must be one of {sorted(_SERIALIZERS)}"
        )


__all__ = ["JSONSerializer", "MsgPackSerializer", "Serializer", "get_serializer"]
