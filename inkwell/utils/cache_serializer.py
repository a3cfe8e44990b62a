"""orjson serialization for cached values."""

from typing import Any

from orjson import OPT_NON_STR_KEYS, JSONDecodeError
from orjson import dumps as orjson_dumps
from orjson import loads as orjson_loads

from inkwell.errors import CacheDeserializationError, CacheSerializationError
from inkwell.monitoring import get_logger

logger = get_logger(__name__)


def serialize(value: object) -> str:
    """
    Serialize value to a JSON string.

    Raises:
        CacheSerializationError: If the value cannot be encoded.
    """
    try:
        return orjson_dumps(value, default=str, option=OPT_NON_STR_KEYS).decode("utf-8")
    except TypeError as e:
        logger.exception("Serialization failed")
        raise CacheSerializationError from e


def deserialize(value: str | bytes) -> Any:
    """
    Deserialize a JSON string.

    Raises:
        CacheDeserializationError: If the payload is not valid JSON.
    """
    try:
        return orjson_loads(value)
    except JSONDecodeError as e:
        logger.exception("Deserialization failed")
        raise CacheDeserializationError from e
