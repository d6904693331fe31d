"""Pluggable JSON codec for request and response bodies."""

from functools import lru_cache
from typing import Any, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from shared_rest.rest.errors import RestError


T = TypeVar("T")


class JsonCodec(Protocol):
    """Protocol for JSON codecs.

    Allows dependency injection of the codec used by the client.
    """

    def encode(self, value: object) -> bytes:
        """Encode a value to JSON bytes.

        Args:
            value: Value to encode.

        Returns:
            Encoded JSON bytes.

        Raises:
            RestError: PARSE error if the value cannot be encoded.
        """
        ...

    def decode(self, data: bytes, response_type: type[T]) -> T:
        """Decode JSON bytes into a typed value.

        Args:
            data: JSON bytes.
            response_type: Target type.

        Returns:
            Decoded value.

        Raises:
            RestError: PARSE error if the bytes are not valid for the type.
        """
        ...


@lru_cache(maxsize=256)
def _adapter_for(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


class PydanticJsonCodec:
    """JSON codec backed by pydantic.

    Decodes into anything pydantic can validate: models, dataclasses,
    TypedDicts, and builtin containers.
    """

    def encode(self, value: object) -> bytes:
        """Encode a value to JSON bytes."""
        try:
            return to_json(value)
        except PydanticSerializationError as e:
            raise RestError.parse(f"JSON encode failed: {e}") from e

    def decode(self, data: bytes, response_type: type[T]) -> T:
        """Decode JSON bytes into ``response_type``."""
        try:
            result: T = _adapter_for(response_type).validate_json(data)
        except ValidationError as e:
            msg = f"JSON decode into {_type_name(response_type)} failed: {e}"
            raise RestError.parse(msg) from e
        return result


def _type_name(response_type: object) -> str:
    return getattr(response_type, "__name__", repr(response_type))


_default_codec = PydanticJsonCodec()


def get_default_codec() -> PydanticJsonCodec:
    """Get the shared default codec."""
    return _default_codec
