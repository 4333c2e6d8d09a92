"""
Token Codec Module

Converts tokens and proxies to and from the bytes stored in Redis.
"""

from abc import ABC, abstractmethod
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class CodecError(Exception):
    """Encoding/Decoding error"""
    pass


class TokenCodec(ABC):
    """Byte codec for repository values"""

    @abstractmethod
    def encode(self, value: BaseModel) -> bytes:
        """
        Encode a model to bytes

        Raises:
            CodecError: If the value cannot be encoded
        """
        pass

    @abstractmethod
    def decode(self, data: bytes, model_type: type[ModelT]) -> ModelT:
        """
        Decode bytes produced by encode()

        Args:
            data: Stored bytes
            model_type: Expected model class

        Returns:
            The decoded model

        Raises:
            CodecError: If the bytes are not a valid encoding of model_type
        """
        pass


class JsonTokenCodec(TokenCodec):
    """
    JSON Codec

    Uses pydantic's JSON serialization. Field order follows the model
    definition, so equal models always encode to equal bytes, which lets
    encoded proxies be used as Redis keys.
    """

    def encode(self, value: BaseModel) -> bytes:
        try:
            return value.model_dump_json().encode("utf-8")
        except (TypeError, ValueError) as e:
            raise CodecError(f"Cannot encode {type(value).__name__}: {e}") from e

    def decode(self, data: bytes, model_type: type[ModelT]) -> ModelT:
        try:
            return model_type.model_validate_json(data)
        except PydanticValidationError as e:
            raise CodecError(
                f"Cannot decode {model_type.__name__}: {e.error_count()} validation error(s)"
            ) from e
