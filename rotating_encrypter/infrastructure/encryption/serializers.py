"""Serializers - value codecs для Encrypter.encrypt/decrypt."""

import json
from typing import Any

from pydantic import BaseModel

from rotating_encrypter.domain.encryption import SerializationError, Serializer


class JsonSerializer(Serializer):
    """JSON codec for structured values (default).

    Supports str, numbers, bool, None, lists, dicts and pydantic models
    (dumped via ``model_dump(mode="json")``, loaded back as dicts).
    """

    def dumps(self, value: Any) -> bytes:
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        try:
            return json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(
                "Value is not JSON serializable", value_type=type(value).__name__
            ) from e

    def loads(self, data: bytes) -> Any:
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            raise SerializationError("Payload is not valid JSON") from None


class RawSerializer(Serializer):
    """Pass-through codec: str is UTF-8 encoded, bytes are kept as is."""

    def dumps(self, value: Any) -> bytes:
        if isinstance(value, str):
            return value.encode("utf-8")
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise SerializationError(
            "Raw values must be str or bytes", value_type=type(value).__name__
        )

    def loads(self, data: bytes) -> bytes:
        return bytes(data)
