"""Encryption bounded context - ports та exceptions."""

from .exceptions import (
    AuthenticationError,
    DecryptError,
    EncryptError,
    EncryptionError,
    InvalidFooterError,
    KeyNotFoundError,
    MalformedKeyError,
    MissingAppKeyError,
    SerializationError,
)
from .ports import AeadProtocol, Serializer, StringEncrypter, ValueEncrypter

__all__ = [
    # Ports
    "AeadProtocol",
    "Serializer",
    "ValueEncrypter",
    "StringEncrypter",
    # Exceptions
    "EncryptionError",
    "MalformedKeyError",
    "InvalidFooterError",
    "KeyNotFoundError",
    "AuthenticationError",
    "SerializationError",
    "EncryptError",
    "DecryptError",
    "MissingAppKeyError",
]
