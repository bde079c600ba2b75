"""rotating-encrypter - PASETO encryption for application secrets with key rotation.

Usage:
    from rotating_encrypter import Encrypter, key_codec

    key = Encrypter.generate_key()
    app_key = key_codec.export_key(key)        # v4.local.<keyId>.<base64Key>
    encrypter = Encrypter.from_config(app_key)
    token = encrypter.encrypt_string("secret-value")
"""

from rotating_encrypter.domain.encryption import (
    AuthenticationError,
    DecryptError,
    EncryptError,
    EncryptionError,
    InvalidFooterError,
    KeyNotFoundError,
    MalformedKeyError,
    MissingAppKeyError,
    SerializationError,
    StringEncrypter,
    ValueEncrypter,
)
from rotating_encrypter.domain.keys import ProtocolVersion, SymmetricKey
from rotating_encrypter.infrastructure.encryption import (
    Encrypter,
    JsonSerializer,
    PasetoProtocol,
    RawSerializer,
    get_encrypter,
    key_codec,
)

__version__ = "1.0.0"

__all__ = [
    "Encrypter",
    "PasetoProtocol",
    "JsonSerializer",
    "RawSerializer",
    "SymmetricKey",
    "ProtocolVersion",
    "ValueEncrypter",
    "StringEncrypter",
    "key_codec",
    "get_encrypter",
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
