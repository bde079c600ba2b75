"""Exceptions для Encryption bounded context.

Internal kinds (MalformedKeyError, InvalidFooterError, KeyNotFoundError,
AuthenticationError, SerializationError) описують що саме пішло не так.
Назовні decrypt завжди піднімає тільки DecryptError.
"""

from rotating_encrypter.domain.shared import DomainException


class EncryptionError(DomainException):
    """Base exception для всіх encryption-related errors."""

    pass


class MalformedKeyError(EncryptionError):
    """Raised коли textual key має неправильний формат.

    Wrong field count, unknown version tag, invalid base64, wrong key size
    or an undecodable key id.
    """

    pass


class InvalidFooterError(EncryptionError):
    """Raised коли footer ciphertext'у не вдається розібрати."""

    pass


class KeyNotFoundError(EncryptionError):
    """Raised коли key id з footer'а невідомий цьому Encrypter."""

    pass


class AuthenticationError(EncryptionError):
    """Raised коли AEAD tag не пройшов перевірку.

    Tampered ciphertext, wrong key or version mismatch.
    """

    pass


class SerializationError(EncryptionError):
    """Raised коли value не вдається serialize/deserialize."""

    pass


class EncryptError(EncryptionError):
    """Raised by encrypt; the root cause is chained as ``__cause__``."""

    pass


class DecryptError(EncryptionError):
    """The single error kind raised by decrypt.

    Footer, lookup and authentication failures are deliberately
    indistinguishable.
    """

    pass


class MissingAppKeyError(EncryptionError):
    """Raised коли APP_KEY не налаштований."""

    pass
