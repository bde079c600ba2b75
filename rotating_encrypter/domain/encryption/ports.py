"""Encryption ports - abstract interfaces для AEAD protocol та serializers.

Це PORTS в Hexagonal Architecture.

Domain layer визначає ЩО потрібно (ці interfaces).
Infrastructure layer імплементує ЯК це зробити (PASETO adapter, JSON serializer).
"""

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

from rotating_encrypter.domain.keys import ProtocolVersion, SymmetricKey


class AeadProtocol(ABC):
    """Authenticated encryption over bytes plus an authenticated footer.

    Footer не шифрується, але входить в authentication tag: змінений footer
    ламає ``open`` так само як змінений ciphertext.

    Implementations must not branch on secret data and must not log key or
    plaintext bytes.
    """

    @abstractmethod
    def generate_key(self, version: ProtocolVersion = ProtocolVersion.V4_LOCAL) -> SymmetricKey:
        """Generate a random key of the length the protocol mandates.

        Args:
            version: Protocol version of the new key.

        Returns:
            Fresh SymmetricKey.
        """
        pass

    @abstractmethod
    def seal(self, plaintext: bytes, key: SymmetricKey, footer: bytes = b"") -> str:
        """Encrypt plaintext and authenticate it together with the footer.

        Args:
            plaintext: Bytes to encrypt.
            key: Key to encrypt with; its version selects the protocol.
            footer: Authenticated, unencrypted trailing data.

        Returns:
            Versioned token text (``v4.local.<payload>[.<footer>]``).
        """
        pass

    @abstractmethod
    def open(self, ciphertext: str, key: SymmetricKey) -> tuple[bytes, bytes]:
        """Verify and decrypt a token.

        Args:
            ciphertext: Token produced by ``seal``.
            key: Key to decrypt with.

        Returns:
            Tuple (plaintext, footer).

        Raises:
            AuthenticationError: Tampered token, wrong key or version mismatch.
        """
        pass


class Serializer(ABC):
    """Pluggable value codec used by ``Encrypter.encrypt``/``decrypt``."""

    @abstractmethod
    def dumps(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Raises:
            SerializationError: If value cannot be serialized.
        """
        pass

    @abstractmethod
    def loads(self, data: bytes) -> Any:
        """Deserialize bytes back into a value.

        Raises:
            SerializationError: If data cannot be deserialized.
        """
        pass


@runtime_checkable
class ValueEncrypter(Protocol):
    """Capability: encrypt/decrypt arbitrary (serializable) values."""

    def encrypt(self, value: Any, serialize: bool = True) -> str: ...

    def decrypt(self, payload: str, unserialize: bool = True) -> Any: ...


@runtime_checkable
class StringEncrypter(Protocol):
    """Capability: encrypt/decrypt strings without serialization."""

    def encrypt_string(self, value: str | bytes) -> str: ...

    def decrypt_string(self, payload: str) -> bytes: ...
