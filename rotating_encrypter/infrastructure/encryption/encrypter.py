"""Encrypter - authenticated encryption with key rotation.

Кожен ciphertext несе id ключа в authenticated footer. При decrypt id
читається з footer'а і ключ обирається так:

1. Footer порожній або id == current key id → current key
2. Інакше шукаємо в previous keys
3. Не знайдено → fail

Rotation без re-encryption: новий ключ стає current, старий переходить в
previous keys (APP_PREVIOUS_KEYS), старі ciphertexts і далі розшифровуються.

Thread safety:
    encrypt/decrypt не змінюють state і можуть викликатись паралельно.
    set_previous_keys публікує новий dict одним присвоєнням, тому readers
    бачать або старий, або повний новий набір ключів. Writers серіалізуються
    через lock.
"""

import threading
from collections.abc import Iterable
from typing import Any

from rotating_encrypter.config import get_logger
from rotating_encrypter.domain.encryption import (
    AeadProtocol,
    DecryptError,
    EncryptError,
    KeyNotFoundError,
    MalformedKeyError,
    Serializer,
)
from rotating_encrypter.domain.keys import ProtocolVersion, SymmetricKey

from . import key_codec
from .paseto_protocol import PasetoProtocol
from .serializers import JsonSerializer, RawSerializer

logger = get_logger(__name__)

DECRYPT_ERROR_MESSAGE = "The payload is invalid."
ENCRYPT_ERROR_MESSAGE = "Could not encrypt the data."


class Encrypter:
    """Encrypts values with the current key, decrypts with current or previous keys.

    Implements both ValueEncrypter (encrypt/decrypt) and StringEncrypter
    (encrypt_string/decrypt_string).

    Example:
        >>> encrypter = Encrypter.from_config(
        ...     settings.app_key,
        ...     previous_keys=settings.previous_keys,
        ... )
        >>> token = encrypter.encrypt({"user_id": 1})
        >>> encrypter.decrypt(token)  # {"user_id": 1}
    """

    def __init__(
        self,
        key: SymmetricKey,
        key_id: str = "",
        protocol: AeadProtocol | None = None,
        serializer: Serializer | None = None,
    ) -> None:
        """Initialize encrypter.

        Args:
            key: Current encryption key.
            key_id: Id of the current key; "" disables rotation support.
            protocol: AEAD implementation (PASETO by default).
            serializer: Codec for ``encrypt(value, serialize=True)`` (JSON by default).

        Raises:
            MalformedKeyError: If key_id is not a valid key id.
        """
        self._key = key
        self._key_id = key_id
        self._key_id_raw = key_codec.key_id_to_footer_bytes(key_id, error=MalformedKeyError)
        self._protocol = protocol or PasetoProtocol()
        self._serializer = serializer or JsonSerializer()
        self._raw_serializer = RawSerializer()
        self._previous_keys: dict[str, SymmetricKey] = {}
        self._write_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        key: str,
        previous_keys: Iterable[str] = (),
        protocol: AeadProtocol | None = None,
        serializer: Serializer | None = None,
    ) -> "Encrypter":
        """Build an encrypter from exported (id-carrying) keys.

        Args:
            key: Current key text (APP_KEY).
            previous_keys: Retired key texts, oldest first (APP_PREVIOUS_KEYS).
            protocol: AEAD implementation.
            serializer: Value codec.

        Raises:
            MalformedKeyError: If any key text is malformed.
        """
        current, key_id = key_codec.parse_key(key)
        encrypter = cls(current, key_id, protocol=protocol, serializer=serializer)
        return encrypter.set_previous_keys(previous_keys)

    @staticmethod
    def generate_key(
        version: ProtocolVersion = ProtocolVersion.V4_LOCAL,
        protocol: AeadProtocol | None = None,
    ) -> SymmetricKey:
        """Generate a fresh random key."""
        return (protocol or PasetoProtocol()).generate_key(version)

    # --- ENCRYPT ---

    def encrypt(self, value: Any, serialize: bool = True) -> str:
        """Encrypt the given value.

        Args:
            value: Value to encrypt. Without serialization it must be str or bytes.
            serialize: Run value through the serializer first.

        Returns:
            Ciphertext with the current key id in its footer.

        Raises:
            EncryptError: Serialization or encryption failed (cause chained).
        """
        codec = self._serializer if serialize else self._raw_serializer
        try:
            plaintext = codec.dumps(value)
            return self._protocol.seal(plaintext, self._key, self._key_id_raw)
        except Exception as e:
            logger.warning("encrypter.encrypt.failed", error_type=type(e).__name__)
            raise EncryptError(ENCRYPT_ERROR_MESSAGE) from e

    def encrypt_string(self, value: str | bytes) -> str:
        """Encrypt a string without serialization."""
        return self.encrypt(value, serialize=False)

    # --- DECRYPT ---

    def decrypt(self, payload: str, unserialize: bool = True) -> Any:
        """Decrypt the given payload.

        Args:
            payload: Ciphertext produced by ``encrypt``.
            unserialize: Run plaintext through the serializer. Without it the
                raw plaintext bytes are returned.

        Returns:
            Decrypted value.

        Raises:
            DecryptError: For any failure. Unknown key id, malformed footer,
                failed authentication and bad serialization look the same.
        """
        codec = self._serializer if unserialize else self._raw_serializer
        try:
            key = self._get_key_by_id(key_codec.extract_key_id(payload))
            plaintext, _ = self._protocol.open(payload, key)
            return codec.loads(plaintext)
        except Exception:
            logger.debug("encrypter.decrypt.failed")
            raise DecryptError(DECRYPT_ERROR_MESSAGE) from None

    def decrypt_string(self, payload: str) -> bytes:
        """Decrypt a payload encrypted with ``encrypt_string``.

        Returns the raw plaintext bytes; callers that stored text decode them.
        """
        return self.decrypt(payload, unserialize=False)

    # --- KEYS ---

    def get_key(self) -> SymmetricKey:
        """Get the encryption key that the encrypter is currently using."""
        return self._key

    def get_key_id(self) -> str:
        """Id of the current key ("" in single-key mode)."""
        return self._key_id

    def get_all_keys(self) -> list[SymmetricKey]:
        """Get the current encryption key and all previous encryption keys."""
        return [self._key, *self._previous_keys.values()]

    def get_previous_keys(self) -> dict[str, SymmetricKey]:
        """Get the previous encryption keys by id, in rotation order."""
        return dict(self._previous_keys)

    def set_previous_keys(self, keys: Iterable[str]) -> "Encrypter":
        """Register previous / legacy keys used to decrypt older payloads.

        Keys are only added, never removed. A key whose id is already known
        replaces the earlier one; the replaced key is wiped unless the
        published snapshot still holds it. Safe to call from several threads.

        Args:
            keys: Exported id-carrying keys.

        Returns:
            self, for chaining.

        Raises:
            MalformedKeyError: If any key is malformed; nothing is registered then.
        """
        with self._write_lock:
            live = self._previous_keys
            updated = dict(live)
            try:
                for text in keys:
                    key, key_id = key_codec.parse_key(text)
                    replaced = updated.get(key_id)
                    if replaced is not None:
                        logger.warning("encrypter.previous_keys.duplicate_id", key_id=key_id)
                        if not _holds(live, replaced):
                            replaced.wipe()
                    updated[key_id] = key
            except MalformedKeyError:
                for key in updated.values():
                    if not _holds(live, key):
                        key.wipe()
                raise

            self._previous_keys = updated

        logger.debug("encrypter.previous_keys.loaded", count=len(updated))
        return self

    def _get_key_by_id(self, key_id: str) -> SymmetricKey:
        if not key_id or key_id == self._key_id:
            return self._key

        key = self._previous_keys.get(key_id)
        if key is None:
            raise KeyNotFoundError("Encryption key was not found.", key_id=key_id)
        return key


def _holds(keys: dict[str, SymmetricKey], key: SymmetricKey) -> bool:
    return any(candidate is key for candidate in keys.values())
