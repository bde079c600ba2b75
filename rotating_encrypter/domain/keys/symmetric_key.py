"""SymmetricKey value object - raw key material + protocol version."""

import hmac
from dataclasses import InitVar, dataclass

from rotating_encrypter.domain.shared import ValueObject, validate_value_object

from .protocol_version import ProtocolVersion


@dataclass(frozen=True, eq=False, repr=False)
class SymmetricKey(ValueObject):
    """Symmetric key для PASETO ``local`` tokens.

    Key material копіюється у власний ``bytearray`` щоб його можна було
    занулити через ``wipe()``. Використання ключа після ``wipe()`` - це bug
    caller'а, runtime перевірок немає.

    Example:
        >>> key = SymmetricKey(secrets.token_bytes(32), ProtocolVersion.V4_LOCAL)
        >>> bytes(key.raw())  # 32 bytes
        >>> key.wipe()
    """

    material: InitVar[bytes]
    """Raw key bytes (copied, not retained)."""

    version: ProtocolVersion = ProtocolVersion.V4_LOCAL
    """Protocol the key belongs to."""

    def __post_init__(self, material: bytes) -> None:
        """Validate length and take a private copy of the material."""
        validate_value_object(
            isinstance(self.version, ProtocolVersion),
            "Key version must be a ProtocolVersion",
        )
        validate_value_object(
            len(material) == self.version.key_size,
            f"Key for {self.version.value} must be {self.version.key_size} bytes",
        )
        object.__setattr__(self, "_buffer", bytearray(material))
        object.__setattr__(self, "_wiped", False)

    @classmethod
    def from_bytes(
        cls,
        material: bytearray,
        version: ProtocolVersion = ProtocolVersion.V4_LOCAL,
    ) -> "SymmetricKey":
        """Create a key from a scratch buffer and zero the buffer.

        The buffer is wiped even when validation fails.

        Raises:
            ValueError: Wrong length or version.
        """
        try:
            return cls(material, version)
        finally:
            material[:] = bytes(len(material))

    def raw(self) -> memoryview:
        """Read-only view of the key bytes.

        Do not keep the view after the key goes out of scope.
        """
        return memoryview(self._buffer).toreadonly()

    def wipe(self) -> None:
        """Zero the key material in place. Irreversible."""
        self._buffer[:] = bytes(len(self._buffer))
        object.__setattr__(self, "_wiped", True)

    @property
    def is_wiped(self) -> bool:
        """True after ``wipe()`` was called."""
        return self._wiped

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymmetricKey):
            return NotImplemented
        same_material = hmac.compare_digest(self._buffer, other._buffer)
        return same_material and self.version == other.version

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SymmetricKey(version={self.version.value!r})"
