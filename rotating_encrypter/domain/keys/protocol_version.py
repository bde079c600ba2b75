"""Protocol Version - PASETO version tags supported for symmetric keys."""

from enum import Enum


class ProtocolVersion(str, Enum):
    """PASETO ``local`` (symmetric) protocol versions.

    Value is the full token header without the trailing dot, the same text
    that prefixes exported keys and ciphertexts:
    - V4_LOCAL: XChaCha20 + BLAKE2b-MAC (default)
    - V3_LOCAL: AES-256-CTR + HMAC-SHA384

    Both versions use 32-byte keys.
    """

    V3_LOCAL = "v3.local"
    V4_LOCAL = "v4.local"

    @property
    def header(self) -> str:
        """Header used for exported keys (``v4.local``)."""
        return self.value

    @property
    def legacy_header(self) -> str:
        """Short header part (``v4``) found in keys exported without purpose."""
        return self.value.split(".", 1)[0]

    @property
    def number(self) -> int:
        """Numeric PASETO version (3 or 4)."""
        return int(self.legacy_header[1:])

    @property
    def key_size(self) -> int:
        """Required raw key length in bytes."""
        return 32

    @classmethod
    def is_header(cls, header: str) -> bool:
        """True if header is a full (``v4.local``) header."""
        return header in {version.header for version in cls}

    @classmethod
    def from_header(cls, header: str) -> "ProtocolVersion":
        """Resolve a version from a full (``v4.local``) or legacy (``v4``) header.

        Args:
            header: Header text.

        Returns:
            Matching ProtocolVersion.

        Raises:
            ValueError: If header is not supported.
        """
        for version in cls:
            if header in (version.header, version.legacy_header):
                return version
        raise ValueError(f"Unsupported protocol version: {header!r}")
