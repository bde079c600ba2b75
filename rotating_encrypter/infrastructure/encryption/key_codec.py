"""Key codec - textual key format, key ids and ciphertext footers.

Textual key format:
    v4.local.<keyId>.<base64Key>    (id-carrying, used for APP_KEY)
    v4.local.<base64Key>            (bare, used for encrypted env files)

Keys exported before the purpose was part of the header (``v4.<keyId>.<base64Key>``)
are still accepted by ``parse_key``.

keyId - UUIDv7 в base58 (bitcoin alphabet), padded to 22 chars with "1".
У footer'і ciphertext'у keyId лежить як 16 raw bytes.
"""

import base64
from typing import Literal, overload

import base58
import uuid6

from rotating_encrypter.domain.encryption import InvalidFooterError, MalformedKeyError
from rotating_encrypter.domain.keys import ProtocolVersion, SymmetricKey

KEY_ID_LENGTH = 22
KEY_ID_BYTES = 16


def header(version: ProtocolVersion = ProtocolVersion.V4_LOCAL) -> str:
    """Header prefixed to exported keys."""
    return version.header


def generate_key_id() -> str:
    """Generate a new time-ordered key id.

    UUIDv7 is monotonic within the process; collisions across processes are
    practically impossible but not checked.
    """
    return _encode_key_id(uuid6.uuid7().bytes)


def export_key(key: SymmetricKey, include_id: bool = True) -> str:
    """Serialize a key to its textual form.

    Args:
        key: Key to export.
        include_id: Generate a fresh key id and embed it.

    Returns:
        ``v4.local.<keyId>.<base64Key>`` or ``v4.local.<base64Key>``.
    """
    parts = [header(key.version)]
    if include_id:
        parts.append(generate_key_id())
    parts.append(_b64url_encode(key.raw()))
    return ".".join(parts)


@overload
def parse_key(text: str, expect_id: Literal[True] = ...) -> tuple[SymmetricKey, str]: ...


@overload
def parse_key(text: str, expect_id: Literal[False]) -> SymmetricKey: ...


def parse_key(text: str, expect_id: bool = True):
    """Parse a textual key.

    Args:
        text: Exported key.
        expect_id: Whether the text carries a key id.

    Returns:
        (SymmetricKey, key_id) when expect_id, otherwise SymmetricKey.

    Raises:
        MalformedKeyError: Wrong field count, unknown version, bad base64,
            wrong key size or invalid key id.
    """
    version, rest = _split_header(text)

    fields = rest.split(".")
    expected = 2 if expect_id else 1
    if len(fields) != expected:
        raise MalformedKeyError(
            "Key has an unexpected number of fields",
            expected=expected + 1,
            actual=len(fields) + 1,
        )

    key_id = ""
    if expect_id:
        key_id = fields[0]
        if not key_id:
            raise MalformedKeyError("Key id is missing")
        key_id_to_footer_bytes(key_id, error=MalformedKeyError)

    try:
        key = SymmetricKey.from_bytes(bytearray(_b64decode(fields[-1])), version)
    except ValueError:
        raise MalformedKeyError(
            "Key material is not valid base64 of the required size",
            version=version.value,
        ) from None

    if expect_id:
        return key, key_id
    return key


def extract_key_id(ciphertext: str) -> str:
    """Read the key id from a token footer without decrypting.

    Footer ще не перевірений тут; authentication відбувається в decrypt.

    Args:
        ciphertext: PASETO token.

    Returns:
        Key id, or "" if the token has no footer.

    Raises:
        InvalidFooterError: Token or footer is structurally malformed.
    """
    if not isinstance(ciphertext, str):
        raise InvalidFooterError("Ciphertext must be a string")

    parts = ciphertext.split(".")
    if len(parts) == 3:
        return ""
    if len(parts) != 4:
        raise InvalidFooterError("Ciphertext is not a valid token", segments=len(parts))

    try:
        footer = decode_segment(parts[3])
    except ValueError:
        raise InvalidFooterError("Footer is not canonical base64url") from None
    return footer_bytes_to_key_id(footer)


def key_id_to_footer_bytes(key_id: str, error: type[Exception] = InvalidFooterError) -> bytes:
    """Convert a textual key id into the 16-byte footer.

    Args:
        key_id: base58 key id, or "" for no id.
        error: Exception raised for an invalid id.

    Returns:
        16 raw bytes, or b"" for an empty id.
    """
    if not key_id:
        return b""
    if len(key_id) != KEY_ID_LENGTH:
        raise error("Key id has an invalid length", length=len(key_id))
    try:
        number = base58.b58decode_int(key_id)
        return number.to_bytes(KEY_ID_BYTES, "big")
    except (ValueError, OverflowError):
        raise error("Key id is not valid base58", key_id=key_id) from None


def footer_bytes_to_key_id(footer: bytes) -> str:
    """Convert a 16-byte footer back into the textual key id.

    Raises:
        InvalidFooterError: Footer is not empty and not 16 bytes.
    """
    if not footer:
        return ""
    if len(footer) != KEY_ID_BYTES:
        raise InvalidFooterError("Footer has an invalid length", length=len(footer))
    return _encode_key_id(footer)


def decode_segment(segment: str) -> bytes:
    """Decode a token segment as canonical base64url without padding.

    Only the exact encoding ``encode(decode(segment))`` is accepted, so the
    unused low bits of the last character cannot be altered.

    Raises:
        ValueError: Not base64url, padded, or not canonical.
    """
    try:
        raw = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except ValueError:
        raise ValueError("Segment is not base64url") from None
    if _b64url_encode(raw) != segment:
        raise ValueError("Segment is not canonical base64url")
    return raw


def _encode_key_id(raw: bytes) -> str:
    encoded = base58.b58encode_int(int.from_bytes(raw, "big")).decode("ascii")
    return encoded.rjust(KEY_ID_LENGTH, "1")


def _split_header(text: str) -> tuple[ProtocolVersion, str]:
    if not isinstance(text, str):
        raise MalformedKeyError("Key must be a string")

    head, sep, rest = text.partition(".")
    if not sep:
        raise MalformedKeyError("Key has an unsupported version header")

    # Full header first: "v4.local.<...>" would otherwise parse as legacy "v4"
    purpose, sep, tail = rest.partition(".")
    if sep and ProtocolVersion.is_header(f"{head}.{purpose}"):
        return ProtocolVersion(f"{head}.{purpose}"), tail

    try:
        return ProtocolVersion.from_header(head), rest
    except ValueError:
        raise MalformedKeyError("Key has an unsupported version header") from None


def _b64url_encode(raw: bytes | memoryview) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    """Decode base64 in either alphabet, padding optional."""
    normalized = text.replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(normalized, validate=True)
    except ValueError as exc:
        raise ValueError("Invalid base64") from exc
