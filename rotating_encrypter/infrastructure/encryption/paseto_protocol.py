"""PASETO adapter - AeadProtocol implementation backed by pyseto.

PASETO ``local`` tokens: ``v4.local.<payload>[.<footer>]``, footer
authenticated but not encrypted. Crypto itself лежить в pyseto; тут тільки
перетворення між domain SymmetricKey і pyseto Key.
"""

import secrets

import pyseto
from pyseto import Key

from rotating_encrypter.domain.encryption import AeadProtocol, AuthenticationError
from rotating_encrypter.domain.keys import ProtocolVersion, SymmetricKey

from .key_codec import decode_segment


class PasetoProtocol(AeadProtocol):
    """PASETO v3/v4 ``local`` protocol.

    Example:
        >>> protocol = PasetoProtocol()
        >>> key = protocol.generate_key()
        >>> token = protocol.seal(b"secret", key, footer=b"")
        >>> protocol.open(token, key)  # (b"secret", b"")
    """

    def generate_key(self, version: ProtocolVersion = ProtocolVersion.V4_LOCAL) -> SymmetricKey:
        return SymmetricKey.from_bytes(bytearray(secrets.token_bytes(version.key_size)), version)

    def seal(self, plaintext: bytes, key: SymmetricKey, footer: bytes = b"") -> str:
        token = pyseto.encode(_to_paseto_key(key), bytes(plaintext), footer=footer)
        return token.decode("ascii")

    def open(self, ciphertext: str, key: SymmetricKey) -> tuple[bytes, bytes]:
        try:
            _check_segments(ciphertext)
            token = pyseto.decode(_to_paseto_key(key), ciphertext)
        except (pyseto.PysetoError, ValueError):
            raise AuthenticationError("Token could not be authenticated") from None
        return token.payload, token.footer


def _to_paseto_key(key: SymmetricKey) -> Key:
    return Key.new(version=key.version.number, purpose="local", key=bytes(key.raw()))


def _check_segments(ciphertext: str) -> None:
    """Reject payload/footer segments that are not canonical base64url.

    pyseto ignores the spare low bits of the last character.
    """
    if not isinstance(ciphertext, str):
        raise ValueError("Token must be a string")
    segments = ciphertext.split(".")
    if len(segments) not in (3, 4):
        raise ValueError("Token must have 3 or 4 segments")
    for segment in segments[2:]:
        decode_segment(segment)
