"""Encryption infrastructure.

PASETO-backed Encrypter with key rotation, key codec and serializers.
"""

from . import key_codec
from .encrypter import Encrypter
from .factory import build_encrypter, get_encrypter, reset_encrypter
from .paseto_protocol import PasetoProtocol
from .serializers import JsonSerializer, RawSerializer

__all__ = [
    "Encrypter",
    "PasetoProtocol",
    "JsonSerializer",
    "RawSerializer",
    "key_codec",
    "build_encrypter",
    "get_encrypter",
    "reset_encrypter",
]
