"""Keys bounded context - symmetric key material and protocol versions."""

from .protocol_version import ProtocolVersion
from .symmetric_key import SymmetricKey

__all__ = ["ProtocolVersion", "SymmetricKey"]
