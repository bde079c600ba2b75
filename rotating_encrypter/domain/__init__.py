"""Domain Layer - key material, ports and error kinds.

This layer contains:
- Value Objects (SymmetricKey, ProtocolVersion)
- Ports (AeadProtocol, Serializer, ValueEncrypter, StringEncrypter)
- Domain Exceptions

Key Principles:
- Zero dependencies on infrastructure
- No key material in reprs, messages or exception context

Bounded Contexts:
- keys: Symmetric key material
- encryption: Encryption ports and error kinds
- shared: Common base classes
"""

from .shared import DomainException, ValueObject

__all__ = [
    "DomainException",
    "ValueObject",
]
