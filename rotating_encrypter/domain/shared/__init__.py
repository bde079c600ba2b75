"""Shared Kernel - base classes для всієї domain layer.

- ValueObject: Immutable об'єкт порівнюваний за значенням
- DomainException: Порушення правил domain
"""

from .exceptions import DomainException
from .value_object import ValueObject, validate_value_object

__all__ = [
    "ValueObject",
    "validate_value_object",
    "DomainException",
]
