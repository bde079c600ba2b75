"""ValueObject base.

Value objects (ключі, версії протоколу) immutable і визначаються своїм
значенням, а не identity.
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True, eq=True)
class ValueObject(ABC):
    """Base for immutable domain values.

    Subclasses validate in ``__post_init__`` via ``validate_value_object``.
    Values holding secret material override ``__eq__`` / ``__repr__``
    (see ``SymmetricKey``).
    """


def validate_value_object(
    condition: bool,
    message: str,
    error: type[Exception] = ValueError,
) -> None:
    """Raise ``error(message)`` unless condition holds.

    Example:
        >>> validate_value_object(len(material) == 32, "Key must be 32 bytes")
    """
    if not condition:
        raise error(message)
