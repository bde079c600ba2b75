"""Base domain exception.

Domain layer не знає про infrastructure, тому всі помилки ключів і
payloads наслідуються від DomainException.
"""

from typing import Any


class DomainException(Exception):
    """Error with a human-readable message and non-secret context.

    Context goes into ``str()`` and logs, so it may carry ids, versions,
    lengths and type names but never key material or plaintext.

    Example:
        >>> raise KeyNotFoundError("Encryption key was not found.", key_id="1BpD...")
    """

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{name}={value}" for name, value in self.context.items())
        return f"{self.message} ({details})"
