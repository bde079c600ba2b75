"""Encrypter wiring from application settings."""

from rotating_encrypter.config import Settings, get_logger, get_settings
from rotating_encrypter.domain.encryption import MissingAppKeyError

from .encrypter import Encrypter

logger = get_logger(__name__)


def build_encrypter(settings: Settings) -> Encrypter:
    """Create an Encrypter from APP_KEY and APP_PREVIOUS_KEYS.

    Args:
        settings: Application settings.

    Returns:
        Configured Encrypter.

    Raises:
        MissingAppKeyError: If APP_KEY is empty.
        MalformedKeyError: If any configured key is malformed.
    """
    if not settings.app_key:
        raise MissingAppKeyError("No application encryption key has been specified.")

    encrypter = Encrypter.from_config(settings.app_key, previous_keys=settings.previous_keys)
    logger.info(
        "encrypter.configured",
        key_id=encrypter.get_key_id(),
        previous_key_count=len(encrypter.get_previous_keys()),
    )
    return encrypter


# Singleton instance
_encrypter: Encrypter | None = None


def get_encrypter() -> Encrypter:
    """Get or create the encrypter singleton."""
    global _encrypter
    if _encrypter is None:
        _encrypter = build_encrypter(get_settings())
    return _encrypter


def reset_encrypter() -> None:
    """Drop the singleton so the next call re-reads settings (config reload)."""
    global _encrypter
    _encrypter = None
