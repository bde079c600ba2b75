"""Pytest configuration and fixtures."""

import logging

import pytest
import structlog

from rotating_encrypter.config import get_settings
from rotating_encrypter.infrastructure.encryption import Encrypter, PasetoProtocol, key_codec
from rotating_encrypter.infrastructure.encryption.factory import reset_encrypter

KEY_ENV_VARS = (
    "APP_KEY",
    "APP_PREVIOUS_KEYS",
    "ENV_ENCRYPTION_KEY",
    "ENVIRONMENT",
    "COOKIE_NEVER_ENCRYPT",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Кожен test стартує без ключів в env і без .env в cwd."""
    for name in KEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    reset_encrypter()
    yield
    get_settings.cache_clear()
    reset_encrypter()


@pytest.fixture(autouse=True)
def isolated_logging():
    """CLI tests call setup_logging(); restore root logger and structlog after each test."""
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def protocol():
    return PasetoProtocol()


@pytest.fixture
def app_key():
    """Exported id-carrying key (APP_KEY format)."""
    return key_codec.export_key(Encrypter.generate_key())


@pytest.fixture
def encrypter(app_key):
    return Encrypter.from_config(app_key)
