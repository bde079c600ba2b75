"""Unit tests для encrypter wiring з settings."""

import pytest

from rotating_encrypter.config import Settings, get_settings
from rotating_encrypter.domain.encryption import MalformedKeyError, MissingAppKeyError
from rotating_encrypter.infrastructure.encryption import (
    Encrypter,
    build_encrypter,
    get_encrypter,
    key_codec,
    reset_encrypter,
)


class TestBuildEncrypter:
    """Tests для build_encrypter()."""

    def test_without_app_key_raises(self):
        """Test: Порожній APP_KEY - MissingAppKeyError."""
        with pytest.raises(MissingAppKeyError):
            build_encrypter(Settings(app_key=""))

    def test_with_malformed_app_key_raises(self):
        """Test: Malformed APP_KEY - MalformedKeyError."""
        with pytest.raises(MalformedKeyError):
            build_encrypter(Settings(app_key="v4.local.nope"))

    def test_with_previous_keys(self, app_key):
        """Test: APP_PREVIOUS_KEYS реєструються в порядку."""
        # Arrange
        previous = [key_codec.export_key(Encrypter.generate_key()) for _ in range(2)]

        # Act
        encrypter = build_encrypter(Settings(app_key=app_key, app_previous_keys=",".join(previous)))

        # Assert
        assert encrypter.get_key_id() == key_codec.parse_key(app_key)[1]
        assert list(encrypter.get_previous_keys()) == [key_codec.parse_key(p)[1] for p in previous]


class TestGetEncrypter:
    """Tests для process-wide encrypter."""

    def test_reads_environment(self, monkeypatch, app_key):
        """Test: get_encrypter() будує encrypter з env один раз."""
        # Arrange
        monkeypatch.setenv("APP_KEY", app_key)

        # Act
        encrypter = get_encrypter()

        # Assert
        assert encrypter is get_encrypter()
        assert encrypter.get_key() == key_codec.parse_key(app_key)[0]

    def test_reset_reloads_after_rotation(self, monkeypatch, app_key):
        """Test: Після rotation і reset старі tokens розшифровуються новим encrypter."""
        # Arrange
        monkeypatch.setenv("APP_KEY", app_key)
        first = get_encrypter()
        rotated = key_codec.export_key(Encrypter.generate_key())
        monkeypatch.setenv("APP_KEY", rotated)
        monkeypatch.setenv("APP_PREVIOUS_KEYS", app_key)
        get_settings.cache_clear()

        # Act
        reset_encrypter()
        second = get_encrypter()

        # Assert
        assert second is not first
        assert second.decrypt(first.encrypt("x")) == "x"
