"""E2E tests for CLI commands (key:generate, env:encrypt, env:decrypt)."""

import pytest
from dotenv import dotenv_values

from rotating_encrypter.config import get_settings
from rotating_encrypter.infrastructure.encryption import Encrypter, key_codec
from rotating_encrypter.presentation.cli import main


@pytest.fixture
def project(tmp_path):
    """Project directory з .env файлом."""
    directory = tmp_path / "project"
    directory.mkdir()
    (directory / ".env").write_text("APP_NAME=demo\nDB_PASSWORD=hunter2\n", encoding="utf-8")
    return directory


@pytest.fixture
def env_key():
    """Bare key для env:encrypt / env:decrypt."""
    return key_codec.export_key(Encrypter.generate_key(), include_id=False)


class TestKeyGenerate:
    """Tests для key:generate."""

    def test_show_prints_key_only(self, project, capsys):
        """Test: --show друкує key і не змінює .env."""
        # Act
        exit_code = main(["--env-file", str(project / ".env"), "key:generate", "--show"])

        # Assert
        printed = capsys.readouterr().out.strip()
        assert exit_code == 0
        _, key_id = key_codec.parse_key(printed)
        assert key_id
        assert "APP_KEY" not in (project / ".env").read_text(encoding="utf-8")

    def test_writes_app_key(self, project):
        """Test: APP_KEY записується, інші змінні лишаються."""
        # Act
        exit_code = main(["--env-file", str(project / ".env"), "key:generate"])

        # Assert
        values = dotenv_values(project / ".env")
        assert exit_code == 0
        assert values["APP_NAME"] == "demo"
        key_codec.parse_key(values["APP_KEY"])
        assert "APP_PREVIOUS_KEYS" not in values

    def test_rotation_moves_old_key_to_previous(self, project):
        """Test: Кожна rotation додає старий APP_KEY в кінець APP_PREVIOUS_KEYS."""
        # 1. First key and a token under it
        env_file = str(project / ".env")
        main(["--env-file", env_file, "key:generate"])
        first = dotenv_values(project / ".env")["APP_KEY"]
        token = Encrypter.from_config(first).encrypt("x")

        # 2. Two rotations
        main(["--env-file", env_file, "key:generate"])
        second = dotenv_values(project / ".env")["APP_KEY"]
        main(["--env-file", env_file, "key:generate"])

        # 3. Previous keys in rotation order, old token still decrypts
        values = dotenv_values(project / ".env")
        assert values["APP_PREVIOUS_KEYS"].split(",") == [first, second]
        encrypter = Encrypter.from_config(values["APP_KEY"], values["APP_PREVIOUS_KEYS"].split(","))
        assert encrypter.decrypt(token) == "x"

    def test_creates_missing_env_file(self, tmp_path):
        """Test: Відсутній .env створюється."""
        # Arrange
        env_file = tmp_path / "fresh" / ".env"
        env_file.parent.mkdir()

        # Act & Assert
        assert main(["--env-file", str(env_file), "key:generate"]) == 0
        assert "APP_KEY" in dotenv_values(env_file)

    def test_production_requires_force(self, project, monkeypatch, capsys):
        """Test: В production rotation без --force відхиляється."""
        # Arrange
        env_file = str(project / ".env")
        main(["--env-file", env_file, "key:generate"])
        current = dotenv_values(project / ".env")["APP_KEY"]
        monkeypatch.setenv("ENVIRONMENT", "production")
        get_settings.cache_clear()

        # Act & Assert: without --force
        assert main(["--env-file", env_file, "key:generate"]) == 1
        assert "--force" in capsys.readouterr().err
        assert dotenv_values(project / ".env")["APP_KEY"] == current

        # Act & Assert: with --force
        assert main(["--env-file", env_file, "key:generate", "--force"]) == 0
        assert dotenv_values(project / ".env")["APP_KEY"] != current


class TestEnvEncryptDecrypt:
    """Tests для env:encrypt / env:decrypt."""

    def test_round_trip(self, project, env_key):
        """Test: encrypt → decrypt відновлює файл байт в байт."""
        # 1. Encrypt
        env_file = str(project / ".env")
        original = (project / ".env").read_text(encoding="utf-8")
        assert main(["--env-file", env_file, "env:encrypt", "--key", env_key]) == 0
        encrypted = (project / ".env.encrypted").read_text(encoding="utf-8")
        assert encrypted.startswith("v4.local.")
        assert "hunter2" not in encrypted

        # 2. Decrypt into another file
        assert main(["--env-file", env_file, "env:decrypt", "--key", env_key, "--filename", ".env.restored"]) == 0
        assert (project / ".env.restored").read_text(encoding="utf-8") == original

    def test_named_environment_and_prune(self, project, env_key):
        """Test: --env staging і --prune видаляє plaintext файл."""
        # Arrange
        (project / ".env.staging").write_text("STAGE=1\n", encoding="utf-8")
        env_file = str(project / ".env")

        # Act & Assert: encrypt and prune
        assert main(["--env-file", env_file, "env:encrypt", "--env", "staging", "--key", env_key, "--prune"]) == 0
        assert not (project / ".env.staging").exists()
        assert (project / ".env.staging.encrypted").exists()

        # Act & Assert: decrypt restores it
        assert main(["--env-file", env_file, "env:decrypt", "--env", "staging", "--key", env_key]) == 0
        assert (project / ".env.staging").read_text(encoding="utf-8") == "STAGE=1\n"

    def test_encrypt_generates_key_when_missing(self, project, capsys):
        """Test: Без --key генерується bare key і друкується."""
        # Act
        assert main(["--env-file", str(project / ".env"), "env:encrypt"]) == 0

        # Assert
        out = capsys.readouterr().out
        key_line = next(line for line in out.splitlines() if line.strip().startswith("Key"))
        key = key_line.split()[-1]
        encrypter = Encrypter(key_codec.parse_key(key, expect_id=False))
        encrypted = (project / ".env.encrypted").read_text(encoding="utf-8")
        assert b"DB_PASSWORD=hunter2" in encrypter.decrypt_string(encrypted)

    def test_encrypt_refuses_to_overwrite(self, project, env_key):
        """Test: Існуючий .encrypted перезаписується тільки з --force."""
        # Arrange
        env_file = str(project / ".env")
        main(["--env-file", env_file, "env:encrypt", "--key", env_key])

        # Act & Assert
        assert main(["--env-file", env_file, "env:encrypt", "--key", env_key]) == 1
        assert main(["--env-file", env_file, "env:encrypt", "--key", env_key, "--force"]) == 0

    def test_encrypt_missing_file_fails(self, tmp_path, env_key):
        """Test: Відсутній env file - exit code 1."""
        assert main(["--env-file", str(tmp_path / "missing" / ".env"), "env:encrypt", "--key", env_key]) == 1

    def test_encrypt_with_malformed_key_fails(self, project, capsys):
        """Test: Malformed --key - помилка в stderr."""
        assert main(["--env-file", str(project / ".env"), "env:encrypt", "--key", "v4.local.nope"]) == 1
        assert "ERROR" in capsys.readouterr().err

    def test_decrypt_requires_key(self, project, capsys):
        """Test: env:decrypt без key - помилка."""
        assert main(["--env-file", str(project / ".env"), "env:decrypt"]) == 1
        assert "A decryption key is required." in capsys.readouterr().err

    def test_decrypt_uses_key_from_environment(self, project, env_key, monkeypatch):
        """Test: ENV_ENCRYPTION_KEY використовується без --key."""
        # Arrange
        env_file = str(project / ".env")
        main(["--env-file", env_file, "env:encrypt", "--key", env_key])
        monkeypatch.setenv("ENV_ENCRYPTION_KEY", env_key)
        get_settings.cache_clear()

        # Act & Assert
        assert main(["--env-file", env_file, "env:decrypt", "--filename", ".env.copy"]) == 0

    def test_decrypt_with_wrong_key_fails(self, project, env_key, capsys):
        """Test: Чужий key - "The payload is invalid.", файл не створюється."""
        # Arrange
        env_file = str(project / ".env")
        main(["--env-file", env_file, "env:encrypt", "--key", env_key])
        wrong = key_codec.export_key(Encrypter.generate_key(), include_id=False)

        # Act
        exit_code = main(["--env-file", env_file, "env:decrypt", "--key", wrong, "--filename", ".env.copy"])

        # Assert
        assert exit_code == 1
        assert "The payload is invalid." in capsys.readouterr().err
        assert not (project / ".env.copy").exists()

    def test_decrypt_of_non_utf8_plaintext_fails(self, project, env_key, capsys):
        """Test: Розшифрований вміст не UTF-8 - помилка, файл не створюється."""
        # Arrange
        encrypter = Encrypter(key_codec.parse_key(env_key, expect_id=False))
        (project / ".env.encrypted").write_text(encrypter.encrypt_string(b"\xff\x00"), encoding="utf-8")

        # Act
        exit_code = main(
            ["--env-file", str(project / ".env"), "env:decrypt", "--key", env_key, "--filename", ".env.copy"]
        )

        # Assert
        assert exit_code == 1
        assert "not valid UTF-8" in capsys.readouterr().err
        assert not (project / ".env.copy").exists()

    def test_decrypt_refuses_encrypted_filename(self, project, env_key, capsys):
        """Test: --filename з суфіксом .encrypted відхиляється."""
        # Arrange
        env_file = str(project / ".env")
        main(["--env-file", env_file, "env:encrypt", "--key", env_key])

        # Act & Assert
        assert main(["--env-file", env_file, "env:decrypt", "--key", env_key, "--filename", "x.encrypted"]) == 1
        assert "Invalid filename." in capsys.readouterr().err

    def test_decrypt_refuses_to_overwrite(self, project, env_key):
        """Test: Існуючий .env перезаписується тільки з --force."""
        # Arrange
        env_file = str(project / ".env")
        main(["--env-file", env_file, "env:encrypt", "--key", env_key])

        # Act & Assert
        assert main(["--env-file", env_file, "env:decrypt", "--key", env_key]) == 1
        assert main(["--env-file", env_file, "env:decrypt", "--key", env_key, "--force"]) == 0

    def test_decrypt_to_custom_path(self, project, tmp_path, env_key):
        """Test: --path пише розшифрований файл в інший каталог."""
        # Arrange
        env_file = str(project / ".env")
        output_dir = tmp_path / "out"
        output_dir.mkdir()
        main(["--env-file", env_file, "env:encrypt", "--key", env_key])

        # Act & Assert
        assert main(["--env-file", env_file, "env:decrypt", "--key", env_key, "--path", str(output_dir)]) == 0
        assert (output_dir / ".env").exists()
