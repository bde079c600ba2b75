"""CLI commands: key:generate, env:encrypt, env:decrypt.

Usage:
    rotating-encrypter key:generate            # rotate APP_KEY in .env
    rotating-encrypter key:generate --show     # print a new key only
    rotating-encrypter env:encrypt --env staging
    rotating-encrypter env:decrypt --key v4.local.XXXX --env staging
"""

import argparse
import sys
from pathlib import Path

from rotating_encrypter.config import get_logger, get_settings, setup_logging
from rotating_encrypter.domain.encryption import EncryptionError
from rotating_encrypter.infrastructure.encryption import Encrypter, key_codec

from .env_file import environment_file, read_variable, write_variable

logger = get_logger(__name__)

SUCCESS = 0
FAILURE = 1


def key_generate(args: argparse.Namespace) -> int:
    """Generate a new APP_KEY and move the old one into APP_PREVIOUS_KEYS."""
    key = key_codec.export_key(Encrypter.generate_key())

    if args.show:
        print(key)
        return SUCCESS

    env_path = Path(args.env_file)
    current_key = read_variable(env_path, "APP_KEY")

    if current_key and get_settings().is_production and not args.force:
        _error("Application is in production. Use --force to replace the key.")
        return FAILURE

    write_variable(env_path, "APP_KEY", key)

    # Old key stays available for decryption of existing payloads
    if current_key:
        previous = [
            item.strip()
            for item in read_variable(env_path, "APP_PREVIOUS_KEYS").split(",")
            if item.strip()
        ]
        previous.append(current_key)
        write_variable(env_path, "APP_PREVIOUS_KEYS", ",".join(previous))

    logger.info("cli.key_generate.completed", env_file=str(env_path), rotated=bool(current_key))
    print("Application key set successfully.")
    return SUCCESS


def env_encrypt(args: argparse.Namespace) -> int:
    """Encrypt an environment file."""
    key = args.key or key_codec.export_key(Encrypter.generate_key(), include_id=False)

    env_path = environment_file(args.env_file, args.env)
    encrypted_path = env_path.with_name(env_path.name + ".encrypted")

    if not env_path.exists():
        _error("Environment file not found.")
        return FAILURE

    if encrypted_path.exists() and not args.force:
        _error("Encrypted environment file already exists.")
        return FAILURE

    try:
        encrypter = Encrypter(key_codec.parse_key(key, expect_id=False))
        encrypted_path.write_text(
            encrypter.encrypt_string(env_path.read_text(encoding="utf-8")),
            encoding="utf-8",
        )
    except EncryptionError as e:
        _error(str(e))
        return FAILURE

    if args.prune:
        env_path.unlink()

    logger.info("cli.env_encrypt.completed", encrypted_file=str(encrypted_path))
    print("Environment successfully encrypted.")
    print(f"  Key ............ {key}")
    print(f"  Encrypted file . {encrypted_path}")
    return SUCCESS


def env_decrypt(args: argparse.Namespace) -> int:
    """Decrypt an environment file."""
    key = args.key or get_settings().env_encryption_key

    if not key:
        _error("A decryption key is required.")
        return FAILURE

    env_path = environment_file(args.env_file, args.env)
    encrypted_path = env_path.with_name(env_path.name + ".encrypted")
    output_path = _output_file_path(args, env_path)

    if output_path.name.endswith(".encrypted"):
        _error("Invalid filename.")
        return FAILURE

    if not encrypted_path.exists():
        _error("Encrypted environment file not found.")
        return FAILURE

    if output_path.exists() and not args.force:
        _error("Environment file already exists.")
        return FAILURE

    try:
        encrypter = Encrypter(key_codec.parse_key(key, expect_id=False))
        output_path.write_text(
            encrypter.decrypt_string(encrypted_path.read_text(encoding="utf-8")).decode("utf-8"),
            encoding="utf-8",
        )
    except EncryptionError as e:
        _error(str(e))
        return FAILURE
    except UnicodeDecodeError:
        _error("Decrypted environment file is not valid UTF-8.")
        return FAILURE

    logger.info("cli.env_decrypt.completed", decrypted_file=str(output_path))
    print("Environment successfully decrypted.")
    print(f"  Decrypted file . {output_path}")
    return SUCCESS


def _output_file_path(args: argparse.Namespace, env_path: Path) -> Path:
    directory = Path(args.path) if args.path else env_path.parent
    filename = args.filename or (".env" + (f".{args.env}" if args.env else ""))
    return directory / filename.lstrip("/")


def _error(message: str) -> None:
    print(f"ERROR  {message}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="rotating-encrypter",
        description="Manage encryption keys and encrypted environment files",
    )
    parser.add_argument("--env-file", default=".env", help="Path to the base .env file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("key:generate", help="Set the application key")
    generate.add_argument("--show", action="store_true", help="Display the key instead of modifying files")
    generate.add_argument("--force", action="store_true", help="Force the operation to run when in production")
    generate.set_defaults(handler=key_generate)

    encrypt = subparsers.add_parser("env:encrypt", help="Encrypt an environment file")
    encrypt.add_argument("--key", help="The encryption key")
    encrypt.add_argument("--env", help="The environment to be encrypted")
    encrypt.add_argument("--prune", action="store_true", help="Delete the original environment file")
    encrypt.add_argument("--force", action="store_true", help="Overwrite the existing encrypted environment file")
    encrypt.set_defaults(handler=env_encrypt)

    decrypt = subparsers.add_parser("env:decrypt", help="Decrypt an environment file")
    decrypt.add_argument("--key", help="The encryption key")
    decrypt.add_argument("--env", help="The environment to be decrypted")
    decrypt.add_argument("--force", action="store_true", help="Overwrite the existing environment file")
    decrypt.add_argument("--path", help="Path to write the decrypted file")
    decrypt.add_argument("--filename", help="Filename of the decrypted file")
    decrypt.set_defaults(handler=env_decrypt)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging()
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
