"""Helpers для .env files (read/write через python-dotenv)."""

from pathlib import Path

from dotenv import dotenv_values, set_key


def environment_file(env_file: str, env: str | None = None) -> Path:
    """Resolve ``.env`` or ``.env.<env>`` next to the base env file.

    Args:
        env_file: Base env file path (e.g. ".env").
        env: Optional environment name (e.g. "staging").

    Returns:
        Path to the environment file.
    """
    base = Path(env_file)
    if env:
        return base.parent / f".env.{env}"
    return base


def read_variable(path: Path, name: str) -> str:
    """Read a single variable from an env file ("" if missing)."""
    if not path.exists():
        return ""
    return dotenv_values(path).get(name) or ""


def write_variable(path: Path, name: str, value: str) -> None:
    """Set or append ``NAME=value`` in an env file, creating it if needed."""
    path.touch(exist_ok=True)
    set_key(path, name, value, quote_mode="never")
