"""Runtime settings loaded from the environment (and an optional .env file)."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.2
DEFAULT_TIMEOUT = 60
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigError(ValueError):
    """Raised when a required setting is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    timeout: int = DEFAULT_TIMEOUT
    log_level: str = "INFO"


def _number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        dotenv: Read a .env file into the environment first

    Raises:
        ConfigError: GEMINI_API_KEY is unset or a numeric setting is invalid
    """
    if dotenv:
        load_dotenv()

    api_key = (os.environ.get("GEMINI_API_KEY") or "").strip()
    if not api_key:
        raise ConfigError("GEMINI_API_KEY must be set in environment or .env file")

    return Settings(
        api_key=api_key,
        model=os.environ.get("GEMINI_MODEL") or DEFAULT_MODEL,
        temperature=_number("GEMINI_TEMPERATURE", DEFAULT_TEMPERATURE, float),
        timeout=_number("GEMINI_TIMEOUT", DEFAULT_TIMEOUT, int),
        log_level=(os.environ.get("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format=LOG_FORMAT,
    )
