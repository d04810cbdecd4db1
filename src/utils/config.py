"""Application settings read from the environment and an optional .env file."""
import logging
import os
from pathlib import Path
from threading import Lock

logger = logging.getLogger(__name__)

ENV_FILE = ".env"

_ENV_KEYS = {
    "REGISTRATION_DB_FILE",
    "REGISTRATION_INTERESTS_FILE",
    "REGISTRATION_PAGE_SIZE",
    "REGISTRATION_REQUIRE_ACCOUNT",
    "REGISTRATION_PHONE_REGION",
    "REGISTRATION_EVENT_NAME",
    "BCRYPT_ROUNDS",
}

_ENV_LOADED = False
_ENV_LOCK = Lock()


def load_env(force: bool = False) -> None:
    """
    Load known settings from the .env file if present.

    Values already set in the process environment are never overwritten.
    """
    global _ENV_LOADED

    if _ENV_LOADED and not force:
        return

    with _ENV_LOCK:
        if _ENV_LOADED and not force:
            return

        env_path = Path(ENV_FILE)
        if env_path.exists():
            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                if key in _ENV_KEYS and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def _get(key: str, default: str) -> str:
    load_env()
    return os.getenv(key, default)


def _get_int(key: str, default: int) -> int:
    raw = _get(key, str(default))
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", key, raw, default)
        return default
    return value if value > 0 else default


def get_db_file() -> str:
    """Path of the JSON document database."""
    return _get("REGISTRATION_DB_FILE", "data/registration_db.json")


def get_interests_file() -> str:
    """Path of the interest catalogue file."""
    return _get("REGISTRATION_INTERESTS_FILE", "data/interests.json")


def get_page_size() -> int:
    """Number of registrations per dashboard page."""
    return _get_int("REGISTRATION_PAGE_SIZE", 10)


def requires_account() -> bool:
    """True when the public form is only open to signed-in users."""
    return _get("REGISTRATION_REQUIRE_ACCOUNT", "false").strip().lower() in {"1", "true", "yes", "on"}


def get_phone_region() -> str:
    """Region used to parse phone numbers written without an international prefix."""
    return _get("REGISTRATION_PHONE_REGION", "MA").strip().upper()


def get_event_name() -> str:
    return _get("REGISTRATION_EVENT_NAME", "AgriEdge")


def get_bcrypt_rounds() -> int:
    return _get_int("BCRYPT_ROUNDS", 12)
