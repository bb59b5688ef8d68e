"""Runtime configuration from a `.env` file and SKYPHASE_* environment variables."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).parent.parent.parent

DEFAULT_CACHE_SIZE = 60
DEFAULT_EPHEMERIS = "de421.bsp"


@dataclass(frozen=True)
class Settings:
    """Engine settings. Build with `load_settings()` or directly in tests."""

    data_dir: Path = _ROOT / "resources"  # skyfield download/cache directory
    ephemeris_file: str = DEFAULT_EPHEMERIS  # JPL kernel loaded by skyfield
    cache_size: int = DEFAULT_CACHE_SIZE  # Max cached (timezone, day) entries
    log_level: str = "WARNING"


def _int_env(name: str, default: int, minimum: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", name, raw, default)
        return default
    if value < minimum:
        logger.warning("Ignoring %s=%d: below minimum %d, using %d", name, value, minimum, default)
        return default
    return value


def load_settings(dotenv: bool = True, env_file: str | Path | None = None) -> Settings:
    """Read settings from the environment.

    Args:
        dotenv: Load a `.env` file first (existing environment variables win).
        env_file: Explicit `.env` path; by default python-dotenv searches upward
            from this package.

    Returns:
        Settings populated from SKYPHASE_DATA_DIR, SKYPHASE_EPHEMERIS,
        SKYPHASE_CACHE_SIZE and SKYPHASE_LOG_LEVEL.
    """
    if dotenv:
        load_dotenv(env_file)

    data_dir = os.environ.get("SKYPHASE_DATA_DIR")
    return Settings(
        data_dir=Path(data_dir) if data_dir else _ROOT / "resources",
        ephemeris_file=os.environ.get("SKYPHASE_EPHEMERIS") or DEFAULT_EPHEMERIS,
        cache_size=_int_env("SKYPHASE_CACHE_SIZE", DEFAULT_CACHE_SIZE, minimum=1),
        log_level=(os.environ.get("SKYPHASE_LOG_LEVEL") or "WARNING").upper(),
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Install a basic stderr handler at the configured level. Opt-in for applications."""
    level = (settings or load_settings()).log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
