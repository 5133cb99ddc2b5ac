import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from dotenv import dotenv_values

from .logging import get_logger
from .sizes.constants import DEFAULT_TOLERANCE

log = get_logger("config")

DEFAULT_ALLOW_ORIGINS: Tuple[str, ...] = ("http://localhost:5173", "http://127.0.0.1:5173")


@dataclass(frozen=True)
class SizeSettings:
    tolerance: float = DEFAULT_TOLERANCE
    locale_code: str = "uk"
    allow_origins: Tuple[str, ...] = DEFAULT_ALLOW_ORIGINS


def _find_upwards(start_dir: str, filename: str) -> Optional[str]:
    """Return first matching file found when walking up from start_dir.

    This makes running tools from subdirectories (e.g., `src/`) still find
    repository-level config files like `.env`.
    """
    d = os.path.abspath(start_dir or ".")
    while True:
        candidate = os.path.join(d, filename)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(d)
        if parent == d:
            return None
        d = parent


def _read_dotenv(dotenv_dir: str) -> Dict[str, str]:
    """Return key/value pairs from the nearest .env without touching os.environ."""
    path = _find_upwards(dotenv_dir, ".env")
    if not path:
        log.debug(f"No .env found starting from: {os.path.abspath(dotenv_dir)}")
        return {}
    values = {k: v for k, v in dotenv_values(path).items() if v is not None}
    log.debug(f"Loaded {len(values)} key(s) from .env at {path}")
    return values


def _lookup(key: str, env: Dict[str, str]) -> Optional[str]:
    v = os.environ.get(key)
    if v is None:
        v = env.get(key)
    if v is None:
        return None
    v = v.strip()
    return v or None


def load_tolerance(env: Dict[str, str]) -> float:
    raw = _lookup("SIZE_MATCH_TOLERANCE", env)
    if raw is None:
        return DEFAULT_TOLERANCE
    try:
        value = float(raw)
    except ValueError:
        log.warning(f"SIZE_MATCH_TOLERANCE={raw!r} is not a number; using {DEFAULT_TOLERANCE}")
        return DEFAULT_TOLERANCE
    if not value > 0:
        log.warning(f"SIZE_MATCH_TOLERANCE must be positive; using {DEFAULT_TOLERANCE}")
        return DEFAULT_TOLERANCE
    return value


def load_allow_origins(env: Dict[str, str]) -> Tuple[str, ...]:
    raw = _lookup("SIZES_API_ORIGINS", env)
    if raw is None:
        return DEFAULT_ALLOW_ORIGINS
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or DEFAULT_ALLOW_ORIGINS


def load_settings(start_dir: Optional[str] = None) -> SizeSettings:
    """Resolve settings from the environment, then the nearest .env."""
    env = _read_dotenv(start_dir or os.getcwd())
    settings = SizeSettings(
        tolerance=load_tolerance(env),
        locale_code=(_lookup("SIZE_LOCALE", env) or "uk").lower(),
        allow_origins=load_allow_origins(env),
    )
    log.debug(f"Size settings: {settings}")
    return settings
