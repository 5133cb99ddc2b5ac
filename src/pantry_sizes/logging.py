import logging
import os
from typing import Optional


ROOT_NAME = "pantry_sizes"
_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _level_from_env(value: Optional[str]) -> int:
    level = getattr(logging, (value or "").strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_NAME)
    if root.handlers:
        return root

    level = _level_from_env(os.environ.get("LOG_LEVEL"))
    root.setLevel(level)
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    handlers = [logging.StreamHandler()]
    log_file = os.environ.get("LOG_FILE")
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError:
            log_file = None
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.propagate = False

    if os.environ.get("LOG_FILE") and not log_file:
        root.warning("LOG_FILE could not be opened; continuing without file logging")
    return root


def get_logger(name: str) -> logging.Logger:
    """Return ``pantry_sizes.<name>``.

    Handlers live on the package logger, configured once from LOG_LEVEL
    (default INFO) and the optional LOG_FILE; children propagate to it.
    """
    _configure_root()
    return logging.getLogger(f"{ROOT_NAME}.{name}")
