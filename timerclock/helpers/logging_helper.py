import logging
import os
from functools import wraps
from typing import Any, Callable, TypeVar, cast, Optional

from timerclock.helpers.config_helper import ConfigHelper


F = TypeVar("F", bound=Callable[..., Any])

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

LOGGER_NAME = "TimerClock"
DEFAULT_LOG_FILENAME = "timerclock.log"

_LOGGER: Optional[logging.Logger] = None
_LAST_CONFIG: Optional[tuple[Any, ...]] = None
_LOGGER_ENABLED: bool = False
_ACTIVE_LOG_PATH: Optional[str] = None


def _resolve_directory(directory: str) -> str:
    directory = directory or "logs"
    if os.path.isabs(directory):
        return directory
    return os.path.join(PROJECT_ROOT, directory)


def _refresh_logger() -> logging.Logger:
    global _LOGGER, _LAST_CONFIG, _LOGGER_ENABLED, _ACTIVE_LOG_PATH

    enabled = ConfigHelper.getboolean("Logging", "enabled", fallback=False)
    directory = ConfigHelper.get("Logging", "directory", fallback="logs") or "logs"
    filename = ConfigHelper.get("Logging", "filename", fallback=DEFAULT_LOG_FILENAME) or DEFAULT_LOG_FILENAME
    level_name = ConfigHelper.get("Logging", "level", fallback="INFO") or "INFO"

    config_signature = (enabled, directory, filename, level_name)

    if _LOGGER is None:
        _LOGGER = logging.getLogger(LOGGER_NAME)
        _LOGGER.propagate = False

    if config_signature != _LAST_CONFIG:
        _LAST_CONFIG = config_signature

        for handler in list(_LOGGER.handlers):
            if getattr(handler, "_tc_handler", False):
                _LOGGER.removeHandler(handler)
                handler.close()

        _ACTIVE_LOG_PATH = None

        if enabled:
            resolved_dir = _resolve_directory(directory)
            os.makedirs(resolved_dir, exist_ok=True)

            if os.path.isabs(filename):
                log_path = filename
            else:
                log_path = os.path.join(resolved_dir, filename)

            level = getattr(logging, str(level_name).upper(), logging.INFO)

            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            )
            file_handler._tc_handler = True  # type: ignore[attr-defined]
            _LOGGER.addHandler(file_handler)
            _LOGGER.setLevel(level)
            _ACTIVE_LOG_PATH = log_path

            _LOGGER.info("logging_helper.configure - Logging enabled. Writing to %s", log_path)
        else:
            null_handler = logging.NullHandler()
            null_handler._tc_handler = True  # type: ignore[attr-defined]
            _LOGGER.addHandler(null_handler)
            _LOGGER.setLevel(logging.CRITICAL)

    _LOGGER_ENABLED = enabled
    return _LOGGER


def ensure_logger() -> tuple[logging.Logger, bool]:
    logger = _refresh_logger()
    return logger, _LOGGER_ENABLED


def _log(level: int, message: str, *, func_name: str) -> None:
    logger, enabled = ensure_logger()
    if not enabled:
        return
    logger.log(level, "%s - %s", func_name, message)


def log_debug(message: str, *, func_name: str) -> None:
    _log(logging.DEBUG, message, func_name=func_name)


def log_info(message: str, *, func_name: str) -> None:
    _log(logging.INFO, message, func_name=func_name)


def log_warning(message: str, *, func_name: str) -> None:
    _log(logging.WARNING, message, func_name=func_name)


def log_exception(message: str, *, func_name: str) -> None:
    logger, enabled = ensure_logger()
    if not enabled:
        return
    logger.exception("%s - %s", func_name, message)


def log_module_import(module_name: str) -> None:
    """Record that ``module_name`` finished importing."""
    _log(logging.DEBUG, f"Imported module {module_name}", func_name="logging_helper.log_module_import")


def log_function(func: F) -> F:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger, enabled = ensure_logger()
        if not enabled:
            return func(*args, **kwargs)

        func_name = func.__qualname__
        _log(logging.INFO, "started", func_name=func_name)
        try:
            result = func(*args, **kwargs)
            _log(logging.DEBUG, "completed", func_name=func_name)
            return result
        except Exception as exc:
            logger.exception("%s - failed: %s", func_name, exc)
            raise

    return cast(F, wrapper)


def initialize_logging() -> bool:
    logger, enabled = ensure_logger()
    if not enabled:
        return False
    logger.info("logging_helper.initialize - Logging ready at %s", _ACTIVE_LOG_PATH)
    return True


__all__ = [
    "ensure_logger",
    "initialize_logging",
    "log_debug",
    "log_exception",
    "log_function",
    "log_info",
    "log_module_import",
    "log_warning",
]
