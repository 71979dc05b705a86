from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

PACKAGE_LOGGER = "textmod"

_INSTALLED_HANDLER: logging.Handler | None = None
_INSTALLED_TARGET: str | None = None


def _level_from_name(name: Union[str, int]) -> int:
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Union[str, int] = "INFO", log_path: Optional[Union[str, Path]] = None) -> logging.Handler:
    """Attach a single handler to the ``textmod`` package logger.

    Logs go to stderr, or to ``log_path`` when given. Idempotent: calling
    again with the same target only updates the level; a different target
    replaces the previously installed handler. Handlers installed by the
    host application are left alone.
    """
    global _INSTALLED_HANDLER, _INSTALLED_TARGET

    target = str(Path(log_path).resolve()) if log_path else "<stderr>"
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.setLevel(_level_from_name(level))

    if _INSTALLED_HANDLER is not None and _INSTALLED_TARGET == target:
        _INSTALLED_HANDLER.setLevel(_level_from_name(level))
        return _INSTALLED_HANDLER

    reset_logging()
    pkg_logger.setLevel(_level_from_name(level))

    if log_path:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    pkg_logger.addHandler(handler)

    _INSTALLED_HANDLER = handler
    _INSTALLED_TARGET = target
    return handler


def configure_logging_from_config(config: Mapping[str, Any]) -> logging.Handler:
    """Apply the ``logging`` section of a loaded config."""
    section = config.get("logging") or {}
    return configure_logging(section.get("level", "WARNING"), section.get("path"))


def reset_logging() -> None:
    """Remove the handler installed by ``configure_logging`` (if any)."""
    global _INSTALLED_HANDLER, _INSTALLED_TARGET
    if _INSTALLED_HANDLER is not None:
        pkg_logger = logging.getLogger(PACKAGE_LOGGER)
        pkg_logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        pkg_logger.setLevel(logging.NOTSET)
    _INSTALLED_HANDLER = None
    _INSTALLED_TARGET = None


__all__ = ["configure_logging", "configure_logging_from_config", "reset_logging", "PACKAGE_LOGGER"]
