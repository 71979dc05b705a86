from __future__ import annotations

from typing import Any, Dict, Mapping


class TextModError(Exception):
    """Base exception for textmod."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(TextModError, ValueError):
    """Raised when a configuration document is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TextModError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class RuleConfigError(ConfigError):
    """Raised when a partial rule mapping has unknown keys or bad value types."""


class SchemaValidationError(ConfigError):
    """Raised when a payload fails JSON Schema validation."""


__all__ = [
    "TextModError",
    "ConfigError",
    "RuleConfigError",
    "SchemaValidationError",
]
