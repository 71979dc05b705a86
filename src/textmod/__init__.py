"""
textmod - event-driven text modifier

Register text transformation rules under named events, then fire an event
with a string to prepend or append text wherever a rule's pattern matches.

    from textmod import TextModifier

    modifier = TextModifier()
    sub = modifier.subscribe("textChange", placement="start", append_text="Hello ", pattern=r".+")
    modifier.trigger("textChange", "World")   # ["Hello World"]
"""

from textmod.core.config import load_config
from textmod.core.exceptions import ConfigError, RuleConfigError, SchemaValidationError, TextModError
from textmod.core.rules import Placement, Rule, Subscription, TextModifier, apply_rule
from textmod.core.stdlib_logging import configure_logging, configure_logging_from_config, reset_logging

__version__ = "1.0.0"
__all__ = [
    "__version__",
    "TextModifier",
    "Subscription",
    "Rule",
    "Placement",
    "apply_rule",
    "load_config",
    "configure_logging",
    "configure_logging_from_config",
    "reset_logging",
    "TextModError",
    "ConfigError",
    "RuleConfigError",
    "SchemaValidationError",
]
