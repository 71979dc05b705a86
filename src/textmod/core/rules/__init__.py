"""
textmod rules: models, the per-rule transform, and the event registry.

- Rule / Placement (models.py): immutable rule records with a structural key
- apply_rule (transform.py): match a rule against a value and transform it
- TextModifier / Subscription (registry.py): event name -> ordered rules
"""
from __future__ import annotations

from .models import DEFAULT_RULE, Placement, Rule, RuleKey, parse_flags
from .transform import apply_rule
from .registry import Subscription, TextModifier

__all__ = [
    # Models
    "Placement",
    "Rule",
    "RuleKey",
    "DEFAULT_RULE",
    "parse_flags",
    # Transform
    "apply_rule",
    # Registry
    "TextModifier",
    "Subscription",
]
