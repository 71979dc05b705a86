"""Per-rule matching and text transformation."""
from __future__ import annotations

from typing import Optional

from .models import Placement, Rule


def apply_rule(rule: Rule, value: str) -> Optional[str]:
    """Apply a single rule to ``value``.

    The pattern is searched anywhere in ``value``; a full match is not
    required.

    Returns:
        The transformed text, or None when the pattern does not match.
    """
    if rule.pattern.search(value) is None:
        return None

    text = rule.append_text or ""
    if rule.placement is Placement.START:
        return text + value
    if rule.placement is Placement.END:
        return value + text
    # Unknown placements leave the value untouched.
    return value


__all__ = ["apply_rule"]
