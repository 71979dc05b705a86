"""
Event registry for textmod.

A ``TextModifier`` maps event names to an ordered set of rules. Firing an
event runs every rule registered under it against the input string and
returns one result per rule.

Example:
    from textmod import TextModifier

    modifier = TextModifier()
    sub = modifier.subscribe("textChange", placement="start", append_text="Hello ", pattern=r".+")
    modifier.trigger("textChange", "World")   # ["Hello World"]
    sub.unsubscribe()
    modifier.trigger("textChange", "World")   # []

Rules are keyed by their structural identity (see ``Rule.key``):
subscribing an identical rule twice under one event keeps a single entry
in its original position.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .models import Rule, RuleKey
from .transform import apply_rule

logger = logging.getLogger(__name__)

RuleSpec = Union[Rule, Mapping[str, Any], None]


@dataclass(frozen=True)
class Subscription:
    """Handle returned by ``TextModifier.subscribe``.

    Holds the event name and rule key needed to remove the rule again.
    ``unsubscribe()`` may be called any number of times.
    """

    registry: "TextModifier" = field(repr=False, compare=False)
    event_name: str
    key: RuleKey

    def unsubscribe(self) -> None:
        self.registry._remove(self.event_name, self.key)

    @property
    def active(self) -> bool:
        """True while the rule is still registered under the event."""
        return self.registry._contains(self.event_name, self.key)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.unsubscribe()


class TextModifier:
    """In-process registry of text transformation rules keyed by event name.

    Args:
        defaults: Rule or partial mapping merged over the built-in default
            rule (placement END, empty text, match-any pattern). Every
            subscription is merged over the result.

    The registry is safe to share between threads: mutations happen under a
    lock, and ``trigger`` evaluates a snapshot of the event's rules.
    """

    def __init__(self, defaults: RuleSpec = None) -> None:
        if isinstance(defaults, Rule):
            self.defaults = defaults
        else:
            self.defaults = Rule.from_mapping(defaults)
        self._lock = threading.RLock()
        self._events: Dict[str, Dict[RuleKey, Rule]] = {}

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TextModifier":
        """Build a registry from a loaded config mapping.

        Uses ``config["defaults"]`` as registry defaults and subscribes each
        rule listed under ``config["events"]`` in order.
        """
        from textmod.core.config import build_registry

        return build_registry(config, factory=cls)

    # =========================================================================
    # Public API
    # =========================================================================

    def subscribe(self, event_name: str, rule: RuleSpec = None, **options: Any) -> Subscription:
        """Register a rule under ``event_name``.

        Args:
            event_name: Event to attach the rule to
            rule: A ``Rule`` or partial mapping of rule fields
            **options: Rule fields applied on top of ``rule``

        Returns:
            Subscription handle whose ``unsubscribe()`` removes the rule.
        """
        if not isinstance(event_name, str):
            raise TypeError(f"event_name must be a string, got {type(event_name).__name__}")

        resolved = self._resolve_rule(rule, options)
        key = resolved.key
        with self._lock:
            rules = self._events.setdefault(event_name, {})
            replaced = key in rules
            rules[key] = resolved
        logger.debug(
            "subscribe event=%s placement=%s pattern=%r%s",
            event_name,
            resolved.placement.value,
            resolved.pattern.pattern,
            " (existing entry reused)" if replaced else "",
        )
        return Subscription(self, event_name, key)

    def trigger(self, event_name: str, value: str) -> List[Optional[str]]:
        """Fire ``event_name`` with ``value``.

        Returns:
            One result per registered rule in subscription order: the
            transformed string, or None where the rule's pattern did not
            match. Unknown events yield an empty list.
        """
        with self._lock:
            rules = self._events.get(event_name)
            snapshot = tuple(rules.values()) if rules else ()

        results = [apply_rule(rule, value) for rule in snapshot]
        logger.debug(
            "trigger event=%s rules=%d matched=%d",
            event_name,
            len(results),
            sum(1 for r in results if r is not None),
        )
        return results

    def event_names(self) -> List[str]:
        """Event names with at least one rule, in first-subscription order."""
        with self._lock:
            return [name for name, rules in self._events.items() if rules]

    def rules(self, event_name: str) -> Tuple[Rule, ...]:
        """Rules registered under ``event_name`` in subscription order."""
        with self._lock:
            return tuple(self._events.get(event_name, {}).values())

    def __contains__(self, event_name: object) -> bool:
        if not isinstance(event_name, str):
            return False
        with self._lock:
            return bool(self._events.get(event_name))

    def __len__(self) -> int:
        with self._lock:
            return sum(len(rules) for rules in self._events.values())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(events={len(self.event_names())}, rules={len(self)})"

    # =========================================================================
    # Internals
    # =========================================================================

    def _resolve_rule(self, rule: RuleSpec, options: Mapping[str, Any]) -> Rule:
        if isinstance(rule, Rule):
            resolved = rule
        else:
            resolved = Rule.from_mapping(rule, base=self.defaults)
        if options:
            resolved = Rule.from_mapping(options, base=resolved)
        return resolved

    def _remove(self, event_name: str, key: RuleKey) -> None:
        with self._lock:
            rules = self._events.get(event_name)
            removed = rules.pop(key, None) if rules is not None else None
        if removed is not None:
            logger.debug("unsubscribe event=%s pattern=%r", event_name, removed.pattern.pattern)

    def _contains(self, event_name: str, key: RuleKey) -> bool:
        with self._lock:
            return key in self._events.get(event_name, {})


__all__ = ["TextModifier", "Subscription"]
