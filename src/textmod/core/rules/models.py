"""
Data models for the textmod rules system.

This module defines the core types used throughout the registry:
- Placement: Where a rule's text is inserted relative to the input
- Rule: A single immutable transformation rule
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from textmod.core.exceptions import RuleConfigError

RuleKey = Tuple[str, str, str, int]

# Accepted spellings for each rule field (YAML uses camelCase).
_FIELD_ALIASES = {
    "placement": "placement",
    "append_text": "append_text",
    "appendText": "append_text",
    "pattern": "pattern",
    "regex": "pattern",
    "flags": "flags",
}


class Placement(str, Enum):
    """Side of the input value that a rule's text is inserted on."""

    START = "start"
    END = "end"

    @classmethod
    def coerce(cls, value: Union[str, "Placement"]) -> "Placement":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise RuleConfigError(
                f"placement must be a string, got {type(value).__name__}",
                context={"placement": repr(value)},
            )
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise RuleConfigError(
                f"Unknown placement {value!r}: must be 'start' or 'end'",
                context={"placement": value},
            ) from None


def parse_flags(flags: Union[int, Iterable[str], None]) -> int:
    """Convert a flag spec (int or list of names such as ``IGNORECASE``) to re flags."""
    if flags is None:
        return 0
    if isinstance(flags, bool):
        raise RuleConfigError("flags must be an int or a list of flag names")
    if isinstance(flags, int):
        return flags
    if isinstance(flags, str):
        flags = [flags]
    value = 0
    for name in flags:
        if not isinstance(name, str):
            raise RuleConfigError(
                f"flag names must be strings, got {type(name).__name__}",
                context={"flag": repr(name)},
            )
        try:
            value |= re.RegexFlag[name.strip().upper()]
        except KeyError:
            raise RuleConfigError(f"Unknown regex flag {name!r}", context={"flag": name}) from None
    return value


@dataclass(frozen=True, eq=False)
class Rule:
    """A single text transformation rule.

    Attributes:
        placement: Side of the value that ``append_text`` is inserted on
        append_text: Text inserted when the pattern matches
        pattern: Compiled regex gating the transformation (substring search)

    String placements and string patterns are accepted and normalised on
    construction, so ``Rule("start", "Hello ", r".+")`` is valid. Malformed
    pattern strings raise ``re.error`` from ``re.compile``.
    """

    placement: Placement = Placement.END
    append_text: str = ""
    pattern: "re.Pattern[str]" = field(default_factory=lambda: re.compile(""))

    def __post_init__(self) -> None:
        object.__setattr__(self, "placement", Placement.coerce(self.placement))
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern))
        elif not isinstance(self.pattern, re.Pattern):
            raise RuleConfigError(
                f"pattern must be a string or compiled regex, got {type(self.pattern).__name__}"
            )
        if not isinstance(self.pattern.pattern, str):
            raise RuleConfigError("pattern must be a text (str) regex, not bytes")
        if not isinstance(self.append_text, str):
            raise RuleConfigError(
                f"append_text must be a string, got {type(self.append_text).__name__}"
            )

    @property
    def key(self) -> RuleKey:
        """Canonical structural identity used to deduplicate subscriptions."""
        return (
            self.placement.value,
            self.append_text,
            self.pattern.pattern,
            self.pattern.flags,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def replace(self, **changes: Any) -> "Rule":
        """Return a copy of this rule with ``changes`` applied."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase mapping form used in config files."""
        return {
            "placement": self.placement.value,
            "appendText": self.append_text,
            "pattern": self.pattern.pattern,
            "flags": _flag_names(self.pattern.flags),
        }

    @classmethod
    def from_mapping(
        cls,
        mapping: Optional[Mapping[str, Any]] = None,
        *,
        base: Optional["Rule"] = None,
    ) -> "Rule":
        """Build a rule by merging a partial mapping over ``base``.

        Fields missing from ``mapping`` are taken from ``base`` (or the default
        rule). A string ``pattern`` is compiled with ``flags`` when given,
        otherwise with the base pattern's flags. ``flags`` given alone
        recompiles the base pattern; an empty list or 0 clears its flags.

        Raises:
            RuleConfigError: Unknown keys or wrongly typed values.
            re.error: A malformed pattern string.
        """
        base = base if base is not None else DEFAULT_RULE
        if mapping is None:
            return base
        if not isinstance(mapping, Mapping):
            raise RuleConfigError(
                f"Rule options must be a mapping, got {type(mapping).__name__}"
            )

        fields: dict[str, Any] = {}
        for raw_key, value in mapping.items():
            name = _FIELD_ALIASES.get(raw_key)
            if name is None:
                raise RuleConfigError(
                    f"Unknown rule option {raw_key!r}",
                    context={"option": raw_key, "allowed": sorted(_FIELD_ALIASES)},
                )
            if name in fields:
                raise RuleConfigError(
                    f"Rule option {raw_key!r} given more than once",
                    context={"option": raw_key},
                )
            fields[name] = value

        changes: dict[str, Any] = {}
        if "placement" in fields:
            changes["placement"] = Placement.coerce(fields["placement"])
        if "append_text" in fields:
            text = fields["append_text"]
            changes["append_text"] = "" if text is None else text

        has_flags = "flags" in fields
        flags = parse_flags(fields["flags"]) if has_flags else base.pattern.flags
        if "pattern" in fields:
            raw = fields["pattern"]
            if isinstance(raw, re.Pattern):
                if has_flags and flags:
                    raise RuleConfigError("flags cannot be combined with a compiled pattern")
                changes["pattern"] = raw
            elif isinstance(raw, str):
                changes["pattern"] = re.compile(raw, flags)
            else:
                raise RuleConfigError(
                    f"pattern must be a string or compiled regex, got {type(raw).__name__}"
                )
        elif has_flags:
            changes["pattern"] = re.compile(base.pattern.pattern, flags)

        return base.replace(**changes) if changes else base


def _flag_names(flags: int) -> list[str]:
    names = []
    for flag in (re.IGNORECASE, re.MULTILINE, re.DOTALL, re.VERBOSE, re.ASCII):
        if flags & flag:
            names.append(flag.name)
    return names


DEFAULT_RULE = Rule()


__all__ = [
    "Placement",
    "Rule",
    "RuleKey",
    "DEFAULT_RULE",
    "parse_flags",
]
