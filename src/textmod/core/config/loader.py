"""Configuration loading for textmod.

Layers (lowest → highest priority):
1) Bundled defaults: ``textmod/data/config/defaults.yaml``
2) The YAML file passed to ``load_config``
3) ``TEXTMOD_*`` environment variables (``__`` separates nested keys,
   e.g. ``TEXTMOD_LOGGING__LEVEL=DEBUG``)
4) The ``overrides`` mapping passed to ``load_config``

The merged document is validated against ``schemas/config.schema.yaml``.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import yaml

from textmod.core.exceptions import ConfigError
from textmod.core.rules.models import Rule
from textmod.core.rules.registry import TextModifier
from textmod.core.schemas import validate_payload
from textmod.core.utils.merge import deep_merge
from textmod.data import read_yaml

logger = logging.getLogger(__name__)

CONFIG_SCHEMA = "config.schema"
ENV_PREFIX = "TEXTMOD_"

PathLike = Union[str, "os.PathLike[str]"]


def load_defaults() -> Dict[str, Any]:
    """Return a fresh copy of the bundled default config."""
    return copy.deepcopy(read_yaml("config", "defaults.yaml"))


def load_yaml_file(path: PathLike) -> Dict[str, Any]:
    """Read a YAML config file; an empty document counts as ``{}``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )
    return data


def _coerce_env_value(value: str) -> Any:
    s = value.strip()
    low = s.lower()
    if low in {"true", "false"}:
        return low == "true"
    if re.fullmatch(r"[-+]?\d+", s):
        return int(s)
    if (
        (s.startswith("{") and s.endswith("}"))
        or (s.startswith("[") and s.endswith("]"))
        or (len(s) >= 2 and s.startswith('"') and s.endswith('"'))
    ):
        try:
            return json.loads(s)
        except ValueError:
            return value
    return value


def _iter_env_overrides(environ: Mapping[str, str]) -> Iterator[Tuple[List[str], Any]]:
    for key in sorted(environ.keys()):
        if not key.startswith(ENV_PREFIX):
            continue
        raw = key[len(ENV_PREFIX):]
        segments = raw.split("__")
        if not raw or any(seg == "" for seg in segments):
            raise ConfigError(f"Malformed {ENV_PREFIX}* key: {key!r}", context={"key": key})
        yield [seg.lower() for seg in segments], _coerce_env_value(environ[key])


def apply_env_overrides(cfg: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> None:
    """Apply ``TEXTMOD_*`` environment variables onto ``cfg`` in place.

    Path segments match existing keys case-insensitively so
    ``TEXTMOD_DEFAULTS__APPENDTEXT`` sets ``defaults.appendText``. ``true`` /
    ``false`` become bools, integers become ints, and JSON arrays, objects
    and double-quoted strings are decoded (quote text that looks numeric,
    e.g. ``'"42"'``); everything else stays a string.
    """
    environ = os.environ if environ is None else environ
    for path, value in _iter_env_overrides(environ):
        cur: Dict[str, Any] = cfg
        for i, part in enumerate(path):
            lower_map = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            use_key = lower_map.get(part, part)
            if i == len(path) - 1:
                cur[use_key] = value
                break
            nxt = cur.get(use_key)
            if nxt is None:
                nxt = cur[use_key] = {}
            if not isinstance(nxt, dict):
                raise ConfigError(
                    f"{ENV_PREFIX}{'__'.join(path).upper()} traverses a non-mapping value",
                    context={"path": path},
                )
            cur = nxt


def load_config(
    path: Optional[PathLike] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    validate: bool = True,
) -> Dict[str, Any]:
    """Load the merged textmod configuration.

    Args:
        path: Optional YAML file merged over the bundled defaults
        overrides: Optional mapping merged last
        environ: Environment to read ``TEXTMOD_*`` overrides from
            (defaults to ``os.environ``)
        validate: Validate the result against the bundled schema

    Returns:
        Merged configuration dictionary.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        ConfigError: Unreadable document or schema violation
            (``SchemaValidationError``).
    """
    cfg = load_defaults()
    if path is not None:
        cfg = deep_merge(cfg, load_yaml_file(path))
        logger.info("Loaded textmod config from %s", path)
    apply_env_overrides(cfg, environ)
    if overrides:
        cfg = deep_merge(cfg, overrides)
    if validate:
        validate_payload(cfg, CONFIG_SCHEMA)
    return cfg


def build_registry(
    config: Mapping[str, Any],
    *,
    factory: Callable[..., TextModifier] = TextModifier,
) -> TextModifier:
    """Create a registry from a loaded config mapping.

    ``config["defaults"]`` becomes the registry defaults; each rule under
    ``config["events"][name]`` is subscribed to ``name`` in order.
    """
    defaults = Rule.from_mapping(config.get("defaults") or {})
    registry = factory(defaults)

    events = config.get("events") or {}
    if not isinstance(events, Mapping):
        raise ConfigError("'events' must be a mapping of event name to rule list")
    count = 0
    for event_name, rule_list in events.items():
        if not isinstance(rule_list, list):
            raise ConfigError(
                f"Rules for event {event_name!r} must be a list",
                context={"event": event_name},
            )
        for entry in rule_list:
            registry.subscribe(event_name, entry or {})
            count += 1
    logger.info("Built textmod registry: %d event(s), %d rule(s)", len(events), count)
    return registry


__all__ = [
    "CONFIG_SCHEMA",
    "ENV_PREFIX",
    "load_defaults",
    "load_yaml_file",
    "apply_env_overrides",
    "load_config",
    "build_registry",
]
