"""textmod configuration: layered YAML loading and registry construction."""
from __future__ import annotations

from .loader import (
    CONFIG_SCHEMA,
    ENV_PREFIX,
    apply_env_overrides,
    build_registry,
    load_config,
    load_defaults,
    load_yaml_file,
)

__all__ = [
    "CONFIG_SCHEMA",
    "ENV_PREFIX",
    "apply_env_overrides",
    "build_registry",
    "load_config",
    "load_defaults",
    "load_yaml_file",
]
