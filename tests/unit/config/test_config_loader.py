"""Tests for layered config loading and registry construction."""
from __future__ import annotations

from pathlib import Path

import pytest

from textmod import TextModifier
from textmod.core.config import apply_env_overrides, build_registry, load_config, load_defaults, load_yaml_file
from textmod.core.exceptions import ConfigError, SchemaValidationError
from textmod.core.rules import Placement


def test_bundled_defaults_shape() -> None:
    cfg = load_config(environ={})

    assert cfg["defaults"] == {"placement": "end", "appendText": "", "pattern": "", "flags": []}
    assert cfg["logging"]["level"] == "WARNING"
    assert cfg["events"] == {}


def test_load_defaults_returns_independent_copies() -> None:
    first = load_defaults()
    first["defaults"]["appendText"] = "mutated"

    assert load_defaults()["defaults"]["appendText"] == ""


def test_file_is_merged_over_defaults(write_yaml) -> None:
    path = write_yaml(
        {
            "defaults": {"placement": "start"},
            "events": {"greet": [{"appendText": "Hello ", "pattern": ".+"}]},
        }
    )

    cfg = load_config(path, environ={})

    assert cfg["defaults"]["placement"] == "start"
    assert cfg["defaults"]["appendText"] == ""
    assert cfg["events"]["greet"] == [{"appendText": "Hello ", "pattern": ".+"}]


def test_overrides_win_over_file(write_yaml) -> None:
    path = write_yaml({"logging": {"level": "INFO"}})

    cfg = load_config(path, {"logging": {"level": "DEBUG"}}, environ={})

    assert cfg["logging"]["level"] == "DEBUG"


def test_env_overrides_are_applied_case_insensitively() -> None:
    cfg = load_config(
        environ={
            "TEXTMOD_LOGGING__LEVEL": "ERROR",
            "TEXTMOD_DEFAULTS__APPENDTEXT": "!",
            "TEXTMOD_DEFAULTS__FLAGS": '["IGNORECASE"]',
            "UNRELATED": "x",
        }
    )

    assert cfg["logging"]["level"] == "ERROR"
    assert cfg["defaults"]["appendText"] == "!"
    assert cfg["defaults"]["flags"] == ["IGNORECASE"]
    assert "appendtext" not in cfg["defaults"]


def test_env_override_creates_missing_sections() -> None:
    cfg: dict = {}

    apply_env_overrides(cfg, {"TEXTMOD_LOGGING__PATH": "/tmp/textmod.log"})

    assert cfg == {"logging": {"path": "/tmp/textmod.log"}}


def test_malformed_env_key_is_rejected() -> None:
    with pytest.raises(ConfigError, match="Malformed TEXTMOD_"):
        apply_env_overrides({}, {"TEXTMOD_LOGGING____LEVEL": "DEBUG"})


def test_env_override_through_scalar_is_rejected() -> None:
    with pytest.raises(ConfigError, match="non-mapping"):
        apply_env_overrides({"logging": "loud"}, {"TEXTMOD_LOGGING__LEVEL": "DEBUG"})


def test_missing_file_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml", environ={})


def test_empty_file_is_treated_as_empty_mapping(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_yaml_file(path) == {}


def test_non_mapping_document_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_config(path, environ={})


def test_invalid_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("defaults: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_yaml_file(path)


@pytest.mark.parametrize(
    "overrides",
    [
        {"defaults": {"placement": "middle"}},
        {"defaults": {"colour": "red"}},
        {"events": {"e": [{"appendText": 3}]}},
        {"events": {"e": {"appendText": "!"}}},
        {"logging": {"level": "LOUD"}},
        {"unknown": True},
    ],
)
def test_schema_violations_raise(overrides) -> None:
    with pytest.raises(SchemaValidationError, match="config.schema"):
        load_config(overrides=overrides, environ={})


def test_validation_can_be_skipped() -> None:
    cfg = load_config(overrides={"unknown": True}, environ={}, validate=False)

    assert cfg["unknown"] is True


def test_build_registry_from_config(write_yaml) -> None:
    path = write_yaml(
        {
            "defaults": {"placement": "start"},
            "events": {
                "greet": [
                    {"appendText": "Hello ", "pattern": ".+"},
                    {"placement": "end", "appendText": "!", "pattern": "^h", "flags": ["IGNORECASE"]},
                ],
                "ticket": [{"appendText": "http://localhost:3000/", "pattern": "ABC-\\d+"}],
            },
        }
    )

    registry = build_registry(load_config(path, environ={}))

    assert registry.defaults.placement is Placement.START
    assert registry.event_names() == ["greet", "ticket"]
    assert registry.trigger("greet", "Hi") == ["Hello Hi", "Hi!"]
    assert registry.trigger("greet", "World") == ["Hello World", None]
    assert registry.trigger("ticket", "ABC-123") == ["http://localhost:3000/ABC-123"]


def test_from_config_classmethod_uses_subclass() -> None:
    class CustomModifier(TextModifier):
        pass

    cfg = load_config(overrides={"events": {"e": [{"appendText": "!"}]}}, environ={})

    registry = CustomModifier.from_config(cfg)

    assert isinstance(registry, CustomModifier)
    assert registry.trigger("e", "x") == ["x!"]


def test_build_registry_rejects_non_list_rules() -> None:
    with pytest.raises(ConfigError, match="must be a list"):
        build_registry({"events": {"e": {"appendText": "!"}}})


def test_default_flags_apply_to_event_patterns() -> None:
    cfg = load_config(
        overrides={
            "defaults": {"flags": ["IGNORECASE"]},
            "events": {"e": [{"pattern": "^h", "appendText": "!"}]},
        },
        environ={},
    )

    registry = TextModifier.from_config(cfg)

    assert registry.trigger("e", "Hello") == ["Hello!"]


def test_event_rule_can_clear_default_flags() -> None:
    registry = TextModifier.from_config(
        {
            "defaults": {"flags": ["IGNORECASE"]},
            "events": {"e": [{"pattern": "^h", "flags": []}]},
        }
    )

    assert registry.trigger("e", "Hello") == [None]
    assert registry.trigger("e", "hello") == ["hello"]


def test_env_values_are_coerced_to_scalars() -> None:
    cfg = load_config(
        environ={
            "TEXTMOD_DEFAULTS__FLAGS": "2",
            "TEXTMOD_DEFAULTS__APPENDTEXT": '"42"',
        }
    )

    assert cfg["defaults"]["flags"] == 2
    assert cfg["defaults"]["appendText"] == "42"


def test_env_bool_and_int_coercion() -> None:
    cfg: dict = {}

    apply_env_overrides(cfg, {"TEXTMOD_A": "true", "TEXTMOD_B": "False", "TEXTMOD_C": "-7", "TEXTMOD_D": "text"})

    assert cfg == {"a": True, "b": False, "c": -7, "d": "text"}


def test_schema_errors_are_all_reported() -> None:
    with pytest.raises(SchemaValidationError) as excinfo:
        load_config(overrides={"defaults": {"placement": "middle"}, "logging": {"level": "LOUD"}}, environ={})

    assert len(excinfo.value.context["errors"]) == 2
