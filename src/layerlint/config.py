"""Configuration: parse layerlint.yml into per-rule settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml

from layerlint.findings import Severity
from layerlint.layers import DEFAULT_PROJECT_BASE, DEFAULT_TEST_MARKER

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CONFIG_FILENAME = "layerlint.yml"
RULE_SET_KEY = "architecture-layer-rules"
SUPPORTED_SCHEMA_VERSIONS: frozenset[int] = frozenset({1})
VALID_SEVERITIES: frozenset[str] = frozenset(s.value for s in Severity)

_RULE_KEYS: frozenset[str] = frozenset({"active", "severity", "excludes"})
_TOP_LEVEL_KEYS: frozenset[str] = frozenset(
    {"version", "project_base", "test_marker", "excludes", RULE_SET_KEY}
)

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleConfig:
    """Settings for a single rule, passed through unchanged to its factory.

    Keys other than ``active``, ``severity`` and ``excludes`` are kept in
    *options* for rules that want them.
    """

    active: bool = True
    severity: Severity = Severity.ERROR
    excludes: tuple[str, ...] = ()
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class LintConfig:
    """Whole-run configuration."""

    project_base: str = DEFAULT_PROJECT_BASE
    test_marker: str = DEFAULT_TEST_MARKER
    excludes: tuple[str, ...] = ()
    rules: Mapping[str, RuleConfig] = field(default_factory=lambda: MappingProxyType({}))

    def rule_config(self, name: str) -> RuleConfig:
        """Return the settings for *name*, defaulting to an active rule."""
        return self.rules.get(name, RuleConfig())


# ---------------------------------------------------------------------------
# YAML parsing
# ---------------------------------------------------------------------------


def _parse_globs(value: object, context: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        msg = f"{context}: 'excludes' must be a string or a list of strings"
        raise ValueError(msg)
    return tuple(str(item) for item in value)


def _parse_rule_config(name: str, data: object) -> RuleConfig:
    """Parse the settings block of one rule."""
    if data is None:
        return RuleConfig()
    if not isinstance(data, dict):
        msg = f"Rule '{name}': settings must be a mapping"
        raise ValueError(msg)

    active = data.get("active", True)
    if not isinstance(active, bool):
        msg = f"Rule '{name}': 'active' must be true or false"
        raise ValueError(msg)

    severity = str(data.get("severity", Severity.ERROR.value))
    if severity not in VALID_SEVERITIES:
        msg = (
            f"Rule '{name}': invalid severity '{severity}', "
            f"must be one of {sorted(VALID_SEVERITIES)}"
        )
        raise ValueError(msg)

    excludes = _parse_globs(data.get("excludes"), f"Rule '{name}'")
    options = {str(k): v for k, v in data.items() if k not in _RULE_KEYS}

    return RuleConfig(
        active=active,
        severity=Severity(severity),
        excludes=excludes,
        options=MappingProxyType(options),
    )


def parse_config(data: object, *, known_rules: Iterable[str] | None = None) -> LintConfig:
    """Validate already-loaded YAML data and build a :class:`LintConfig`.

    Raises ``ValueError`` on schema errors (missing version, unknown rules, etc.).
    """
    if not isinstance(data, dict):
        msg = f"{CONFIG_FILENAME} must be a YAML mapping"
        raise ValueError(msg)

    version = data.get("version")
    if version is None:
        msg = f"{CONFIG_FILENAME}: missing required 'version' field"
        raise ValueError(msg)
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        expected = sorted(SUPPORTED_SCHEMA_VERSIONS)
        msg = f"{CONFIG_FILENAME}: unsupported version {version}, expected one of {expected}"
        raise ValueError(msg)

    for key in data:
        if key not in _TOP_LEVEL_KEYS:
            logger.debug("Ignoring unknown key %r in %s", key, CONFIG_FILENAME)

    project_base = data.get("project_base", DEFAULT_PROJECT_BASE)
    if not isinstance(project_base, str) or not project_base.strip():
        msg = f"{CONFIG_FILENAME}: 'project_base' must be a non-empty string"
        raise ValueError(msg)

    test_marker = data.get("test_marker", DEFAULT_TEST_MARKER)
    if not isinstance(test_marker, str) or not test_marker:
        msg = f"{CONFIG_FILENAME}: 'test_marker' must be a non-empty string"
        raise ValueError(msg)

    excludes = _parse_globs(data.get("excludes"), CONFIG_FILENAME)

    rules_data = data.get(RULE_SET_KEY, {})
    if rules_data is None:
        rules_data = {}
    if not isinstance(rules_data, dict):
        msg = f"{CONFIG_FILENAME}: '{RULE_SET_KEY}' must be a mapping"
        raise ValueError(msg)

    known = set(known_rules) if known_rules is not None else None
    rules: dict[str, RuleConfig] = {}
    for name, rule_data in rules_data.items():
        name_str = str(name)
        if known is not None and name_str not in known:
            msg = f"{CONFIG_FILENAME}: unknown rule '{name_str}', must be one of {sorted(known)}"
            raise ValueError(msg)
        rules[name_str] = _parse_rule_config(name_str, rule_data)

    return LintConfig(
        project_base=project_base.strip(),
        test_marker=test_marker,
        excludes=excludes,
        rules=MappingProxyType(rules),
    )


def load_config(config_path: Path, *, known_rules: Iterable[str] | None = None) -> LintConfig:
    """Parse a layerlint.yml file.

    Raises ``ValueError`` on schema errors and ``OSError`` when unreadable.
    """
    with config_path.open("r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            msg = f"{config_path}: invalid YAML: {exc}"
            raise ValueError(msg) from exc
    return parse_config(data, known_rules=known_rules)
