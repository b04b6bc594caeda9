"""Configuration loading from CLI args, env vars, and optional YAML file."""

import logging
import os
from dataclasses import dataclass, field

import yaml

from src.models import Rule, RuleError
from src.project import DEFAULT_SOURCE_ROOTS
from src.styles import COLOR_MODES, parse_style

logger = logging.getLogger(__name__)


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class RuleDef:
    name: str
    patterns: tuple[str, ...]
    styles: dict[str, str] = field(default_factory=dict)   # field -> style spec
    priority: int = 0


@dataclass(frozen=True)
class Config:
    idle_gap_seconds: float = 5.0
    base_package: str | None = None    # None: detect from the source tree
    project_dir: str = "."
    source_roots: tuple[str, ...] = DEFAULT_SOURCE_ROOTS
    color: str = "auto"
    pad_levels: bool = False
    rules: tuple[RuleDef, ...] = ()


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def parse_source_roots(raw) -> tuple[str, ...]:
    """Accept a single path or a list of paths; empty means the defaults."""
    if raw is None:
        return DEFAULT_SOURCE_ROOTS
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"source_roots must be a path or a list of paths, got {raw!r}")
    return tuple(str(root) for root in raw)


def parse_rule_defs(raw_rules) -> tuple[RuleDef, ...]:
    """Validate the ``rules`` section of the YAML config."""
    defs = []
    for i, raw in enumerate(raw_rules or []):
        if not isinstance(raw, dict):
            raise RuleError(f"Rule #{i} must be a mapping")
        name = raw.get("name", f"custom-{i}")
        patterns = raw.get("patterns", raw.get("pattern"))
        if isinstance(patterns, str):
            patterns = [patterns]
        if not patterns:
            raise RuleError(f"Rule {name!r} has no patterns")
        styles = raw.get("styles") or {}
        if not isinstance(styles, dict):
            raise RuleError(f"Rule {name!r}: styles must map field names to style specs")
        defs.append(RuleDef(
            name=name,
            patterns=tuple(str(p) for p in patterns),
            styles={str(k): str(v) for k, v in styles.items()},
            priority=int(raw.get("priority", 0)),
        ))
    return tuple(defs)


def build_rule(rule_def: RuleDef) -> Rule:
    """Turn a configured rule into a Rule. Raises RuleError on bad input."""
    formatters = {}
    for field_name, spec in rule_def.styles.items():
        try:
            formatters[field_name] = parse_style(spec)
        except ValueError as e:
            raise RuleError(f"Rule {rule_def.name!r}, field {field_name!r}: {e}") from e
    return Rule(rule_def.name, rule_def.patterns, formatters, priority=rule_def.priority)


def load_config(cli_args, yaml_data: dict) -> Config:
    """Build Config; precedence is CLI > environment > YAML > defaults."""

    def pick(arg_name: str, env_name: str, yaml_key: str, default):
        value = getattr(cli_args, arg_name, None)
        if value is not None:
            return value
        if env_name in os.environ:
            return os.environ[env_name]
        return yaml_data.get(yaml_key, default)

    color = str(pick("color", "BEAUTIFY_COLOR", "color", Config.color)).lower()
    if color not in COLOR_MODES:
        raise ValueError(f"color must be one of {', '.join(COLOR_MODES)}, got {color!r}")

    base_package = pick("base_package", "BEAUTIFY_BASE_PACKAGE", "base_package", None)

    return Config(
        idle_gap_seconds=float(pick("idle_gap", "BEAUTIFY_IDLE_GAP", "idle_gap_seconds",
                                    Config.idle_gap_seconds)),
        base_package=None if base_package is None else str(base_package),
        project_dir=str(pick("project_dir", "BEAUTIFY_PROJECT_DIR", "project_dir",
                             Config.project_dir)),
        source_roots=parse_source_roots(yaml_data.get("source_roots", DEFAULT_SOURCE_ROOTS)),
        color=color,
        pad_levels=_parse_bool(pick("pad_levels", "BEAUTIFY_PAD_LEVELS", "pad_levels",
                                    Config.pad_levels)),
        rules=parse_rule_defs(yaml_data.get("rules")),
    )
