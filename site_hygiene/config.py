"""Configuration loading for site-hygiene."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from site_hygiene.discovery import AUDIT_EXCLUDE, AUDIT_INCLUDE, CLEANUP_EXCLUDE, CLEANUP_INCLUDE
from site_hygiene.rules import build_audit_rules, build_cleanup_rules
from site_hygiene.rules.base import TRIM_POLICIES, AuditRule, CleanupRule, Severity
from site_hygiene.rules.cleanup import LATEST_TABLE_VERSION

CONFIG_FILENAMES = (".site-hygiene.toml", "site-hygiene.toml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEYS = ("site_hygiene", "site-hygiene")


@dataclass(slots=True)
class CustomFragment:
    """User-defined fragment-removal rule."""

    rule_id: str
    name: str
    start: str
    end: str
    trim: str = "none"

    def to_rule(self) -> CleanupRule:
        return CleanupRule(
            rule_id=self.rule_id,
            name=self.name,
            start=self.start,
            end=self.end,
            trim=self.trim,  # type: ignore[arg-type]
        )


@dataclass(slots=True)
class CleanupConfig:
    """Cleanup pipeline settings."""

    include: list[str] = field(default_factory=lambda: list(CLEANUP_INCLUDE))
    exclude: list[str] = field(default_factory=lambda: list(CLEANUP_EXCLUDE))
    table_version: int = LATEST_TABLE_VERSION
    disable: list[str] = field(default_factory=list)
    custom_rules: list[CustomFragment] = field(default_factory=list)

    def build_rules(self, table_version: int | None = None) -> tuple[CleanupRule, ...]:
        return build_cleanup_rules(
            table_version=table_version if table_version is not None else self.table_version,
            disabled_rule_ids=self.disable,
            extra_rules=[item.to_rule() for item in self.custom_rules],
        )


@dataclass(slots=True)
class AuditConfig:
    """Audit pipeline settings."""

    include: list[str] = field(default_factory=lambda: list(AUDIT_INCLUDE))
    exclude: list[str] = field(default_factory=lambda: list(AUDIT_EXCLUDE))
    min_severity: Severity = Severity.INFO
    disable: list[str] = field(default_factory=list)

    def build_rules(self, min_severity: Severity | None = None) -> tuple[AuditRule, ...]:
        return build_audit_rules(
            min_severity=min_severity or self.min_severity,
            disabled_rule_ids=self.disable,
        )


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from project files."""

    cleanup: CleanupConfig = field(default_factory=CleanupConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    source: str | None = None


def load_app_config(root: Path, config_path: Path | None = None) -> AppConfig:
    """Load config from an explicit path or site-local files with precedence."""
    root = root.resolve()
    if config_path is not None:
        resolved = config_path if config_path.is_absolute() else (root / config_path)
        if not resolved.exists():
            raise ValueError(f"Config file does not exist: {resolved}")
        mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
        return _from_mapping(mapping, source=str(resolved))

    for filename in CONFIG_FILENAMES:
        resolved = root / filename
        if resolved.exists():
            mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
            return _from_mapping(mapping, source=str(resolved))

    pyproject_path = root / PYPROJECT_FILENAME
    if pyproject_path.exists():
        mapping = _extract_config_mapping(_load_toml(pyproject_path), source_path=pyproject_path)
        if mapping:
            return _from_mapping(mapping, source=str(pyproject_path))

    return AppConfig()


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _extract_config_mapping(loaded: dict[str, Any], *, source_path: Path) -> dict[str, Any]:
    tool_section = _find_pyproject_tool_section(loaded)
    if source_path.name == PYPROJECT_FILENAME:
        return tool_section if tool_section is not None else {}
    return tool_section if tool_section is not None else loaded


def _find_pyproject_tool_section(loaded: dict[str, Any]) -> dict[str, Any] | None:
    tool = loaded.get("tool")
    if not isinstance(tool, dict):
        return None
    for key in PYPROJECT_TOOL_KEYS:
        section = tool.get(key)
        if isinstance(section, dict):
            return section
    return None


def _from_mapping(mapping: dict[str, Any], *, source: str) -> AppConfig:
    config = AppConfig(
        cleanup=_parse_cleanup_config(_as_table(mapping.get("cleanup"), "cleanup")),
        audit=_parse_audit_config(_as_table(mapping.get("audit"), "audit")),
        source=source,
    )
    # Surface unknown rule ids and bad patterns at load time.
    config.cleanup.build_rules()
    config.audit.build_rules()
    return config


def _parse_cleanup_config(value: dict[str, Any]) -> CleanupConfig:
    defaults = CleanupConfig()
    return CleanupConfig(
        include=_as_str_list(value.get("include"), "cleanup.include") or defaults.include,
        exclude=_as_str_list_or_default(value.get("exclude"), defaults.exclude, "cleanup.exclude"),
        table_version=_as_int(
            value.get("table_version", LATEST_TABLE_VERSION), "cleanup.table_version"
        ),
        disable=_as_str_list(value.get("disable"), "cleanup.disable"),
        custom_rules=_parse_custom_fragments(value.get("rules"), "cleanup.rules"),
    )


def _parse_audit_config(value: dict[str, Any]) -> AuditConfig:
    defaults = AuditConfig()
    raw_severity = value.get("min_severity", Severity.INFO.value)
    try:
        min_severity = Severity.parse(_as_str(raw_severity, "audit.min_severity"))
    except ValueError as exc:
        raise ValueError(f"audit.min_severity: {exc}") from exc
    return AuditConfig(
        include=_as_str_list(value.get("include"), "audit.include") or defaults.include,
        exclude=_as_str_list_or_default(value.get("exclude"), defaults.exclude, "audit.exclude"),
        min_severity=min_severity,
        disable=_as_str_list(value.get("disable"), "audit.disable"),
    )


def _parse_custom_fragments(value: Any, field_name: str) -> list[CustomFragment]:
    items = _as_table_list(value, field_name)
    parsed: list[CustomFragment] = []
    for item in items:
        rule_id = _as_str(item.get("id"), f"{field_name}.id")
        parsed.append(
            CustomFragment(
                rule_id=rule_id,
                name=_as_str(item.get("name", rule_id), f"{field_name}.name"),
                start=_as_str(item.get("start"), f"{field_name}.start"),
                end=_as_str(item.get("end"), f"{field_name}.end"),
                trim=_as_choice(item.get("trim", "none"), set(TRIM_POLICIES), f"{field_name}.trim"),
            )
        )
    return parsed


def _as_table(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table/object")
    return value


def _as_table_list(value: Any, field_name: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list of tables")
    output: list[dict[str, Any]] = []
    for item in value:
        if not isinstance(item, dict):
            raise ValueError(f"{field_name} must be a list of tables")
        output.append(item)
    return output


def _as_str_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{field_name} must be a list of strings")
        items.append(item)
    return items


def _as_str_list_or_default(value: Any, default: list[str], field_name: str) -> list[str]:
    if value is None:
        return default
    return _as_str_list(value, field_name)


def _as_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def _as_choice(raw: Any, allowed: set[str], field_name: str) -> str:
    value = str(raw).lower()
    if value not in allowed:
        choices = ", ".join(sorted(allowed))
        raise ValueError(f"{field_name} must be one of: {choices}")
    return value


def _as_int(raw: Any, field_name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{field_name} must be an integer")
    return raw
