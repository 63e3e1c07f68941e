"""Rules package."""

from dataclasses import dataclass

from site_hygiene.rules.base import AuditRule, CleanupRule, Severity
from site_hygiene.rules.cleanup import CLEANUP_TABLES, LATEST_TABLE_VERSION
from site_hygiene.rules.seo import SEO_RULES


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Rule metadata for listing."""

    rule_id: str
    name: str
    pipeline: str
    kind: str
    enabled: bool


def default_cleanup_rules() -> tuple[CleanupRule, ...]:
    """Return the latest cleanup table."""
    return build_cleanup_rules()


def default_audit_rules() -> tuple[AuditRule, ...]:
    """Return every audit rule."""
    return build_audit_rules()


def build_cleanup_rules(
    *,
    table_version: int = LATEST_TABLE_VERSION,
    disabled_rule_ids: list[str] | None = None,
    extra_rules: list[CleanupRule] | None = None,
) -> tuple[CleanupRule, ...]:
    """Build the ordered cleanup table for a version, minus disabled rules."""
    table = _resolve_cleanup_table(table_version)
    extras = list(extra_rules or [])

    known_ids = {rule.rule_id for rules in CLEANUP_TABLES.values() for rule in rules}
    for rule in extras:
        if rule.rule_id in known_ids:
            raise ValueError(f"Duplicate cleanup rule id: {rule.rule_id}")
        known_ids.add(rule.rule_id)

    disabled = set(disabled_rule_ids or [])
    _validate_rule_ids(disabled, known_ids, label="cleanup")
    return tuple(rule for rule in (*table, *extras) if rule.rule_id not in disabled)


def build_audit_rules(
    *,
    min_severity: Severity = Severity.INFO,
    disabled_rule_ids: list[str] | None = None,
) -> tuple[AuditRule, ...]:
    """Build the ordered audit table, dropping rules below ``min_severity``."""
    disabled = set(disabled_rule_ids or [])
    _validate_rule_ids(disabled, {rule.rule_id for rule in SEO_RULES}, label="audit")
    return tuple(
        rule
        for rule in SEO_RULES
        if rule.severity.level >= min_severity.level and rule.rule_id not in disabled
    )


def list_rule_info(
    *,
    cleanup_rules: tuple[CleanupRule, ...] | None = None,
    audit_rules: tuple[AuditRule, ...] | None = None,
) -> list[RuleInfo]:
    """Return metadata for every known rule, flagged by whether it is active."""
    active_cleanup = cleanup_rules if cleanup_rules is not None else default_cleanup_rules()
    active_audit = audit_rules if audit_rules is not None else default_audit_rules()
    active_cleanup_ids = {rule.rule_id for rule in active_cleanup}
    active_audit_ids = {rule.rule_id for rule in active_audit}

    known_cleanup = list(CLEANUP_TABLES[LATEST_TABLE_VERSION])
    builtin_ids = {rule.rule_id for rule in known_cleanup}
    known_cleanup.extend(rule for rule in active_cleanup if rule.rule_id not in builtin_ids)

    info: list[RuleInfo] = []
    for rule in known_cleanup:
        info.append(
            RuleInfo(
                rule_id=rule.rule_id,
                name=rule.name,
                pipeline="cleanup",
                kind=f"trim={rule.trim}",
                enabled=rule.rule_id in active_cleanup_ids,
            )
        )
    for rule in SEO_RULES:
        info.append(
            RuleInfo(
                rule_id=rule.rule_id,
                name=rule.name,
                pipeline="audit",
                kind=rule.severity.value,
                enabled=rule.rule_id in active_audit_ids,
            )
        )
    return info


def _resolve_cleanup_table(version: int) -> tuple[CleanupRule, ...]:
    table = CLEANUP_TABLES.get(version)
    if table is None:
        choices = ", ".join(str(item) for item in sorted(CLEANUP_TABLES))
        raise ValueError(f"Unknown cleanup table version {version}. Expected one of: {choices}")
    return table


def _validate_rule_ids(requested: set[str], known: set[str], *, label: str) -> None:
    unknown = [rule_id for rule_id in requested if rule_id not in known]
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise ValueError(f"Unknown {label} rule ids: {joined}")
