"""Audit evaluation and run statistics."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from site_hygiene.front_matter import FileError, display_path, parse_front_matter, read_document
from site_hygiene.rules import build_audit_rules, default_audit_rules
from site_hygiene.rules.base import AuditRule, Finding, Metadata, Severity

logger = logging.getLogger(__name__)

NO_TITLE = "(no title)"


@dataclass(slots=True)
class FileReport:
    """Findings for one document that had at least one issue."""

    path: str
    title: str
    findings: list[Finding] = field(default_factory=list)

    def count(self, severity: Severity) -> int:
        return sum(1 for finding in self.findings if finding.severity is severity)


@dataclass(slots=True)
class AuditStats:
    """Run-wide audit statistics."""

    min_severity: Severity = Severity.INFO
    files_scanned: int = 0
    issues_by_rule: dict[str, int] = field(default_factory=dict)
    issues_by_severity: dict[str, int] = field(
        default_factory=lambda: {severity.value: 0 for severity in Severity}
    )
    file_reports: list[FileReport] = field(default_factory=list)
    errors: list[FileError] = field(default_factory=list)

    @property
    def files_with_issues(self) -> int:
        return len(self.file_reports)

    def record(self, path: str, metadata: Metadata, findings: list[Finding]) -> None:
        """Fold one document's findings into the run totals."""
        if not findings:
            return
        for finding in findings:
            self.issues_by_rule[finding.name] = self.issues_by_rule.get(finding.name, 0) + 1
            self.issues_by_severity[finding.severity.value] += 1
        self.file_reports.append(
            FileReport(path=path, title=metadata.get("title") or NO_TITLE, findings=findings)
        )


def audit_document(
    content: str,
    metadata: Metadata | None = None,
    rules: tuple[AuditRule, ...] | None = None,
) -> list[Finding]:
    """Run every active rule over a document and return findings in table order."""
    active_rules = rules if rules is not None else default_audit_rules()
    resolved_metadata = metadata if metadata is not None else parse_front_matter(content)

    findings: list[Finding] = []
    for rule in active_rules:
        if not rule.predicate(content, resolved_metadata):
            continue
        findings.append(
            Finding(
                rule_id=rule.rule_id,
                name=rule.name,
                severity=rule.severity,
                detail=_compute_detail(rule, content, resolved_metadata),
            )
        )
    return findings


def run_audit(
    paths: list[Path],
    *,
    root: Path,
    rules: tuple[AuditRule, ...] | None = None,
    min_severity: Severity = Severity.INFO,
) -> AuditStats:
    """Audit every file in order and aggregate findings at or above ``min_severity``."""
    if rules is None:
        active_rules = build_audit_rules(min_severity=min_severity)
    else:
        active_rules = tuple(rule for rule in rules if rule.severity.level >= min_severity.level)
    stats = AuditStats(min_severity=min_severity)

    for path in paths:
        rel_path = display_path(path, root)
        stats.files_scanned += 1
        try:
            content = read_document(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Error processing %s: %s", rel_path, exc)
            stats.errors.append(FileError(path=rel_path, message=str(exc)))
            continue

        metadata = parse_front_matter(content)
        findings = audit_document(content, metadata, active_rules)
        stats.record(rel_path, metadata, findings)
    return stats


def _compute_detail(rule: AuditRule, content: str, metadata: Metadata) -> str | None:
    if rule.detail is None:
        return None
    try:
        return rule.detail(content, metadata)
    except Exception as exc:  # detail failures degrade to no detail
        logger.warning("Detail for %s failed: %s", rule.rule_id, exc)
        return None
