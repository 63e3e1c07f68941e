"""Output rendering."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import click

from site_hygiene import __version__
from site_hygiene.audit import AuditStats, FileReport
from site_hygiene.cleanup import CleanupStats
from site_hygiene.rules.base import CleanupRule, Finding, Severity

RULE_WIDTH = 60
SEVERITY_ICONS = {
    Severity.ERROR: "❌",
    Severity.WARNING: "⚠️ ",
    Severity.INFO: "ℹ️ ",
}
SEVERITY_COLORS = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


def render_cleanup_header(rules: tuple[CleanupRule, ...], *, dry_run: bool, file_count: int) -> str:
    """Render the banner printed before files are processed."""
    lines = [click.style("🧹 Cleaning up WordPress legacy elements...", bold=True), ""]
    if dry_run:
        lines.extend([click.style("⚠️  DRY RUN MODE - No files will be modified", fg="yellow"), ""])
    lines.append("Removing:")
    lines.extend(f"  - {rule.name}" for rule in rules)
    lines.extend(["", f"Found {file_count} HTML file(s) to scan"])
    return "\n".join(lines)


def render_cleanup_human(stats: CleanupStats) -> str:
    """Render per-file removals and the run summary."""
    lines: list[str] = []
    for item in stats.modified_files:
        lines.append(click.style(f"✓ {item.path}: {item.removals} section(s) removed", fg="green"))

    lines.extend(
        [
            "",
            "=" * RULE_WIDTH,
            "Summary:",
            "=" * RULE_WIDTH,
            f"Files scanned:    {stats.files_scanned}",
            f"Files modified:   {stats.files_modified}",
        ]
    )
    if stats.errors:
        lines.append(click.style(f"Files with errors: {len(stats.errors)}", fg="red"))

    if stats.removals_by_rule:
        lines.extend(["", "Removals by type:"])
        for name, count in _sorted_counts(stats.removals_by_rule):
            lines.append(f"  {name.ljust(30)} {count}x")

    lines.append("")
    if stats.dry_run and stats.files_modified > 0:
        lines.append(
            click.style(
                "⚠️  This was a dry run. Run without --dry-run to apply changes.", fg="yellow"
            )
        )
    elif stats.files_modified > 0:
        lines.append(click.style("✅ Cleanup complete!", fg="green", bold=True))
    else:
        lines.append("✓ No legacy elements found to remove.")
    return "\n".join(lines)


def render_audit_human(stats: AuditStats, *, show_all: bool = False) -> str:
    """Render issues by type, per-file details and the severity summary."""
    lines: list[str] = [
        click.style("🔍 SEO Audit", bold=True),
        "============",
        "",
        "Issues by Type:",
        "---------------",
    ]
    severity_by_name = _severity_by_rule_name(stats.file_reports)
    for name, count in _sorted_counts(stats.issues_by_rule):
        severity = severity_by_name.get(name, Severity.INFO)
        lines.append(f"  {SEVERITY_ICONS[severity]} {name}: {count} files")

    lines.extend(["", "", "Detailed Issues by File:", "========================", ""])
    reports = sorted(stats.file_reports, key=lambda item: len(item.findings), reverse=True)
    for report in reports:
        if not show_all and not _has_blocking_issue(report):
            continue
        lines.append(click.style(f"📄 {report.path}", bold=True))
        lines.append(f'   Title: "{report.title}"')
        for finding in report.findings:
            lines.append("   " + _format_finding(finding))
        lines.append("")

    lines.extend(
        [
            "",
            click.style("📊 Summary", bold=True),
            "==========",
            f"Files scanned: {stats.files_scanned}",
            f"Files with issues: {stats.files_with_issues}",
        ]
    )
    if stats.errors:
        lines.append(click.style(f"Files with errors: {len(stats.errors)}", fg="red"))
    lines.extend(
        [
            "",
            "By severity:",
            f"  {SEVERITY_ICONS[Severity.ERROR]} Errors: {stats.issues_by_severity['error']}",
            f"  {SEVERITY_ICONS[Severity.WARNING]} Warnings: {stats.issues_by_severity['warning']}",
            f"  {SEVERITY_ICONS[Severity.INFO]} Info: {stats.issues_by_severity['info']}",
        ]
    )
    return "\n".join(lines)


def render_audit_json(stats: AuditStats, *, root: str) -> str:
    """Render stable JSON output for CI and automation."""
    return json.dumps(build_audit_payload(stats, root=root), sort_keys=True)


def build_audit_payload(stats: AuditStats, *, root: str) -> dict[str, Any]:
    """Build the full audit statistics payload."""
    return {
        "files_scanned": stats.files_scanned,
        "files_with_issues": stats.files_with_issues,
        "issues_by_rule": dict(stats.issues_by_rule),
        "issues_by_severity": dict(stats.issues_by_severity),
        "files": [_serialize_report(item) for item in stats.file_reports],
        "errors": [{"path": item.path, "message": item.message} for item in stats.errors],
        "meta": {
            "generated_at": datetime.now(tz=UTC)
            .replace(microsecond=0)
            .isoformat()
            .replace("+00:00", "Z"),
            "min_severity": stats.min_severity.value,
            "root": root,
            "version": __version__,
        },
    }


def _serialize_report(report: FileReport) -> dict[str, Any]:
    return {
        "path": report.path,
        "title": report.title,
        "findings": [_serialize_finding(item) for item in report.findings],
    }


def _serialize_finding(finding: Finding) -> dict[str, Any]:
    return {
        "rule_id": finding.rule_id,
        "name": finding.name,
        "severity": finding.severity.value,
        "detail": finding.detail,
    }


def _format_finding(finding: Finding) -> str:
    detail = f" - {finding.detail}" if finding.detail else ""
    text = f"{SEVERITY_ICONS[finding.severity]} {finding.name}{detail}"
    return click.style(text, fg=SEVERITY_COLORS[finding.severity])


def _has_blocking_issue(report: FileReport) -> bool:
    return report.count(Severity.ERROR) > 0 or report.count(Severity.WARNING) > 0


def _severity_by_rule_name(reports: list[FileReport]) -> dict[str, Severity]:
    mapping: dict[str, Severity] = {}
    for report in reports:
        for finding in report.findings:
            mapping.setdefault(finding.name, finding.severity)
    return mapping


def _sorted_counts(counts: dict[str, int]) -> list[tuple[str, int]]:
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)
