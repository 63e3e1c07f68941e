"""Tests for audit aggregation and severity filtering."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from site_hygiene.audit import NO_TITLE, AuditStats, audit_document, run_audit
from site_hygiene.rules import build_audit_rules
from site_hygiene.rules.base import AuditRule, Metadata, Severity

DESCRIPTION = (
    "A practical guide to cleaning legacy WordPress markup out of static sites "
    "and keeping every page healthy for search."
)


def test_threshold_drops_rules_below_minimum() -> None:
    error_rules = build_audit_rules(min_severity=Severity.ERROR)
    assert {rule.severity for rule in error_rules} == {Severity.ERROR}
    assert [rule.rule_id for rule in error_rules] == [
        "missing_h1",
        "missing_title",
        "missing_description",
    ]

    warning_rules = build_audit_rules(min_severity=Severity.WARNING)
    assert Severity.INFO not in {rule.severity for rule in warning_rules}
    assert len(build_audit_rules()) == 11


def test_disabled_audit_rules_are_removed_and_unknown_ids_raise() -> None:
    rules = build_audit_rules(disabled_rule_ids=["missing_og_image"])
    assert "missing_og_image" not in {rule.rule_id for rule in rules}
    with pytest.raises(ValueError, match="Unknown audit rule ids: nope"):
        build_audit_rules(disabled_rule_ids=["nope"])


def test_warning_only_page_has_no_issues_at_error_threshold(tmp_path: Path) -> None:
    page = _write_page(tmp_path / "index.html", og_image=None)

    stats = run_audit(
        [page],
        root=tmp_path,
        rules=build_audit_rules(min_severity=Severity.ERROR),
        min_severity=Severity.ERROR,
    )
    assert stats.files_scanned == 1
    assert stats.files_with_issues == 0
    assert stats.issues_by_rule == {}
    assert stats.issues_by_severity == {"error": 0, "warning": 0, "info": 0}

    unfiltered = run_audit([page], root=tmp_path)
    assert unfiltered.files_with_issues == 1
    assert unfiltered.issues_by_rule == {"Missing OG Image": 1}


def test_run_audit_threshold_applies_without_explicit_rules(tmp_path: Path) -> None:
    page = tmp_path / "index.html"
    page.write_text('---\ntitle: "Home"\n---\n<h1>Home</h1>\n', encoding="utf-8")

    stats = run_audit([page], root=tmp_path, min_severity=Severity.ERROR)
    assert stats.issues_by_severity == {"error": 1, "warning": 0, "info": 0}
    assert stats.issues_by_rule == {"Missing Description": 1}


def test_run_audit_drops_passed_rules_below_threshold(tmp_path: Path) -> None:
    page = _write_page(tmp_path / "index.html", og_image=None, canonical=False)

    stats = run_audit(
        [page], root=tmp_path, rules=build_audit_rules(), min_severity=Severity.WARNING
    )
    assert stats.issues_by_rule == {"Missing OG Image": 1}
    assert stats.issues_by_severity["info"] == 0


def test_run_audit_aggregates_per_rule_and_per_severity(tmp_path: Path) -> None:
    clean = _write_page(tmp_path / "index.html")
    bare = tmp_path / "blog" / "index.html"
    bare.parent.mkdir()
    bare.write_text('<h2>No front matter</h2><img src="x.png">', encoding="utf-8")
    titled = _write_page(tmp_path / "about" / "index.html", h1_count=2, canonical=False)

    stats = run_audit([clean, bare, titled], root=tmp_path)

    assert stats.files_scanned == 3
    assert stats.files_with_issues == 2
    assert stats.issues_by_rule == {
        "Missing H1 Tag": 1,
        "Missing Title": 1,
        "Missing Description": 1,
        "Missing OG Image": 1,
        "Images Missing Alt Text": 1,
        "Missing Canonical URL": 2,
        "Multiple H1 Tags": 1,
    }
    assert stats.issues_by_severity == {"error": 3, "warning": 3, "info": 2}
    assert sum(stats.issues_by_rule.values()) == sum(stats.issues_by_severity.values())

    reports = {report.path: report for report in stats.file_reports}
    assert set(reports) == {"blog/index.html", "about/index.html"}
    assert reports["blog/index.html"].title == NO_TITLE
    assert reports["about/index.html"].title == "About"
    assert reports["about/index.html"].count(Severity.WARNING) == 1
    assert [finding.rule_id for finding in reports["blog/index.html"].findings] == [
        "missing_h1",
        "missing_title",
        "missing_description",
        "missing_og_image",
        "images_missing_alt",
        "missing_canonical_url",
    ]


def test_zero_files_produces_empty_stats(tmp_path: Path) -> None:
    stats = run_audit([], root=tmp_path)
    assert stats.files_scanned == 0
    assert stats.files_with_issues == 0
    assert stats.issues_by_severity == {"error": 0, "warning": 0, "info": 0}


def test_detail_is_only_computed_when_predicate_fires() -> None:
    calls: list[str] = []

    def detail(content: str, metadata: Metadata) -> str:
        calls.append(content)
        return "computed"

    rules = (
        AuditRule("never", "Never", Severity.WARNING, lambda c, m: False, detail),
        AuditRule("always", "Always", Severity.WARNING, lambda c, m: True, detail),
    )
    findings = audit_document("<p>x</p>", {}, rules)
    assert [finding.rule_id for finding in findings] == ["always"]
    assert findings[0].detail == "computed"
    assert calls == ["<p>x</p>"]


def test_failing_detail_degrades_to_no_detail(caplog: pytest.LogCaptureFixture) -> None:
    def broken(content: str, metadata: Metadata) -> str:
        raise KeyError("description")

    rules = (AuditRule("fragile", "Fragile", Severity.ERROR, lambda c, m: True, broken),)
    caplog.set_level(logging.WARNING, logger="site_hygiene")

    findings = audit_document("<p>x</p>", {}, rules)
    stats = AuditStats()
    stats.record("page.html", {}, findings)

    assert len(findings) == 1
    assert findings[0].detail is None
    assert stats.issues_by_rule == {"Fragile": 1}
    assert stats.issues_by_severity["error"] == 1
    assert "Detail for fragile failed" in caplog.text


def test_unreadable_file_does_not_abort_run(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    broken = tmp_path / "broken"
    broken.mkdir()
    page = _write_page(tmp_path / "index.html", og_image=None)

    caplog.set_level(logging.ERROR, logger="site_hygiene")
    stats = run_audit([broken, page], root=tmp_path)

    assert stats.files_scanned == 2
    assert [item.path for item in stats.errors] == ["broken"]
    assert stats.files_with_issues == 1
    assert "Error processing broken" in caplog.text


def _write_page(
    path: Path,
    *,
    og_image: str | None = "/img/a.png",
    h1_count: int = 1,
    canonical: bool = True,
) -> Path:
    title = "About" if path.parent.name == "about" else "Home"
    lines = ["---", f'title: "{title}"', f"description: {DESCRIPTION}"]
    if og_image is not None:
        lines.append(f"ogImage: {og_image}")
    if canonical:
        lines.append("canonicalUrl: https://example.com/")
    lines.append("---")
    lines.extend(f"<h1>{title} {index}</h1>" for index in range(h1_count))
    lines.append('<img src="hero.png" alt="Hero">')
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
