"""Tests for individual SEO audit checks."""

from __future__ import annotations

from site_hygiene.audit import audit_document
from site_hygiene.rules.base import Finding, Metadata, Severity
from site_hygiene.rules.seo import SEO_RULES

GOOD_DESCRIPTION = (
    "A practical guide to cleaning legacy WordPress markup out of static sites "
    "and keeping every page healthy for search."
)
GOOD_METADATA: Metadata = {
    "title": "A Good Page",
    "description": GOOD_DESCRIPTION,
    "ogImage": "/img/good.png",
    "canonicalUrl": "https://example.com/good/",
}
GOOD_BODY = '<h1>A Good Page</h1>\n<img src="good.png" alt="A healthy page">'


def test_rule_table_order_and_severities() -> None:
    assert [(rule.rule_id, rule.severity) for rule in SEO_RULES] == [
        ("missing_h1", Severity.ERROR),
        ("multiple_h1", Severity.WARNING),
        ("missing_title", Severity.ERROR),
        ("missing_description", Severity.ERROR),
        ("truncated_description", Severity.WARNING),
        ("description_too_short", Severity.WARNING),
        ("description_too_long", Severity.INFO),
        ("missing_og_image", Severity.WARNING),
        ("images_missing_alt", Severity.WARNING),
        ("html_entities", Severity.WARNING),
        ("missing_canonical_url", Severity.INFO),
    ]


def test_good_page_has_no_findings() -> None:
    assert audit_document(GOOD_BODY, dict(GOOD_METADATA)) == []


def test_missing_h1_fires_without_heading_only() -> None:
    assert "missing_h1" in _fired("<h2>Sub</h2>", GOOD_METADATA)
    assert "missing_h1" not in _fired("<H1 class='hero'>Title</H1>", GOOD_METADATA)


def test_multiple_h1_reports_count() -> None:
    findings = _findings("<h1>One</h1><H1 class='x'>Two</H1>", GOOD_METADATA)
    multiple = findings["multiple_h1"]
    assert multiple.severity is Severity.WARNING
    assert multiple.detail == "Found 2 h1 tags"
    assert "missing_h1" not in findings


def test_missing_title_and_description_treat_blank_as_absent() -> None:
    fired = _fired(GOOD_BODY, {**GOOD_METADATA, "title": "   ", "description": ""})
    assert "missing_title" in fired
    assert "missing_description" in fired

    fired = _fired(GOOD_BODY, {"ogImage": "/a.png", "ogUrl": "https://example.com/"})
    assert "missing_title" in fired
    assert "missing_description" in fired
    assert "truncated_description" not in fired
    assert "description_too_short" not in fired


def test_truncated_description_fires_for_fragment_without_punctuation() -> None:
    description = "This is a great article about static site hygiene for many thing"
    findings = _findings(GOOD_BODY, {**GOOD_METADATA, "description": description})
    truncated = findings["truncated_description"]
    assert truncated.severity is Severity.WARNING
    assert truncated.detail == f'"{description}..."'

    complete = "This is a great article about static site hygiene for many things."
    assert "truncated_description" not in _fired(
        GOOD_BODY, {**GOOD_METADATA, "description": complete}
    )


def test_truncated_description_fires_for_ellipsis_and_short_fragment() -> None:
    ellipsis = "Everything you ever wanted to know about migrating a blog, and more..."
    fragment = "Everything you ever wanted to know about migrating a blog and the"
    quoted = 'Everything you ever wanted to know, as the editor said, "ship it"'
    assert "truncated_description" in _fired(GOOD_BODY, {**GOOD_METADATA, "description": ellipsis})
    assert "truncated_description" in _fired(GOOD_BODY, {**GOOD_METADATA, "description": fragment})
    assert "truncated_description" not in _fired(
        GOOD_BODY, {**GOOD_METADATA, "description": quoted}
    )


def test_truncated_description_detail_previews_first_80_chars() -> None:
    description = "word " * 30
    findings = _findings(GOOD_BODY, {**GOOD_METADATA, "description": description})
    assert findings["truncated_description"].detail == f'"{description[:80]}..."'


def test_short_description_is_not_checked_for_truncation() -> None:
    description = "This is a great article about many thing"
    findings = _findings(GOOD_BODY, {**GOOD_METADATA, "description": description})
    assert "truncated_description" not in findings
    assert findings["description_too_short"].detail == "40 chars (recommended: 120-160)"


def test_long_description_is_info() -> None:
    description = ("A sentence. " * 15).strip()
    findings = _findings(GOOD_BODY, {**GOOD_METADATA, "description": description})
    too_long = findings["description_too_long"]
    assert too_long.severity is Severity.INFO
    assert too_long.detail == "179 chars (recommended: 120-160)"
    assert "description_too_short" not in findings


def test_missing_og_image() -> None:
    metadata = {key: value for key, value in GOOD_METADATA.items() if key != "ogImage"}
    assert "missing_og_image" in _fired(GOOD_BODY, metadata)
    assert "missing_og_image" in _fired(GOOD_BODY, {**GOOD_METADATA, "ogImage": "  "})


def test_images_missing_alt_counts_missing_and_empty() -> None:
    body = (
        "<h1>Gallery</h1>"
        '<img src="a.png">'
        '<img src="b.png" alt="">'
        "<IMG src='c.png' alt='  '>"
        '<img src="d.png" alt="described">'
    )
    findings = _findings(body, GOOD_METADATA)
    assert findings["images_missing_alt"].detail == "1 missing, 2 empty"
    assert "images_missing_alt" not in _fired(GOOD_BODY, GOOD_METADATA)


def test_html_entities_are_deduplicated_in_first_seen_order() -> None:
    metadata = {
        **GOOD_METADATA,
        "title": "Tom &amp; Jerry&#8217;s Guide",
        "description": GOOD_DESCRIPTION.replace(" and ", " &amp; "),
    }
    findings = _findings(GOOD_BODY, metadata)
    assert findings["html_entities"].detail == "Found: &amp;, &#8217;"
    assert "html_entities" not in _fired(GOOD_BODY, GOOD_METADATA)


def test_missing_canonical_url_accepts_either_field() -> None:
    base = {key: value for key, value in GOOD_METADATA.items() if key != "canonicalUrl"}
    assert "missing_canonical_url" in _fired(GOOD_BODY, base)
    assert "missing_canonical_url" not in _fired(GOOD_BODY, {**base, "ogUrl": "https://x.io/"})
    finding = _findings(GOOD_BODY, base)["missing_canonical_url"]
    assert finding.severity is Severity.INFO
    assert finding.detail is None


def test_metadata_is_parsed_from_content_when_not_given() -> None:
    content = "\n".join(
        [
            "---",
            'title: "Parsed"',
            f"description: {GOOD_DESCRIPTION}",
            "ogImage: /img/parsed.png",
            "ogUrl: https://example.com/parsed/",
            "---",
            GOOD_BODY,
        ]
    )
    assert audit_document(content) == []


def _findings(content: str, metadata: Metadata) -> dict[str, Finding]:
    return {finding.rule_id: finding for finding in audit_document(content, dict(metadata))}


def _fired(content: str, metadata: Metadata) -> set[str]:
    return set(_findings(content, metadata))
