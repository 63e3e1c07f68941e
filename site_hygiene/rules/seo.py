"""SEO audit checks over page markup and front matter."""

from __future__ import annotations

import re

from site_hygiene.rules.base import AuditRule, Metadata, Severity

H1_RE = re.compile(r"<h1[^>]*>", re.IGNORECASE)
IMG_NO_ALT_RE = re.compile(r"<img(?![^>]*alt=)[^>]*>", re.IGNORECASE)
IMG_EMPTY_ALT_RE = re.compile(r"""<img[^>]*alt=["']\s*["'][^>]*>""", re.IGNORECASE)
ENTITY_RE = re.compile(r"&#\d+;|&[a-z]+;", re.IGNORECASE)
SHORT_FRAGMENT_RE = re.compile(r"\s\w{1,3}$")
TERMINAL_PUNCTUATION_RE = re.compile(r'[.!?"]$')

ELLIPSIS_MARKERS = ("...", "…")
DESCRIPTION_MIN = 50
DESCRIPTION_MAX = 160
RECOMMENDED_RANGE = "120-160"
DETAIL_PREVIEW_CHARS = 80


def _missing_h1(content: str, metadata: Metadata) -> bool:
    return H1_RE.search(content) is None


def _multiple_h1(content: str, metadata: Metadata) -> bool:
    return len(H1_RE.findall(content)) > 1


def _multiple_h1_detail(content: str, metadata: Metadata) -> str:
    return f"Found {len(H1_RE.findall(content))} h1 tags"


def _missing_title(content: str, metadata: Metadata) -> bool:
    return _is_blank(metadata.get("title"))


def _missing_description(content: str, metadata: Metadata) -> bool:
    return _is_blank(metadata.get("description"))


def _truncated_description(content: str, metadata: Metadata) -> bool:
    raw = metadata.get("description")
    if not raw:
        return False
    description = raw.strip()
    if len(description) <= DESCRIPTION_MIN:
        return False
    return (
        description.endswith(ELLIPSIS_MARKERS)
        or SHORT_FRAGMENT_RE.search(description) is not None
        or TERMINAL_PUNCTUATION_RE.search(description) is None
    )


def _truncated_description_detail(content: str, metadata: Metadata) -> str:
    return f'"{metadata["description"][:DETAIL_PREVIEW_CHARS]}..."'


def _description_too_short(content: str, metadata: Metadata) -> bool:
    description = metadata.get("description")
    return bool(description) and len(description) < DESCRIPTION_MIN


def _description_too_long(content: str, metadata: Metadata) -> bool:
    description = metadata.get("description")
    return bool(description) and len(description) > DESCRIPTION_MAX


def _description_length_detail(content: str, metadata: Metadata) -> str:
    return f"{len(metadata['description'])} chars (recommended: {RECOMMENDED_RANGE})"


def _missing_og_image(content: str, metadata: Metadata) -> bool:
    return _is_blank(metadata.get("ogImage"))


def _images_missing_alt(content: str, metadata: Metadata) -> bool:
    return IMG_NO_ALT_RE.search(content) is not None or IMG_EMPTY_ALT_RE.search(content) is not None


def _images_missing_alt_detail(content: str, metadata: Metadata) -> str:
    missing = len(IMG_NO_ALT_RE.findall(content))
    empty = len(IMG_EMPTY_ALT_RE.findall(content))
    return f"{missing} missing, {empty} empty"


def _html_entities(content: str, metadata: Metadata) -> bool:
    return any(ENTITY_RE.search(value) for value in _entity_fields(metadata))


def _html_entities_detail(content: str, metadata: Metadata) -> str:
    found: list[str] = []
    for value in _entity_fields(metadata):
        for entity in ENTITY_RE.findall(value):
            if entity not in found:
                found.append(entity)
    return f"Found: {', '.join(found)}"


def _missing_canonical_url(content: str, metadata: Metadata) -> bool:
    return not metadata.get("ogUrl") and not metadata.get("canonicalUrl")


def _entity_fields(metadata: Metadata) -> list[str]:
    return [value for value in (metadata.get("title"), metadata.get("description")) if value]


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


SEO_RULES: tuple[AuditRule, ...] = (
    AuditRule("missing_h1", "Missing H1 Tag", Severity.ERROR, _missing_h1),
    AuditRule(
        "multiple_h1",
        "Multiple H1 Tags",
        Severity.WARNING,
        _multiple_h1,
        _multiple_h1_detail,
    ),
    AuditRule("missing_title", "Missing Title", Severity.ERROR, _missing_title),
    AuditRule("missing_description", "Missing Description", Severity.ERROR, _missing_description),
    AuditRule(
        "truncated_description",
        "Truncated Description",
        Severity.WARNING,
        _truncated_description,
        _truncated_description_detail,
    ),
    AuditRule(
        "description_too_short",
        "Description Too Short",
        Severity.WARNING,
        _description_too_short,
        _description_length_detail,
    ),
    AuditRule(
        "description_too_long",
        "Description Too Long",
        Severity.INFO,
        _description_too_long,
        _description_length_detail,
    ),
    AuditRule("missing_og_image", "Missing OG Image", Severity.WARNING, _missing_og_image),
    AuditRule(
        "images_missing_alt",
        "Images Missing Alt Text",
        Severity.WARNING,
        _images_missing_alt,
        _images_missing_alt_detail,
    ),
    AuditRule(
        "html_entities",
        "Contains HTML Entities",
        Severity.WARNING,
        _html_entities,
        _html_entities_detail,
    ),
    AuditRule(
        "missing_canonical_url",
        "Missing Canonical URL",
        Severity.INFO,
        _missing_canonical_url,
    ),
)
