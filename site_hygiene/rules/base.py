"""Rule and finding models shared by the cleanup and audit tables."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

Metadata = dict[str, str]
Predicate = Callable[[str, Metadata], bool]
DetailFn = Callable[[str, Metadata], str]
TrimPolicy = Literal["none", "line", "all"]

TRIM_POLICIES: tuple[str, ...] = ("none", "line", "all")


class Severity(StrEnum):
    """Audit severity, ordered error > warning > info."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def level(self) -> int:
        return _SEVERITY_LEVELS[self]

    @classmethod
    def parse(cls, raw: str) -> Severity:
        """Parse a severity name, raising ValueError for unknown levels."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            choices = ", ".join(item.value for item in cls)
            raise ValueError(f"Unknown severity '{raw}'. Expected one of: {choices}") from None


_SEVERITY_LEVELS = {Severity.ERROR: 3, Severity.WARNING: 2, Severity.INFO: 1}


@dataclass(frozen=True, slots=True)
class CleanupRule:
    """A fragment-removal rule bounded by an opening and a closing marker."""

    rule_id: str
    name: str
    start: str
    end: str
    trim: TrimPolicy = "none"
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "pattern", compile_fragment_pattern(self.start, self.end, self.trim)
        )

    @property
    def greedy(self) -> bool:
        """True when the rule also swallows surrounding whitespace."""
        return self.trim == "all"

    def apply(self, content: str) -> tuple[str, int]:
        """Delete every occurrence and return the new text plus the count."""
        return self.pattern.subn("", content)


@dataclass(frozen=True, slots=True)
class AuditRule:
    """An SEO check over document text and front-matter metadata."""

    rule_id: str
    name: str
    severity: Severity
    predicate: Predicate
    detail: DetailFn | None = None


@dataclass(slots=True)
class Finding:
    """A single audit finding emitted for one document."""

    rule_id: str
    name: str
    severity: Severity
    detail: str | None = None


def compile_fragment_pattern(start: str, end: str, trim: str) -> re.Pattern[str]:
    """Build the matcher for a delimited fragment.

    The body between the markers is matched lazily so each occurrence stops at
    the first closing marker. ``trim`` controls surrounding whitespace:
    ``none`` leaves it, ``line`` eats trailing whitespace up to the last line
    break, ``all`` eats leading and trailing whitespace.
    """
    if trim not in TRIM_POLICIES:
        choices = ", ".join(TRIM_POLICIES)
        raise ValueError(f"Unknown trim policy '{trim}'. Expected one of: {choices}")

    body = f"(?:{start}).*?(?:{end})"
    if trim == "line":
        source = body + r"\s*(?=\n)"
    elif trim == "all":
        # Leading whitespace is only taken from the start of a run.
        source = r"(?:(?<!\s)\s+)?" + body + r"\s*"
    else:
        source = body
    try:
        return re.compile(source, re.DOTALL)
    except re.error as exc:
        raise ValueError(f"Invalid fragment pattern {source!r}: {exc}") from exc
