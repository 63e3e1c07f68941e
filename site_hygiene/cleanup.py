"""Cleanup evaluation and run statistics."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from site_hygiene.front_matter import FileError, display_path, read_document, write_document
from site_hygiene.rules import default_cleanup_rules
from site_hygiene.rules.base import CleanupRule

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CleanupResult:
    """Outcome of running the cleanup table over one document."""

    content: str
    removals: dict[str, int] = field(default_factory=dict)

    @property
    def total_removals(self) -> int:
        return sum(self.removals.values())


@dataclass(slots=True)
class ModifiedFile:
    """A file that had (or would have had) fragments removed."""

    path: str
    removals: int


@dataclass(slots=True)
class CleanupStats:
    """Run-wide cleanup statistics."""

    dry_run: bool = False
    files_scanned: int = 0
    files_modified: int = 0
    removals_by_rule: dict[str, int] = field(default_factory=dict)
    modified_files: list[ModifiedFile] = field(default_factory=list)
    errors: list[FileError] = field(default_factory=list)

    @property
    def total_removals(self) -> int:
        return sum(self.removals_by_rule.values())

    def record(self, path: str, result: CleanupResult, rule_names: dict[str, str]) -> None:
        """Fold one document's result into the run totals."""
        if result.total_removals == 0:
            return
        self.files_modified += 1
        self.modified_files.append(ModifiedFile(path=path, removals=result.total_removals))
        for rule_id, count in result.removals.items():
            name = rule_names.get(rule_id, rule_id)
            self.removals_by_rule[name] = self.removals_by_rule.get(name, 0) + count


def cleanup_content(content: str, rules: tuple[CleanupRule, ...] | None = None) -> CleanupResult:
    """Apply every cleanup rule in order and count what each removed."""
    active_rules = rules if rules is not None else default_cleanup_rules()
    modified = content
    removals: dict[str, int] = {}
    for rule in active_rules:
        modified, count = rule.apply(modified)
        if count > 0:
            removals[rule.rule_id] = count
    return CleanupResult(content=modified, removals=removals)


def run_cleanup(
    paths: list[Path],
    *,
    root: Path,
    rules: tuple[CleanupRule, ...] | None = None,
    dry_run: bool = False,
) -> CleanupStats:
    """Clean every file in order, writing back only outside dry-run mode."""
    active_rules = rules if rules is not None else default_cleanup_rules()
    rule_names = {rule.rule_id: rule.name for rule in active_rules}
    stats = CleanupStats(dry_run=dry_run)

    for path in paths:
        rel_path = display_path(path, root)
        stats.files_scanned += 1
        try:
            result = cleanup_content(read_document(path), active_rules)
            if result.total_removals > 0 and not dry_run:
                write_document(path, result.content)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Error processing %s: %s", rel_path, exc)
            stats.errors.append(FileError(path=rel_path, message=str(exc)))
            continue

        if result.total_removals > 0:
            logger.debug("%s: %d section(s) removed", rel_path, result.total_removals)
        stats.record(rel_path, result, rule_names)
    return stats
