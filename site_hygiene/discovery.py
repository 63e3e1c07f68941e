"""Candidate file discovery under a site root."""

from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

CLEANUP_INCLUDE = ("**/*.html",)
CLEANUP_EXCLUDE = (
    "node_modules/**",
    "_site/**",
    "dist/**",
    ".git/**",
    "_includes/**",
    "perfect-your-life/**",
    "dark-website/**",
)
AUDIT_INCLUDE = ("**/index.html",)
AUDIT_EXCLUDE = (
    "node_modules/**",
    "_site/**",
    "_includes/**",
    "scripts/**",
)


class DiscoveryError(RuntimeError):
    """Raised when the site root cannot be walked at all."""


def discover_files(
    root: Path,
    *,
    include: list[str] | tuple[str, ...],
    exclude: list[str] | tuple[str, ...] = (),
) -> list[Path]:
    """Return matching files under ``root`` in a stable sorted order.

    Patterns are matched against POSIX paths relative to ``root``. Excluded
    directories are pruned rather than walked.
    """
    if not root.exists():
        raise DiscoveryError(f"Root directory does not exist: {root}")
    if not root.is_dir():
        raise DiscoveryError(f"Root is not a directory: {root}")

    matches: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix()
        dirnames[:] = sorted(
            name for name in dirnames if not _is_excluded(_join(rel_dir, name) + "/", exclude)
        )
        for filename in filenames:
            rel_path = _join(rel_dir, filename)
            if not _matches_any(rel_path, include):
                continue
            if _is_excluded(rel_path, exclude):
                continue
            matches.append(current / filename)
    return sorted(matches)


def _join(rel_dir: str, name: str) -> str:
    return name if rel_dir == "." else f"{rel_dir}/{name}"


def _matches_any(rel_path: str, patterns: list[str] | tuple[str, ...]) -> bool:
    for pattern in patterns:
        if fnmatch.fnmatch(rel_path, pattern):
            return True
        # "**/" also matches files at the root
        if pattern.startswith("**/") and fnmatch.fnmatch(rel_path, pattern[3:]):
            return True
    return False


def _is_excluded(rel_path: str, patterns: list[str] | tuple[str, ...]) -> bool:
    return bool(patterns) and _matches_any(rel_path, patterns)


def _log_walk_error(exc: OSError) -> None:
    logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror)
