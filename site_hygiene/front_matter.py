"""Front-matter header parsing and document loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from re import DOTALL, compile

HEADER_RE = compile(r"\A---\n(.*?)\n---[ \t]*(?:\n|\Z)", DOTALL)
QUOTED_LINE_RE = compile(r"^(\w+):\s*([\"'])(.*)\2\s*$")
BARE_LINE_RE = compile(r"^(\w+):\s*(.+?)\s*$")


def parse_front_matter(content: str) -> dict[str, str]:
    """Parse the leading ``---`` block into a flat key/value mapping.

    Only ``key: value`` lines are understood. Values wrapped in matching
    single or double quotes lose the quotes; bare values are trimmed. Any
    other line is skipped, and a document without a header yields ``{}``.
    """
    normalized = content.replace("\r\n", "\n")
    match = HEADER_RE.match(normalized)
    if match is None:
        return {}

    metadata: dict[str, str] = {}
    for line in match.group(1).split("\n"):
        quoted = QUOTED_LINE_RE.match(line)
        if quoted is not None:
            metadata[quoted.group(1)] = quoted.group(3)
            continue
        bare = BARE_LINE_RE.match(line)
        if bare is not None:
            metadata[bare.group(1)] = bare.group(2)
    return metadata


def read_document(path: Path) -> str:
    """Read a document as UTF-8 text without translating line endings."""
    with path.open(encoding="utf-8", newline="") as file_obj:
        return file_obj.read()


def write_document(path: Path, content: str) -> None:
    """Write a document back as UTF-8 text, keeping its line endings."""
    with path.open("w", encoding="utf-8", newline="") as file_obj:
        file_obj.write(content)


@dataclass(slots=True)
class FileError:
    """A per-file read or write failure that the run recovered from."""

    path: str
    message: str


def display_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` when possible, in POSIX form."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
