"""
Tree-text parsing for maketree.

Turns the output of `tree` (with or without -F) or a 2-space indented list
into an ordered list of entries. Two notations are supported:

- Connector style: `├── name` / `└── name` preceded by `│   ` or `    ` chunks.
- Indented list: two leading whitespace characters per level.

A line uses the connector style whenever it contains the connector; otherwise
it is read as an indented list line.
"""

from dataclasses import dataclass
from typing import Iterable

CONNECTOR = "── "
PREFIX_CHUNK_LEN = 4

# Newer `tree` releases pad the prefix with non-breaking spaces
PREFIX_CHUNKS = {
    "│   ",
    "    ",
    "│\u00a0\u00a0 ",
    "\u00a0\u00a0\u00a0 ",
}

INDENT_WIDTH = 2


@dataclass
class Entry:
    """One node of the described tree."""
    depth: int
    name: str
    is_directory: bool = False


def is_stats_line(line: str) -> bool:
    """
    Check if a line is a `tree` summary such as "3 directories, 2 files".

    Matching is loose on purpose: any digit plus the substrings
    "director" and "file".
    """
    s = line.strip()
    if not any(ch.isdigit() for ch in s):
        return False
    return "director" in s and "file" in s


def is_ignored_line(line: str) -> bool:
    """Blank lines, a lone `.` (tree's root line) and summary lines carry no entry."""
    s = line.strip()
    return not s or s == "." or is_stats_line(s)


def parse_connector_line(line: str) -> tuple[int, str] | None:
    """
    Parse a connector-style line.

    Args:
        line: Raw input line.

    Returns:
        (depth, name) or None if the line has no connector.
    """
    conn_pos = line.find(CONNECTOR)
    if conn_pos < 0:
        return None

    prefix = line[:conn_pos]
    depth = 0
    i = 0
    while i + PREFIX_CHUNK_LEN <= len(prefix):
        if prefix[i:i + PREFIX_CHUNK_LEN] not in PREFIX_CHUNKS:
            break
        depth += 1
        i += PREFIX_CHUNK_LEN

    name = line[conn_pos + len(CONNECTOR):].strip()
    return depth, name


def parse_indented_line(line: str) -> tuple[int, str]:
    """Parse an indented-list line: every 2 leading whitespace chars is one level."""
    stripped = line.lstrip()
    leading = len(line) - len(stripped)
    return leading // INDENT_WIDTH, stripped.strip()


def classify_line(line: str) -> Entry | None:
    """
    Classify one raw line.

    Returns:
        An Entry, or None when the line should be ignored.
    """
    if is_ignored_line(line):
        return None

    parsed = parse_connector_line(line)
    if parsed is None:
        parsed = parse_indented_line(line)
    depth, raw_name = parsed

    name = raw_name.rstrip("/")
    if not name:
        return None

    return Entry(depth=depth, name=name, is_directory=raw_name.endswith("/"))


def infer_directories(entries: list[Entry]) -> list[Entry]:
    """
    Mark entries as directories when the next entry is deeper.

    Plain `tree` output (no -F) renders directories and files the same way,
    so depth is the only hint. Entries are never downgraded, and the last
    entry keeps its type.
    """
    for current, following in zip(entries, entries[1:]):
        if not current.is_directory and following.depth > current.depth:
            current.is_directory = True
    return entries


def collect_entries(source: str | Iterable[str]) -> list[Entry]:
    """
    Parse a whole tree description.

    Args:
        source: The full input text, or an iterable of lines.

    Returns:
        Entries in input order, with directory inference applied.
    """
    lines = source.splitlines() if isinstance(source, str) else source

    entries = []
    for line in lines:
        entry = classify_line(line)
        if entry is not None:
            entries.append(entry)

    return infer_directories(entries)


def looks_like_tree(entries: list[Entry]) -> bool:
    """A flat list of top-level files is treated as a path list, not a tree."""
    return any(e.depth > 0 or e.is_directory for e in entries)
