"""
Tree materialization for maketree.

Applies a parsed tree description to the filesystem, in input order.
"""

import shutil
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Iterable

from tqdm import tqdm

from .errors import ConflictError, FilesystemError, UnsafePathError
from .parser import Entry, collect_entries
from .utils import DEBUG, INFO, MAX_VERBOSITY, emit, trace

DIRECTORY = "directory"
FILE = "file"


@dataclass(frozen=True)
class BuildOptions:
    """Options for one materialization run."""
    dry_run: bool = False
    force: bool = False
    verbosity: int = 0
    progress: bool = False

    def __post_init__(self):
        object.__setattr__(self, "verbosity", max(0, min(self.verbosity, MAX_VERBOSITY)))


@dataclass
class BuildReport:
    dry_run: bool = False
    created_dirs: int = 0
    created_files: int = 0
    removed: int = 0
    unchanged: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.created_dirs or self.created_files or self.removed)

    def to_dict(self) -> dict:
        return asdict(self)


class TreeBuilder:
    """
    Creates directories and empty files for a sequence of entries.

    Paths are rebuilt from a stack of ancestor directory names indexed by
    depth. When entry `e` is processed the stack is resized to `e.depth`
    (truncated, or padded with empty names when the input skips levels),
    so stack[0:e.depth] holds the currently open ancestors. A directory
    entry is then pushed at index `e.depth`, replacing any previous
    sibling as the parent of the entries that follow.

    Padding flattens the gap: an entry two levels deeper than its
    predecessor lands directly inside that predecessor.
    """

    def __init__(self, base: Path | None = None, options: BuildOptions | None = None):
        self.base = Path(base) if base is not None else Path(".")
        self.options = options or BuildOptions()
        self.report = BuildReport(dry_run=self.options.dry_run)
        # Dry-run only: paths already reported as created or replaced
        self._planned: dict[Path, str] = {}

    def build(self, entries: list[Entry]) -> BuildReport:
        """
        Materialize entries in order. Stops at the first error.

        Args:
            entries: Parsed entries with directory inference applied.

        Returns:
            Counters for what was (or would be) done.

        Raises:
            ConflictError: A node has the wrong type and force is off.
            FilesystemError: An underlying filesystem call failed.
            UnsafePathError: An entry would land outside the base directory.
        """
        stack: list[str] = []

        for entry in tqdm(entries, unit="entry", disable=not self.options.progress):
            if entry.depth > len(stack):
                stack.extend([""] * (entry.depth - len(stack)))
            else:
                del stack[entry.depth:]

            path = self._resolve([c for c in stack if c] + [entry.name])

            if entry.is_directory:
                changed = self.ensure_dir(path)
                stack.append(entry.name)
            else:
                changed = self.ensure_file(path)

            if not changed:
                self.report.unchanged += 1

        return self.report

    def create_paths(self, lines: Iterable[str]) -> BuildReport:
        """
        Materialize a flat list of relative paths, one per line.

        A trailing `/` marks a directory; files get their parents created.
        """
        for line in lines:
            rel = line.strip()
            name = rel.rstrip("/")
            if not name:
                continue

            path = self._resolve([name])
            if rel.endswith("/"):
                changed = self.ensure_dir(path)
            else:
                changed = self.ensure_file(path)

            if not changed:
                self.report.unchanged += 1

        return self.report

    def ensure_dir(self, path: Path) -> bool:
        """
        Make sure `path` is a directory.

        Returns:
            True if something was (or would be) created or replaced.
        """
        opts = self.options
        kind = self._kind(path)

        if kind == DIRECTORY:
            return False

        if kind == FILE:
            if not opts.force:
                raise ConflictError(path, DIRECTORY)
            trace(opts.verbosity, INFO, f"[INFO] Removing file to create dir: {path}")
            trace(opts.verbosity, DEBUG, f"[DEBUG] rm: {path}")
            if opts.dry_run:
                emit(f"Would remove file: {path}")
            else:
                self._remove_file(path)
            self.report.removed += 1

        trace(opts.verbosity, DEBUG, f"[DEBUG] mkdir: {path}")
        if opts.dry_run:
            emit(f"Would mkdir -p {path}")
            self._plan(path, DIRECTORY)
        else:
            self._mkdir(path)
        self.report.created_dirs += 1
        return True

    def ensure_file(self, path: Path) -> bool:
        """
        Make sure `path` is a regular file. Existing files are left untouched.

        Returns:
            True if something was (or would be) created or replaced.
        """
        opts = self.options
        self.ensure_dir(path.parent)

        kind = self._kind(path)

        if kind == FILE:
            return False

        if kind == DIRECTORY:
            if not opts.force:
                raise ConflictError(path, FILE)
            trace(opts.verbosity, INFO, f"[INFO] Removing dir to create file: {path}")
            trace(opts.verbosity, DEBUG, f"[DEBUG] rm -r: {path}")
            if opts.dry_run:
                emit(f"Would remove dir: {path}")
            else:
                self._remove_tree(path)
            self.report.removed += 1

        trace(opts.verbosity, DEBUG, f"[DEBUG] touch: {path}")
        if opts.dry_run:
            emit(f"Would touch {path}")
            self._plan(path, FILE)
        else:
            self._touch(path)
        self.report.created_files += 1
        return True

    def _resolve(self, components: list[str]) -> Path:
        rel = Path(*components)
        if rel.is_absolute() or ".." in rel.parts:
            raise UnsafePathError(rel)
        return self.base / rel

    def _kind(self, path: Path) -> str | None:
        planned = self._planned.get(path)
        if planned is not None:
            return planned
        if path.is_dir():
            return DIRECTORY
        if path.exists():
            return FILE
        return None

    def _plan(self, path: Path, kind: str):
        self._planned[path] = kind
        if kind == DIRECTORY:
            # mkdir -p also creates missing ancestors
            for parent in path.parents:
                if parent in self._planned or parent.exists():
                    break
                self._planned[parent] = DIRECTORY

    def _mkdir(self, path: Path):
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError("create directory", path, e) from e

    def _touch(self, path: Path):
        try:
            path.touch()
        except OSError as e:
            raise FilesystemError("create file", path, e) from e

    def _remove_file(self, path: Path):
        try:
            path.unlink()
        except OSError as e:
            raise FilesystemError("remove file", path, e) from e

    def _remove_tree(self, path: Path):
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise FilesystemError("remove directory", path, e) from e


def build_from_text(
    text: str,
    base: Path | None = None,
    options: BuildOptions | None = None
) -> BuildReport:
    """
    Parse a tree description and materialize it.

    Args:
        text: Full input text (tree output or indented list).
        base: Directory the tree is rooted in. Defaults to the current directory.
        options: Dry-run / force / verbosity settings.
    """
    entries = collect_entries(text)
    return TreeBuilder(base, options).build(entries)


def create_paths(
    lines: Iterable[str],
    base: Path | None = None,
    options: BuildOptions | None = None
) -> BuildReport:
    """Materialize a flat list of relative paths (see TreeBuilder.create_paths)."""
    return TreeBuilder(base, options).create_paths(lines)
