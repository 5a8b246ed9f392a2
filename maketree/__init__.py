"""
maketree
========

Create directory trees on disk from `tree` output or a 2-space indented
list, and copy/paste file contents or directory structure via the clipboard.
"""

__version__ = "1.0.0"

from .builder import BuildOptions, BuildReport, TreeBuilder, build_from_text, create_paths
from .errors import (
    ClipboardError,
    ConflictError,
    FilesystemError,
    InputReadError,
    MaketreeError,
    UnsafePathError,
)
from .parser import Entry, classify_line, collect_entries, infer_directories

__all__ = [
    "BuildOptions",
    "BuildReport",
    "TreeBuilder",
    "build_from_text",
    "create_paths",
    "ClipboardError",
    "ConflictError",
    "FilesystemError",
    "InputReadError",
    "MaketreeError",
    "UnsafePathError",
    "Entry",
    "classify_line",
    "collect_entries",
    "infer_directories",
]
