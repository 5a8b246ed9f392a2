"""
Clipboard helpers for the copy and paste commands.

Text goes through pyperclip. File references use AppleScript, so
`copy_file_reference` only works on macOS.
"""

import os
import subprocess
from pathlib import Path

import pyperclip

from .errors import ClipboardError

FILE_REFERENCE_SCRIPT = """
tell application "System Events"
    set the clipboard to (POSIX file "{path}")
end tell
"""


def copy_text(text: str) -> None:
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"Could not copy to clipboard: {e}") from e


def paste_text() -> str:
    try:
        return pyperclip.paste()
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"Could not read clipboard: {e}") from e


def copy_file_reference(path: Path) -> None:
    """Put a file (not its contents) on the clipboard, as Finder's Copy does."""
    escaped = str(path).replace("\\", "\\\\").replace('"', '\\"')
    script = FILE_REFERENCE_SCRIPT.format(path=escaped)
    try:
        result = subprocess.run(["osascript", "-e", script], capture_output=True, text=True)
    except OSError as e:
        raise ClipboardError(f"Failed to run osascript: {e}") from e

    if result.returncode != 0:
        raise ClipboardError(f"Failed to copy file to clipboard: {result.stderr.strip()}")


def is_text_file(path: Path) -> bool:
    """Check whether a file's bytes decode as UTF-8."""
    try:
        path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError):
        return False
    return True


def list_directory(path: Path) -> str:
    """
    List a directory as sorted relative paths, one per line.

    Directories end with `/`, the root itself is `./`. Symlinks are skipped.

    Args:
        path: Directory to list.

    Returns:
        Newline-joined listing.
    """
    root = Path(path)
    paths = ["./"]

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)

        for dirname in dirnames:
            full = current / dirname
            if full.is_symlink():
                continue
            paths.append(full.relative_to(root).as_posix() + "/")

        for filename in filenames:
            full = current / filename
            if full.is_symlink() or not full.is_file():
                continue
            paths.append(full.relative_to(root).as_posix())

    paths.sort()
    return "\n".join(paths)


def render_tree(path: Path) -> str:
    """
    Describe a directory as a 2-space indented list.

    Depth-first, directories before files, alphabetical within a level.
    Directories end with `/`. The root itself is not included, so building
    the output inside another directory reproduces the same layout.
    """
    lines: list[str] = []

    def walk(directory: Path, depth: int):
        children = sorted(directory.iterdir(), key=lambda p: p.name)
        indent = "  " * depth

        for child in children:
            if child.is_dir() and not child.is_symlink():
                lines.append(f"{indent}{child.name}/")
                walk(child, depth + 1)

        for child in children:
            if child.is_file() and not child.is_symlink():
                lines.append(f"{indent}{child.name}")

    walk(Path(path), 0)
    return "\n".join(lines)
