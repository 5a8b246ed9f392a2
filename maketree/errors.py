"""
Error types raised by maketree.

The core never exits the process; the CLI maps these to exit codes.
"""

from pathlib import Path


class MaketreeError(Exception):
    """Base class for all maketree failures."""


class ConflictError(MaketreeError):
    """A path exists with the wrong node type and --force was not given."""

    def __init__(self, path: Path, expected: str):
        self.path = path
        self.expected = expected
        if expected == "directory":
            msg = f"File exists where directory expected: {path} (use --force)"
        else:
            msg = f"Directory exists where file expected: {path} (use --force)"
        super().__init__(msg)


class FilesystemError(MaketreeError):
    """An underlying filesystem call failed for a reason other than a type conflict."""

    def __init__(self, operation: str, path: Path, error: OSError):
        self.operation = operation
        self.path = path
        self.error = error
        reason = error.strerror or str(error)
        super().__init__(f"Failed to {operation} {path}: {reason}")


class InputReadError(MaketreeError):
    """The input file or stream could not be fully read."""

    def __init__(self, source: str, error: Exception):
        self.source = source
        self.error = error
        super().__init__(f"Could not read input from {source}: {error}")


class UnsafePathError(MaketreeError):
    """An entry would resolve outside the base directory."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Refusing to create path outside the base directory: {path}")


class ClipboardError(MaketreeError):
    pass
