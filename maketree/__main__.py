#!/usr/bin/env python3
"""
maketree - CLI Entry Point
==========================

Usage:
    tree -F myproj | python -m maketree build
    python -m maketree build --file structure.tree --dry-run
    python -m maketree copy path/to/dir
    python -m maketree paste path/to/target
"""

import argparse
import sys
from pathlib import Path

from .builder import BuildOptions, TreeBuilder
from .clipboard import copy_file_reference, copy_text, is_text_file, list_directory, paste_text, render_tree
from .errors import MaketreeError
from .parser import collect_entries, looks_like_tree
from .utils import (
    MAX_VERBOSITY,
    console,
    print_error,
    print_header,
    print_report,
    print_success,
    print_warning,
    read_input,
)

EXAMPLES = """\
Input can be:
- output from `tree` (with or without `-F`)
- a simple indented list (2 spaces per level) where directory names end with `/`

Examples:
  tree -F myproj | maketree build
  maketree build --file structure.tree
  cat <<'EOF' | maketree build
  app/
    src/
      main.rs
    Cargo.toml
  EOF
"""


def options_from_args(args) -> BuildOptions:
    return BuildOptions(
        dry_run=args.dry_run,
        force=args.force,
        verbosity=min(args.verbose, MAX_VERBOSITY),
        progress=getattr(args, "progress", False),
    )


# =============================================================================
# Subcommands
# =============================================================================

def cmd_build(args) -> int:
    """Build command - create directories and files from a tree description."""
    options = options_from_args(args)

    text = read_input(args.file)
    entries = collect_entries(text)

    if not entries:
        print_warning("No entries found in input")
        return 0

    if options.verbosity >= 1:
        print_header("maketree", f"{len(entries)} entries\nBase: {args.base or Path('.')}")

    report = TreeBuilder(args.base, options).build(entries)

    if options.verbosity >= 1:
        print_report(report)

    if options.dry_run:
        console.print("\n[bold][DRY-RUN][/bold] No files or directories were changed.")

    return 0


def cmd_copy(args) -> int:
    """Copy command - put a file or a directory listing on the clipboard."""
    try:
        path = args.path.resolve(strict=True)
    except OSError as e:
        print_error(f"could not resolve path '{args.path}': {e}")
        return 1

    if path.is_file():
        if is_text_file(path):
            copy_text(read_input(path))
            print_success(f"Copied contents of {path} to clipboard")
        else:
            copy_file_reference(path)
            print_success(f"Copied file {path} to clipboard")
    elif path.is_dir():
        listing = render_tree(path) if args.tree else list_directory(path)
        copy_text(listing)
        print_success(f"Copied directory structure of {path} to clipboard")
    else:
        print_error(f"'{path}' is neither a file nor a directory")
        return 1

    return 0


def cmd_paste(args) -> int:
    """Paste command - recreate a copied tree or path list under a directory."""
    options = options_from_args(args)
    base = args.path

    contents = paste_text()
    lines = contents.splitlines()
    entries = collect_entries(lines)

    builder = TreeBuilder(base, options)
    builder.ensure_dir(base)

    if entries and looks_like_tree(entries):
        builder.build(entries)
        print_success(f"Created directory structure at {base}")
    else:
        builder.create_paths(lines)
        print_success(f"Created structure at {base}")

    if options.verbosity >= 1:
        print_report(builder.report)

    return 0


# =============================================================================
# Main
# =============================================================================

def add_build_flags(parser: argparse.ArgumentParser):
    parser.add_argument("-d", "--dry-run", action="store_true",
                        help="Print actions without making changes")
    parser.add_argument("-f", "--force", action="store_true",
                        help="Replace conflicting files/dirs if needed")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v, -vv, -vvv)")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="maketree",
        description="Create directory trees from `tree` output or indented lists, "
                    "and copy/paste file contents or directory structure via the clipboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EXAMPLES,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- BUILD command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Read a tree-like structure and create directories and files from it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EXAMPLES,
    )
    build_parser.add_argument("-i", "--file", type=Path, metavar="FILE",
                              help="Read input from file (default: stdin)")
    build_parser.add_argument("--base", type=Path, metavar="DIR",
                              help="Create the tree under DIR instead of the current directory")
    build_parser.add_argument("--progress", action="store_true",
                              help="Show a progress bar on stderr")
    add_build_flags(build_parser)
    build_parser.set_defaults(func=cmd_build)

    # --- COPY command ---
    copy_parser = subparsers.add_parser(
        "copy", help="Copy file contents, a file reference, or a directory listing to the clipboard")
    copy_parser.add_argument("path", type=Path, help="Path to file or directory")
    copy_parser.add_argument("--tree", action="store_true",
                             help="Copy directories as an indented tree instead of a path list")
    copy_parser.set_defaults(func=cmd_copy)

    # --- PASTE command ---
    paste_parser = subparsers.add_parser(
        "paste", help="Create the structure on the clipboard under a directory")
    paste_parser.add_argument("path", type=Path, help="Target directory (created if missing)")
    add_build_flags(paste_parser)
    paste_parser.set_defaults(func=cmd_paste)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except MaketreeError as e:
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\n[ABORT] Operation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
