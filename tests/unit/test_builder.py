import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

from maketree.builder import BuildOptions, TreeBuilder, build_from_text, create_paths
from maketree.errors import ConflictError, FilesystemError, UnsafePathError
from maketree.parser import Entry

APP_TREE = "app/\n  src/\n    main.txt\n  Cargo.toml\n"


def snapshot(root: Path) -> set[str]:
    """Relative paths under root, directories with a trailing slash."""
    result = set()
    for p in root.rglob("*"):
        rel = p.relative_to(root).as_posix()
        result.add(rel + "/" if p.is_dir() else rel)
    return result


class TestTreeBuilder(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_depth_reconstruction(self):
        """Cargo.toml is a sibling of src, not a child."""
        report = build_from_text(APP_TREE, base=self.root)

        self.assertEqual(
            snapshot(self.root),
            {"app/", "app/src/", "app/src/main.txt", "app/Cargo.toml"},
        )
        self.assertEqual(report.created_dirs, 2)
        self.assertEqual(report.created_files, 2)
        self.assertEqual(report.to_dict(), {
            "dry_run": False,
            "created_dirs": 2,
            "created_files": 2,
            "removed": 0,
            "unchanged": 0,
        })

    def test_sibling_directory_replaces_stack_slot(self):
        text = "a/\n  one/\n    x.txt\n  two/\n    y.txt\nb/\n  z.txt\n"
        build_from_text(text, base=self.root)

        self.assertTrue((self.root / "a" / "one" / "x.txt").is_file())
        self.assertTrue((self.root / "a" / "two" / "y.txt").is_file())
        self.assertTrue((self.root / "b" / "z.txt").is_file())
        self.assertFalse((self.root / "a" / "one" / "two").exists())

    def test_tree_output_without_classify_flag(self):
        text = (
            ".\n"
            "├── docs\n"
            "│   └── index.md\n"
            "└── setup.cfg\n"
            "\n"
            "1 directory, 2 files\n"
        )
        build_from_text(text, base=self.root)
        self.assertEqual(snapshot(self.root), {"docs/", "docs/index.md", "setup.cfg"})

    def test_depth_jump_is_flattened(self):
        """A child two levels deeper lands directly inside the last directory."""
        entries = [Entry(0, "top", True), Entry(2, "deep.txt"), Entry(1, "next.txt")]
        TreeBuilder(self.root).build(entries)

        self.assertTrue((self.root / "top" / "deep.txt").is_file())
        self.assertTrue((self.root / "top" / "next.txt").is_file())

    def test_idempotent_second_run(self):
        build_from_text(APP_TREE, base=self.root)
        (self.root / "app" / "Cargo.toml").write_text("[package]\n")

        report = build_from_text(APP_TREE, base=self.root)

        self.assertFalse(report.changed)
        self.assertEqual(report.unchanged, 4)
        # Existing content is never truncated
        self.assertEqual((self.root / "app" / "Cargo.toml").read_text(), "[package]\n")

    def test_conflict_file_where_directory_expected(self):
        (self.root / "app").write_text("not a dir")

        with self.assertRaises(ConflictError) as ctx:
            build_from_text(APP_TREE, base=self.root)

        self.assertEqual(ctx.exception.expected, "directory")
        self.assertEqual(ctx.exception.path, self.root / "app")
        self.assertIn("File exists where directory expected", str(ctx.exception))
        # Nothing was touched
        self.assertEqual(snapshot(self.root), {"app"})
        self.assertEqual((self.root / "app").read_text(), "not a dir")

    def test_conflict_directory_where_file_expected(self):
        (self.root / "notes.txt").mkdir()

        with self.assertRaises(ConflictError) as ctx:
            build_from_text("notes.txt\n", base=self.root)

        self.assertEqual(ctx.exception.expected, "file")
        self.assertIn("Directory exists where file expected", str(ctx.exception))
        self.assertTrue((self.root / "notes.txt").is_dir())

    def test_force_replaces_file_with_directory(self):
        (self.root / "app").write_text("not a dir")

        report = build_from_text(APP_TREE, base=self.root, options=BuildOptions(force=True))

        self.assertTrue((self.root / "app").is_dir())
        self.assertTrue((self.root / "app" / "src" / "main.txt").is_file())
        self.assertEqual(report.removed, 1)

    def test_force_replaces_directory_with_file(self):
        (self.root / "notes.txt" / "inner").mkdir(parents=True)

        build_from_text("notes.txt\n", base=self.root, options=BuildOptions(force=True))

        self.assertTrue((self.root / "notes.txt").is_file())

    def test_force_dry_run_leaves_filesystem_unchanged(self):
        (self.root / "app").write_text("not a dir")
        options = BuildOptions(force=True, dry_run=True)

        with patch("maketree.builder.emit") as mock_emit:
            report = build_from_text(APP_TREE, base=self.root, options=options)

        lines = [c.args[0] for c in mock_emit.call_args_list]
        app = self.root / "app"
        self.assertEqual(lines[0], f"Would remove file: {app}")
        self.assertEqual(lines[1], f"Would mkdir -p {app}")
        # Removal is reported once even though children live below it
        self.assertEqual(sum(1 for line in lines if line.startswith("Would remove")), 1)
        self.assertIn(f"Would touch {app / 'src' / 'main.txt'}", lines)

        self.assertEqual(snapshot(self.root), {"app"})
        self.assertEqual(app.read_text(), "not a dir")
        self.assertTrue(report.dry_run)
        self.assertTrue(report.changed)

    def test_dry_run_reports_each_action_once(self):
        options = BuildOptions(dry_run=True)

        with patch("maketree.builder.emit") as mock_emit:
            build_from_text(APP_TREE, base=self.root, options=options)

        lines = [c.args[0] for c in mock_emit.call_args_list]
        self.assertEqual(lines, [
            f"Would mkdir -p {self.root / 'app'}",
            f"Would mkdir -p {self.root / 'app' / 'src'}",
            f"Would touch {self.root / 'app' / 'src' / 'main.txt'}",
            f"Would touch {self.root / 'app' / 'Cargo.toml'}",
        ])
        self.assertEqual(snapshot(self.root), set())

    def test_dry_run_missing_base(self):
        base = self.root / "missing"
        with patch("maketree.builder.emit") as mock_emit:
            build_from_text("a.txt\nb.txt\n", base=base, options=BuildOptions(dry_run=True))

        lines = [c.args[0] for c in mock_emit.call_args_list]
        self.assertEqual(lines, [
            f"Would mkdir -p {base}",
            f"Would touch {base / 'a.txt'}",
            f"Would touch {base / 'b.txt'}",
        ])
        self.assertFalse(base.exists())

    def test_debug_and_info_traces(self):
        (self.root / "app").write_text("x")
        options = BuildOptions(force=True, verbosity=2)

        stderr = io.StringIO()
        with redirect_stderr(stderr):
            build_from_text(APP_TREE, base=self.root, options=options)

        output = stderr.getvalue()
        self.assertIn(f"[DEBUG] mkdir: {self.root / 'app'}", output)
        self.assertIn(f"[INFO] Removing file to create dir: {self.root / 'app'}", output)
        self.assertIn(f"[DEBUG] touch: {self.root / 'app' / 'Cargo.toml'}", output)
        self.assertIn(f"[DEBUG] rm: {self.root / 'app'}", output)
        # Removal is traced before the replacement directory is created
        self.assertLess(output.index("[DEBUG] rm:"), output.index("[DEBUG] mkdir:"))

    def test_forced_directory_removal_is_traced(self):
        (self.root / "notes.txt").mkdir()

        stderr = io.StringIO()
        with redirect_stderr(stderr):
            build_from_text("notes.txt\n", base=self.root, options=BuildOptions(force=True, verbosity=2))

        self.assertIn(f"[DEBUG] rm -r: {self.root / 'notes.txt'}", stderr.getvalue())

    def test_names_with_emoji_codes_are_printed_verbatim(self):
        options = BuildOptions(dry_run=True, verbosity=2)
        target = self.root / "notes:smile:.txt"

        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            build_from_text("notes:smile:.txt\n", base=self.root, options=options)

        self.assertIn(f"Would touch {target}", stdout.getvalue())
        self.assertIn(f"[DEBUG] touch: {target}", stderr.getvalue())

    def test_silent_at_verbosity_zero(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            build_from_text(APP_TREE, base=self.root)
        self.assertEqual(stderr.getvalue(), "")

    def test_verbosity_is_clamped(self):
        self.assertEqual(BuildOptions(verbosity=7).verbosity, 3)
        self.assertEqual(BuildOptions(verbosity=-1).verbosity, 0)

    def test_first_error_aborts_walk(self):
        (self.root / "b").write_text("x")
        text = "a/\nb/\nc/\n"

        with self.assertRaises(ConflictError):
            build_from_text(text, base=self.root)

        self.assertTrue((self.root / "a").is_dir())
        self.assertFalse((self.root / "c").exists())

    def test_os_error_is_wrapped(self):
        with patch("maketree.builder.Path.mkdir", side_effect=PermissionError(13, "Permission denied")):
            with self.assertRaises(FilesystemError) as ctx:
                build_from_text("locked/\n", base=self.root)

        self.assertEqual(ctx.exception.operation, "create directory")
        self.assertEqual(ctx.exception.path, self.root / "locked")
        self.assertIsInstance(ctx.exception.__cause__, PermissionError)
        self.assertIn("Permission denied", str(ctx.exception))

    def test_rejects_paths_outside_base(self):
        with self.assertRaises(UnsafePathError):
            build_from_text("../escape.txt\n", base=self.root)
        with self.assertRaises(UnsafePathError):
            build_from_text("/etc/escape.txt\n", base=self.root)
        self.assertEqual(snapshot(self.root), set())


class TestCreatePaths(unittest.TestCase):
    def test_flat_path_list(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            lines = ["src/", "src/main.py", "", "docs/guide/intro.md", "README"]

            report = create_paths(lines, base=root)

            self.assertTrue((root / "src").is_dir())
            self.assertTrue((root / "src" / "main.py").is_file())
            self.assertTrue((root / "docs" / "guide" / "intro.md").is_file())
            self.assertTrue((root / "README").is_file())
            self.assertEqual(report.created_files, 3)

    def test_flat_path_list_conflict(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "src").write_text("x")

            with self.assertRaises(ConflictError):
                create_paths(["src/main.py"], base=root)

    def test_implicit_parent_directory_is_traced(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            stderr = io.StringIO()
            with redirect_stderr(stderr):
                create_paths(["docs/guide/intro.md"], base=root, options=BuildOptions(verbosity=2))

            self.assertIn(f"[DEBUG] mkdir: {root / 'docs' / 'guide'}", stderr.getvalue())


if __name__ == "__main__":
    unittest.main()
