#!/usr/bin/env python3
"""
Tests for the xcfbuild command line entry.

Run with: python3 -m pytest xcfbuild/test_cli.py
"""

import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from xcfbuild.cli import Cli
from xcfbuild.utils.apple.config import CONFIG_FILE_NAME
from xcfbuild.utils.cmd.recording import RecordingRunner
from xcfbuild.utils.context.context import CliContext


class TestCli(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.project_dir = Path(self.temp_dir.name).resolve()
        (self.project_dir / CONFIG_FILE_NAME).write_text(
            '[xcframeworks]\nproducts = ["A", "B"]\nplatforms = ["iOS", "macOS"]\n'
        )
        self.cmd = Cli()

    def tearDown(self):
        self.temp_dir.cleanup()

    def exec(self, runner, argv=None):
        args = self.cmd.cli(argv if argv is not None else ["--project-dir", str(self.project_dir)])
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            result = self.cmd.exec(CliContext(runner), args)
        return result, out.getvalue()

    def test_no_arguments_required(self):
        args = self.cmd.cli([])

        self.assertIsNone(args.project_dir)

    def test_success(self):
        runner = RecordingRunner()
        result, out = self.exec(runner)

        self.assertEqual(result.exit_code, 0)
        self.assertTrue((self.project_dir / "build" / "artifacts" / "KSCrash.xcframeworks.zip").is_file())
        self.assertIn("Build Complete!", out)

    def test_build_failure_exits_with_1(self):
        runner = RecordingRunner(fail_builds={("A", "macOS")})
        with self.assertRaises(SystemExit) as context:
            self.exec(runner)

        self.assertEqual(context.exception.code, 1)
        self.assertEqual(len(runner.archive_commands), 2)

    def test_invalid_config_exits_with_1(self):
        (self.project_dir / CONFIG_FILE_NAME).write_text('[xcframeworks]\nproducts = 3\n')
        runner = RecordingRunner()
        with self.assertRaises(SystemExit) as context:
            self.exec(runner)

        self.assertEqual(context.exception.code, 1)
        self.assertEqual(runner.commands, [])

    def test_build_dir_at_project_root_never_cleaned(self):
        package_swift = self.project_dir / "Package.swift"
        package_swift.write_text("// swift-tools-version:5.7\n")
        (self.project_dir / CONFIG_FILE_NAME).write_text('[xcframeworks]\nbuild_dir = ""\n')
        runner = RecordingRunner()
        with self.assertRaises(SystemExit) as context:
            self.exec(runner)

        self.assertEqual(context.exception.code, 1)
        self.assertTrue(package_swift.is_file())
        self.assertEqual(runner.commands, [])


if __name__ == '__main__':
    unittest.main(argv=[''], exit=False, verbosity=2)
