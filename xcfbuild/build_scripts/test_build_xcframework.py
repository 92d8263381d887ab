#!/usr/bin/env python3
"""
Tests for XCFramework packaging and archive compression.

Run with: python3 -m pytest xcfbuild/build_scripts/test_build_xcframework.py
"""

import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from xcfbuild.build_scripts.build_archive import get_dsym_path, get_framework_path
from xcfbuild.build_scripts.build_compress import compress_all
from xcfbuild.build_scripts.build_xcframework import (
    get_xcframework_path,
    make_xcframework,
    make_xcframework_args,
)
from xcfbuild.utils.apple.config import XCFrameworkConfig
from xcfbuild.utils.cmd.recording import RecordingRunner
from xcfbuild.utils.context.result import FailureKind

PLATFORMS = ("iOS", "iOS Simulator", "watchOS", "macOS")


class PackagingTestCase(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.project_dir = Path(self.temp_dir.name).resolve()
        self.config = XCFrameworkConfig(project_dir=self.project_dir, platforms=PLATFORMS)
        self.out = io.StringIO()

    def tearDown(self):
        self.temp_dir.cleanup()

    def make_archives(self, product, dsym_platforms=()):
        for platform in PLATFORMS:
            get_framework_path(self.config, product, platform).mkdir(parents=True)
            if platform in dsym_platforms:
                get_dsym_path(self.config, product, platform).mkdir(parents=True)


class TestXCFrameworkArgs(PackagingTestCase):
    """Test -framework / -debug-symbols argument collection."""

    def test_frameworks_without_dsyms(self):
        self.make_archives("Filters")
        with contextlib.redirect_stdout(self.out):
            args = make_xcframework_args(self.config, "Filters", PLATFORMS)

        self.assertEqual(args.count("-framework"), 4)
        self.assertNotIn("-debug-symbols", args)
        self.assertEqual(
            args[1::2],
            [str(get_framework_path(self.config, "Filters", p)) for p in PLATFORMS],
        )

    def test_some_platforms_with_dsyms(self):
        self.make_archives("Filters", dsym_platforms={"iOS Simulator", "macOS"})
        with contextlib.redirect_stdout(self.out):
            args = make_xcframework_args(self.config, "Filters", PLATFORMS)

        self.assertEqual(args.count("-framework"), 4)
        self.assertEqual(args.count("-debug-symbols"), 2)

        # each dSYM directly follows the framework of its platform
        expected = []
        for platform in PLATFORMS:
            expected += ["-framework", str(get_framework_path(self.config, "Filters", platform))]
            if platform in ("iOS Simulator", "macOS"):
                expected += ["-debug-symbols", str(get_dsym_path(self.config, "Filters", platform))]
        self.assertEqual(args, expected)

    def test_dsym_paths_are_absolute(self):
        config = XCFrameworkConfig(project_dir=Path(self.temp_dir.name), platforms=("macOS",))
        get_framework_path(config, "Sinks", "macOS").mkdir(parents=True)
        get_dsym_path(config, "Sinks", "macOS").mkdir(parents=True)
        with contextlib.redirect_stdout(self.out):
            args = make_xcframework_args(config, "Sinks", ("macOS",))

        self.assertTrue(Path(args[args.index("-debug-symbols") + 1]).is_absolute())

    def test_reports_each_platform(self):
        self.make_archives("Filters")
        with contextlib.redirect_stdout(self.out):
            make_xcframework_args(self.config, "Filters", PLATFORMS)

        self.assertIn("Adding watchOS to Filters.xcframework", self.out.getvalue())


class TestMakeXCFramework(PackagingTestCase):
    """Test the -create-xcframework invocation."""

    def test_creates_output_under_frameworks_dir(self):
        self.make_archives("Sinks", dsym_platforms={"iOS"})
        runner = RecordingRunner()
        with contextlib.redirect_stdout(self.out):
            ret = make_xcframework(self.config, runner, "Sinks", PLATFORMS)

        self.assertTrue(ret.is_success())
        xcframework = ret.get_value()
        self.assertEqual(xcframework.path, self.project_dir / "build" / "frameworks" / "Sinks.xcframework")
        self.assertEqual(xcframework.platforms, PLATFORMS)
        self.assertTrue(xcframework.path.is_dir())

        cmd = runner.create_xcframework_commands[0].args
        self.assertEqual(cmd[-2:], ["-output", str(get_xcframework_path(self.config, "Sinks"))])
        self.assertEqual(cmd.count("-framework"), 4)
        self.assertEqual(cmd.count("-debug-symbols"), 1)

    def test_tool_failure(self):
        self.make_archives("Sinks")
        runner = RecordingRunner(fail_create_xcframework=True)
        with contextlib.redirect_stdout(self.out):
            ret = make_xcframework(self.config, runner, "Sinks", PLATFORMS)

        self.assertTrue(ret.is_failure())
        self.assertEqual(ret.get_error().kind, FailureKind.PACKAGING)
        self.assertEqual(ret.get_error().product, "Sinks")


class TestCompressAll(PackagingTestCase):
    """Test zipping the frameworks directory."""

    def test_zip_runs_in_frameworks_dir(self):
        runner = RecordingRunner()
        with contextlib.redirect_stdout(self.out):
            ret = compress_all(self.config, runner, [])

        self.assertTrue(ret.is_success())
        command = runner.zip_commands[0]
        self.assertEqual(command.args, ["zip", "-r", "-q", str(self.config.archive_path), "."])
        self.assertEqual(command.cwd, self.config.frameworks_dir)
        self.assertTrue(self.config.archive_path.is_file())
        self.assertEqual(
            ret.get_value().path,
            self.project_dir / "build" / "artifacts" / "KSCrash.xcframeworks.zip",
        )

    def test_zip_failure(self):
        runner = RecordingRunner(fail_zip=True)
        with contextlib.redirect_stdout(self.out):
            ret = compress_all(self.config, runner, [])

        self.assertTrue(ret.is_failure())
        self.assertEqual(ret.get_error().kind, FailureKind.COMPRESSION)
        self.assertEqual(ret.get_error().exit_code, 15)


if __name__ == '__main__':
    unittest.main(argv=[''], exit=False, verbosity=2)
