#
# Copyright 2024 xcfbuild Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Test support only: a fake toolchain for the test_*.py modules.

Nothing in the build itself imports this module. RecordingRunner never
starts a process. It records every command and reproduces the filesystem
side effects of the real tools:

- `xcodebuild archive` creates {archivePath}.xcarchive with the framework
  (and a dSYM for platforms listed in `dsym_platforms`) and writes a log
- `xcodebuild -create-xcframework` creates the -output directory
- `zip` creates the archive file
"""

from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Set, Tuple


class RecordedCommand(NamedTuple):
    args: List[str]
    env: Optional[Dict[str, str]]
    cwd: Optional[Path]
    log_path: Optional[Path]


def _arg_after(args: List[str], flag: str) -> str:
    return args[args.index(flag) + 1]


class RecordingRunner:
    ARCHIVE_FAILED_LOG = "** ARCHIVE FAILED **\n"

    def __init__(
        self,
        fail_builds: Optional[Set[Tuple[str, str]]] = None,
        missing_builds: Optional[Set[Tuple[str, str]]] = None,
        dsym_platforms: Optional[Set[str]] = None,
        fail_create_xcframework: bool = False,
        fail_zip: bool = False,
        fail_version: bool = False,
    ):
        """
        Args:
            fail_builds: (product, platform) archives that exit with 65
            missing_builds: (product, platform) archives that exit 0 without output
            dsym_platforms: Platforms whose archives contain a dSYM
            fail_create_xcframework: -create-xcframework exits with 1
            fail_zip: zip exits with 15
            fail_version: xcodebuild -version exits with 127
        """
        self.fail_builds = fail_builds or set()
        self.missing_builds = missing_builds or set()
        self.dsym_platforms = dsym_platforms or set()
        self.fail_create_xcframework = fail_create_xcframework
        self.fail_zip = fail_zip
        self.fail_version = fail_version
        self.commands: List[RecordedCommand] = []

    @property
    def archive_commands(self) -> List[RecordedCommand]:
        return [c for c in self.commands if c.args[:2] == ["xcodebuild", "archive"]]

    @property
    def create_xcframework_commands(self) -> List[RecordedCommand]:
        return [c for c in self.commands if c.args[:2] == ["xcodebuild", "-create-xcframework"]]

    @property
    def zip_commands(self) -> List[RecordedCommand]:
        return [c for c in self.commands if c.args[0] == "zip"]

    def archived(self) -> List[Tuple[str, str]]:
        """(product, platform) of every archive attempt, in order."""
        return [
            (_arg_after(c.args, "-scheme"), _arg_after(c.args, "-destination").split("=", 1)[1])
            for c in self.archive_commands
        ]

    def run(self, args, env=None, cwd=None, log_path=None):
        args = list(args)
        self.commands.append(RecordedCommand(args, env, cwd, log_path))

        if args[:2] == ["xcodebuild", "-version"]:
            return (127, "") if self.fail_version else (0, "")
        if args[:2] == ["xcodebuild", "archive"]:
            return self._archive(args, log_path)
        if args[:2] == ["xcodebuild", "-create-xcframework"]:
            if self.fail_create_xcframework:
                return 1, ""
            Path(_arg_after(args, "-output")).mkdir(parents=True)
            return 0, ""
        if args[0] == "zip":
            if self.fail_zip:
                return 15, ""
            Path(args[3]).write_bytes(b"PK\x05\x06" + b"\x00" * 18)
            return 0, ""
        raise AssertionError(f"unexpected command: {args}")

    def _archive(self, args, log_path):
        product = _arg_after(args, "-scheme")
        platform = _arg_after(args, "-destination").split("=", 1)[1]
        key = (product, platform)

        log = f"Archiving {product} for {platform}\n"
        if key in self.fail_builds:
            log += self.ARCHIVE_FAILED_LOG
            err_code = 65
        else:
            if key not in self.missing_builds:
                xcarchive = Path(_arg_after(args, "-archivePath") + ".xcarchive")
                (xcarchive / "Products" / "usr" / "local" / "lib" / f"{product}.framework").mkdir(parents=True)
                if platform in self.dsym_platforms:
                    (xcarchive / "dSYMs" / f"{product}.framework.dSYM").mkdir(parents=True)
            log += "** ARCHIVE SUCCEEDED **\n"
            err_code = 0

        if log_path is not None:
            Path(log_path).write_text(log)
        return err_code, log
