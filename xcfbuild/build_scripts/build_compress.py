#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_compress.py
# xcfbuild
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

"""Zip every XCFramework into one distributable archive."""

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Tuple

from xcfbuild.utils.apple.config import XCFrameworkConfig
from xcfbuild.utils.context.result import BuildFailure, CliResult, FailureKind


@dataclass(frozen=True)
class DistributionArchive:
    path: Path
    products: Tuple[str, ...]


def compress_all(config: XCFrameworkConfig, runner, xcframeworks: Sequence) -> CliResult:
    """
    Zip the whole frameworks directory into the artifacts directory.

    zip runs inside the frameworks directory so entries are stored as
    {product}.xcframework/...; the process working directory is untouched.

    Args:
        config: Build configuration
        runner: Command runner executing zip
        xcframeworks: XCFrameworks created during this run

    Returns:
        CliResult: DistributionArchive on success, BuildFailure when zip fails
    """
    print(f"Zipping all xcframeworks into {config.archive_name}")
    config.frameworks_dir.mkdir(parents=True, exist_ok=True)
    config.artifacts_dir.mkdir(parents=True, exist_ok=True)

    err_code, _ = runner.run(
        ["zip", "-r", "-q", str(config.archive_path), "."],
        cwd=config.frameworks_dir,
    )
    if err_code != 0:
        print(f"ERROR: Failed to create {config.archive_path} (exit code {err_code})")
        return CliResult(error=BuildFailure(
            kind=FailureKind.COMPRESSION,
            step="zip",
            exit_code=err_code,
        ))

    return CliResult(value=DistributionArchive(
        path=config.archive_path,
        products=tuple(x.product for x in xcframeworks),
    ))
