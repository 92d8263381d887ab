#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_archive.py
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

"""
Build one product for one platform with `xcodebuild archive`.

The archive lands at a fixed location:

    build/archives/{product}/{platform}.xcarchive/
        Products/usr/local/lib/{product}.framework
        dSYMs/{product}.framework.dSYM            (optional)

and all tool output goes to build/archives/{product}/logs/{platform}.log,
with spaces in the platform name replaced by '-'.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from xcfbuild.build_scripts.build_archs import format_archs, get_archs
from xcfbuild.utils.apple.config import XCFrameworkConfig
from xcfbuild.utils.context.result import BuildFailure, CliResult, FailureKind

ARCHIVE_EXT = "xcarchive"
FRAMEWORK_EXT = "framework"


@dataclass(frozen=True)
class BuildArtifact:
    """Framework produced by a successful archive build."""
    product: str
    platform: str
    archs: Tuple[str, ...]
    xcarchive_path: Path
    framework_path: Path
    log_path: Path


def sanitize_platform(platform: str) -> str:
    """Make a platform name safe for file names ("iOS Simulator" -> "iOS-Simulator")."""
    return platform.replace(" ", "-")


def get_archive_path(config: XCFrameworkConfig, product: str, platform: str) -> Path:
    """The -archivePath argument; xcodebuild appends the .xcarchive extension."""
    return config.archives_dir / product / platform


def get_xcarchive_path(config: XCFrameworkConfig, product: str, platform: str) -> Path:
    return config.archives_dir / product / f"{platform}.{ARCHIVE_EXT}"


def get_framework_path(config: XCFrameworkConfig, product: str, platform: str) -> Path:
    return (
        get_xcarchive_path(config, product, platform)
        / "Products" / "usr" / "local" / "lib"
        / f"{product}.{FRAMEWORK_EXT}"
    )


def get_dsym_path(config: XCFrameworkConfig, product: str, platform: str) -> Path:
    return (
        get_xcarchive_path(config, product, platform)
        / "dSYMs"
        / f"{product}.{FRAMEWORK_EXT}.dSYM"
    )


def get_log_dir(config: XCFrameworkConfig, product: str) -> Path:
    return config.archives_dir / product / "logs"


def get_log_path(config: XCFrameworkConfig, product: str, platform: str) -> Path:
    return get_log_dir(config, product) / f"{sanitize_platform(platform)}.log"


def make_archive_cmd(config: XCFrameworkConfig, product: str, platform: str) -> List[str]:
    """
    Build the xcodebuild command line for one archive.

    Args:
        config: Build configuration
        product: Scheme to archive
        platform: Generic destination platform

    Returns:
        list: Program and arguments
    """
    archs = get_archs(platform)
    return [
        "xcodebuild",
        "archive",
        "-workspace", str(config.project_dir),
        "-scheme", product,
        "-destination", f"generic/platform={platform}",
        "-archivePath", str(get_archive_path(config, product, platform)),
        "-derivedDataPath", str(config.derived_data_dir),
        "-configuration", "Release",
        "SKIP_INSTALL=NO",
        "BUILD_LIBRARY_FOR_DISTRIBUTION=YES",
        f"ARCHS={format_archs(archs)}",
    ]


def print_build_failure(failure: BuildFailure):
    """Echo the failed build and its full log."""
    print("=========================================")
    print(f"BUILD FAILED: {failure.product} for {failure.platform}")
    print("=========================================")
    print("")
    print("Log output:")
    print("=========================================")
    print(failure.log, end="" if failure.log.endswith("\n") else "\n")
    print("=========================================")


def build_archive(config: XCFrameworkConfig, runner, product: str, platform: str) -> CliResult:
    """
    Archive a product for a platform.

    A build counts as successful only when xcodebuild exits 0 AND the
    framework exists. The exit code alone is not enough: the tool can exit 0
    without producing output. The framework alone is not enough either: a
    failed build may leave stale output behind.

    Args:
        config: Build configuration
        runner: Command runner executing xcodebuild
        product: Scheme to archive
        platform: Generic destination platform

    Returns:
        CliResult: BuildArtifact on success, BuildFailure otherwise. The
        failure has already been printed with its log.
    """
    archs = get_archs(platform)
    print(f"Building {product} for {platform} (archs: {format_archs(archs)})")

    log_dir = get_log_dir(config, product)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = get_log_path(config, product, platform)

    err_code, log = runner.run(
        make_archive_cmd(config, product, platform),
        env=config.build_env,
        log_path=log_path,
    )

    framework_path = get_framework_path(config, product, platform)
    if err_code != 0 or not framework_path.is_dir():
        kind = FailureKind.TOOL_INVOCATION if err_code != 0 else FailureKind.MISSING_ARTIFACT
        failure = BuildFailure(
            kind=kind,
            step="archive",
            exit_code=err_code,
            product=product,
            platform=platform,
            log_path=log_path,
            log=log,
        )
        print_build_failure(failure)
        return CliResult(error=failure)

    return CliResult(value=BuildArtifact(
        product=product,
        platform=platform,
        archs=archs,
        xcarchive_path=get_xcarchive_path(config, product, platform),
        framework_path=framework_path,
        log_path=log_path,
    ))
