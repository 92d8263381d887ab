#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_xcframework.py
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
Merge the per-platform frameworks of one product into an XCFramework.

Output: build/frameworks/{product}.xcframework
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from xcfbuild.build_scripts.build_archive import get_dsym_path, get_framework_path
from xcfbuild.utils.apple.config import XCFrameworkConfig
from xcfbuild.utils.cmd.cmd_util import format_command
from xcfbuild.utils.context.result import BuildFailure, CliResult, FailureKind


@dataclass(frozen=True)
class XCFramework:
    """A product bundled for every platform it was built for."""
    product: str
    path: Path
    platforms: Tuple[str, ...]


def get_xcframework_path(config: XCFrameworkConfig, product: str) -> Path:
    return config.frameworks_dir / f"{product}.xcframework"


def make_xcframework_args(
    config: XCFrameworkConfig, product: str, platforms: Sequence[str]
) -> List[str]:
    """
    Collect -framework / -debug-symbols arguments in platform order.

    Every platform contributes its framework. A dSYM is added right after its
    framework only when the archive contains one.

    Args:
        config: Build configuration
        product: Product being packaged
        platforms: Platforms in declaration order

    Returns:
        list: Arguments for xcodebuild -create-xcframework
    """
    args = []
    for platform in platforms:
        print(f"Adding {platform} to {product}.xcframework")
        args += ["-framework", str(get_framework_path(config, product, platform))]

        dsym_path = get_dsym_path(config, product, platform)
        if dsym_path.is_dir():
            # -debug-symbols requires an absolute path
            args += ["-debug-symbols", str(dsym_path.resolve())]
    return args


def make_xcframework(
    config: XCFrameworkConfig, runner, product: str, platforms: Sequence[str]
) -> CliResult:
    """
    Create the XCFramework for a product.

    Must only be called once every platform build of the product succeeded.
    Tool output goes straight to the terminal.

    Returns:
        CliResult: XCFramework on success, BuildFailure when xcodebuild fails
    """
    args = make_xcframework_args(config, product, platforms)
    dst_xcframework_path = get_xcframework_path(config, product)

    config.frameworks_dir.mkdir(parents=True, exist_ok=True)
    print(f"Creating {product}.xcframework")
    cmd = ["xcodebuild", "-create-xcframework"] + args + ["-output", str(dst_xcframework_path)]
    err_code, _ = runner.run(cmd)
    if err_code != 0:
        print(
            f"!!!!!!!!!!! make_xcframework {dst_xcframework_path} failed, cmd:['{format_command(cmd)}'] !!!!!!!!!!!!!!!"
        )
        return CliResult(error=BuildFailure(
            kind=FailureKind.PACKAGING,
            step="create-xcframework",
            exit_code=err_code,
            product=product,
        ))

    return CliResult(value=XCFramework(
        product=product,
        path=dst_xcframework_path,
        platforms=tuple(platforms),
    ))
