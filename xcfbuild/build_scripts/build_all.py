#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_all.py
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
Build XCFrameworks for every product and zip them.

Steps, strictly sequential:
1. Print the products, platforms and xcodebuild version
2. Remove the whole build directory
3. For each product: archive every platform, then create its XCFramework
4. Zip all XCFrameworks into build/artifacts/{project}.xcframeworks.zip

The first failure stops the run. Nothing is retried.
"""

import shutil

from xcfbuild.build_scripts.build_archive import build_archive
from xcfbuild.build_scripts.build_compress import compress_all
from xcfbuild.build_scripts.build_xcframework import make_xcframework
from xcfbuild.utils.apple.config import XCFrameworkConfig
from xcfbuild.utils.cmd.cmd_util import CommandRunner
from xcfbuild.utils.context.result import (
    BuildFailure,
    FailureKind,
    PipelineResult,
    PipelineState,
)


class XCFrameworkPipeline:
    """Drives one full run for a configuration."""

    def __init__(self, config: XCFrameworkConfig, runner=None):
        self.config = config
        self.runner = runner or CommandRunner()
        self.result = PipelineResult()

    @property
    def state(self) -> PipelineState:
        return self.result.state

    def _fail(self, failure: BuildFailure) -> PipelineResult:
        self.result.failure = failure
        self.result.state = PipelineState.FAILED
        return self.result

    def print_header(self):
        print("=========================================")
        print(f"{self.config.project_name} XCFramework Builder")
        print("=========================================")
        print("Products to build:")
        for product in self.config.products:
            print(f"  {product}")
        print("")
        print("Platforms:")
        for platform in self.config.platforms:
            print(f"  {platform}")
        print("")

    def check_toolchain(self):
        """Print the xcodebuild version; returns a BuildFailure if it is unusable."""
        print("xcodebuild version:")
        err_code, _ = self.runner.run(["xcodebuild", "-version"])
        print("")
        if err_code != 0:
            print("ERROR: xcodebuild is not available. Please install Xcode command line tools.")
            return BuildFailure(kind=FailureKind.TOOLCHAIN, step="xcodebuild -version", exit_code=err_code)
        return None

    def clean(self):
        self.result.state = PipelineState.CLEANING
        print("Cleaning previous builds...")
        build_dir = self.config.build_dir
        if build_dir.exists():
            shutil.rmtree(build_dir)
        print("Clean complete")
        print("")

    def build_product(self, product: str):
        """Archive a product for every platform, then package it."""
        print("=========================================")
        print(f"Building product: {product}")
        print("=========================================")

        self.result.state = PipelineState.BUILDING
        for platform in self.config.platforms:
            ret = build_archive(self.config, self.runner, product, platform)
            if ret.is_failure():
                return ret.get_error()
            self.result.artifacts.append(ret.get_value())

        print("")
        self.result.state = PipelineState.PACKAGING
        ret = make_xcframework(self.config, self.runner, product, self.config.platforms)
        if ret.is_failure():
            return ret.get_error()
        self.result.xcframeworks.append(ret.get_value())
        print("")
        return None

    def print_footer(self):
        print("=========================================")
        print("Build Complete!")
        print("=========================================")
        print(f"XCFrameworks: {self.config.frameworks_dir}/")
        print(f"Archive: {self.config.archive_path}")

    def run(self) -> PipelineResult:
        """
        Run every step.

        Returns:
            PipelineResult: DONE with all outputs, or FAILED with the failure
            and whatever completed before it
        """
        self.result = PipelineResult()
        self.print_header()

        failure = self.check_toolchain()
        if failure:
            return self._fail(failure)

        self.clean()

        for product in self.config.products:
            failure = self.build_product(product)
            if failure:
                return self._fail(failure)

        self.result.state = PipelineState.ARCHIVING
        ret = compress_all(self.config, self.runner, self.result.xcframeworks)
        if ret.is_failure():
            return self._fail(ret.get_error())
        self.result.archive = ret.get_value()

        self.result.state = PipelineState.DONE
        self.print_footer()
        return self.result


def build_all(config: XCFrameworkConfig, runner=None) -> PipelineResult:
    return XCFrameworkPipeline(config, runner).run()
