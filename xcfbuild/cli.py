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

import sys
import argparse

from xcfbuild.build_scripts.build_all import XCFrameworkPipeline
from xcfbuild.utils.apple.config import CONFIG_FILE_NAME, load_xcframework_config
from xcfbuild.utils.context.command import CliCommand, CliNameSpace
from xcfbuild.utils.context.context import CliContext


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return f"""XCFBuild - XCFramework Build Tool

Builds every library product of a Swift package for all Apple platforms
and bundles the results as XCFrameworks.

STEPS:
    1. Remove the previous build directory
    2. xcodebuild archive each product for each platform
       (iOS, iOS Simulator, tvOS, tvOS Simulator, watchOS, watchOS Simulator, macOS)
    3. xcodebuild -create-xcframework for each product
    4. Zip all XCFrameworks into a single archive

OUTPUT:
    build/frameworks/{{Product}}.xcframework
    build/artifacts/{{Project}}.xcframeworks.zip
    build/archives/{{Product}}/logs/{{Platform}}.log

The first failed build stops the run, prints its log and exits with 1.
Products and platforms can be overridden in {CONFIG_FILE_NAME}.

EXAMPLES:
    xcfbuild                          # Build the package in the current directory
    xcfbuild --project-dir ../KSCrash # Build another package
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="xcfbuild",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--project-dir",
            type=str,
            default=None,
            help="Directory containing Package.swift (default: current directory)",
        )
        return parser.parse_args(argv, namespace=CliNameSpace())

    def exec(self, context: CliContext, args: CliNameSpace):
        try:
            config = load_xcframework_config(args.project_dir)
        except ValueError as e:
            print(f"ERROR: {e}")
            sys.exit(1)

        result = XCFrameworkPipeline(config, context.runner).run()
        if not result.is_success():
            print(f"ERROR: {result.failure.describe()}")
            sys.exit(result.exit_code)
        return result


def main(argv=None):
    cmd = Cli()
    cmd.exec(CliContext(), cmd.cli(argv))


if __name__ == "__main__":
    main()
