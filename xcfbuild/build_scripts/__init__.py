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


"""Build steps for multi-platform XCFrameworks."""

__all__ = [
    "build_all",
    "build_archive",
    "build_archs",
    "build_compress",
    "build_xcframework",
]
