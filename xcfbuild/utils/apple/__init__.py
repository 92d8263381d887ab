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


"""Apple platform build configuration for xcfbuild."""

from .config import XCFrameworkConfig, load_xcframework_config

__all__ = ['XCFrameworkConfig', 'load_xcframework_config']
