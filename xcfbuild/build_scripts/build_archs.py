#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_archs.py
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
Architectures built for each Apple destination.

The table is policy, not discovery: the toolchain is never asked which
architectures a destination supports.
"""

from types import MappingProxyType
from typing import Tuple

# Apple devices: arm64, plus arm64e for pointer authentication (A12+)
DEVICE_ARCHS = ("arm64", "arm64e")

# Simulators run on both Intel and Apple Silicon Macs
SIMULATOR_ARCHS = ("x86_64", "arm64", "arm64e")

# arm64_32 is a 32-bit pointer ABI running on 64-bit ARM watches (Series 4+)
WATCHOS_ARCHS = ("arm64_32",)

WATCHOS_SIMULATOR_ARCHS = ("x86_64", "arm64")

MACOS_ARCHS = ("x86_64", "arm64")

PLATFORM_ARCHS = MappingProxyType({
    "iOS": DEVICE_ARCHS,
    "tvOS": DEVICE_ARCHS,
    "iOS Simulator": SIMULATOR_ARCHS,
    "tvOS Simulator": SIMULATOR_ARCHS,
    "watchOS": WATCHOS_ARCHS,
    "watchOS Simulator": WATCHOS_SIMULATOR_ARCHS,
    "macOS": MACOS_ARCHS,
})

# Unknown destinations are treated like a device
DEFAULT_ARCHS = DEVICE_ARCHS


def get_archs(platform: str) -> Tuple[str, ...]:
    """
    Get the architectures to build for a platform.

    Args:
        platform: Destination name, e.g. "iOS Simulator"

    Returns:
        Tuple of architecture names; never empty
    """
    return PLATFORM_ARCHS.get(platform, DEFAULT_ARCHS)


def format_archs(archs: Tuple[str, ...]) -> str:
    """Format architectures as the space separated ARCHS build setting."""
    return " ".join(archs)
