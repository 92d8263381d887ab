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
XCFramework build configuration.

The products and platforms to build are compiled in below. A project may
override them from an optional XCFBUILD.toml next to its Package.swift:

    [xcframeworks]
    project_name = "KSCrash"
    products = ["Reporting", "Recording"]
    platforms = ["iOS", "iOS Simulator", "macOS"]
    build_dir = "build"
    archive_name = "KSCrash.xcframeworks.zip"

    [xcframeworks.env]
    DYLIB_BUILD = "1"
"""

import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

if sys.version_info >= (3, 11, 0, "alpha", 7):
    import tomllib
else:
    import tomli as tomllib

CONFIG_FILE_NAME = "XCFBUILD.toml"

DEFAULT_PROJECT_NAME = "KSCrash"

# Library products declared in Package.swift
DEFAULT_PRODUCTS = (
    "Reporting",
    "Filters",
    "Sinks",
    "Installations",
    "Recording",
    "DiscSpaceMonitor",
    "BootTimeMonitor",
    "DemangleFilter",
)

# Destinations passed to xcodebuild as generic/platform=<name>
DEFAULT_PLATFORMS = (
    "iOS",
    "iOS Simulator",
    "tvOS",
    "tvOS Simulator",
    "watchOS",
    "watchOS Simulator",
    "macOS",
)

DEFAULT_BUILD_DIR = "build"

# Package.swift switches products to dynamic libraries when this is set
DEFAULT_BUILD_ENV = {"DYLIB_BUILD": "1"}


@dataclass(frozen=True)
class XCFrameworkConfig:
    """Static description of one run: what to build and where outputs go."""
    project_dir: Path
    project_name: str = DEFAULT_PROJECT_NAME
    products: Tuple[str, ...] = DEFAULT_PRODUCTS
    platforms: Tuple[str, ...] = DEFAULT_PLATFORMS
    build_dir_name: str = DEFAULT_BUILD_DIR
    archive_name: str = ""
    build_env: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_BUILD_ENV))

    def __post_init__(self):
        object.__setattr__(self, "project_dir", Path(self.project_dir).resolve())
        object.__setattr__(self, "products", tuple(self.products))
        object.__setattr__(self, "platforms", tuple(self.platforms))
        if not self.archive_name:
            object.__setattr__(
                self, "archive_name", f"{self.project_name}.xcframeworks.zip"
            )
        if not self.products:
            raise ValueError("at least one product is required")
        if not self.platforms:
            raise ValueError("at least one platform is required")

        # the build directory is removed recursively at the start of every run
        build_dir_name = Path(self.build_dir_name)
        if not self.build_dir_name or build_dir_name.is_absolute():
            raise ValueError(
                f"build_dir must be a relative path inside the project, got {self.build_dir_name!r}"
            )
        if self.project_dir not in (self.project_dir / build_dir_name).resolve().parents:
            raise ValueError(
                f"build_dir {self.build_dir_name!r} must be inside {self.project_dir}"
            )

    @property
    def build_dir(self) -> Path:
        return self.project_dir / self.build_dir_name

    @property
    def archives_dir(self) -> Path:
        return self.build_dir / "archives"

    @property
    def derived_data_dir(self) -> Path:
        return self.build_dir / ".derived-data"

    @property
    def frameworks_dir(self) -> Path:
        return self.build_dir / "frameworks"

    @property
    def artifacts_dir(self) -> Path:
        return self.build_dir / "artifacts"

    @property
    def archive_path(self) -> Path:
        return self.artifacts_dir / self.archive_name


def _expand_env(value: str) -> str:
    """
    Expand environment variables in configuration values.

    Supports ${VAR_NAME} and $VAR_NAME syntax. Unknown variables are left as-is.
    """
    pattern1 = re.compile(r'\$\{([^}]+)\}')
    value = pattern1.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)

    pattern2 = re.compile(r'\$([A-Za-z_][A-Za-z0-9_]*)')
    value = pattern2.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)

    return value


def _get_str(table: Dict[str, Any], key: str, default: str) -> str:
    value = table.get(key, default)
    if not isinstance(value, str):
        raise ValueError(f"[xcframeworks] {key} must be a string, got {value!r}")
    return _expand_env(value)


def _get_str_list(table: Dict[str, Any], key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = table.get(key, default)
    if isinstance(value, str):
        value = [v.strip() for v in value.split(",") if v.strip()]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"[xcframeworks] {key} must be a list of strings, got {value!r}")
    return tuple(_expand_env(v) for v in value)


def load_xcframework_config(project_dir: Optional[str] = None) -> XCFrameworkConfig:
    """
    Load the build configuration for a project directory.

    Falls back to the compiled-in products and platforms when XCFBUILD.toml
    is not present.

    Args:
        project_dir: Directory holding Package.swift (default: current directory)

    Returns:
        XCFrameworkConfig for the run

    Raises:
        ValueError: If XCFBUILD.toml cannot be parsed or holds invalid values
    """
    project_dir = Path(project_dir or os.getcwd()).resolve()
    config_file = project_dir / CONFIG_FILE_NAME

    if not config_file.is_file():
        return XCFrameworkConfig(project_dir=project_dir)

    # Must open in rb mode for tomllib
    with open(config_file, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"failed to parse {config_file}: {e}") from e

    table = data.get("xcframeworks", {})
    if not isinstance(table, dict):
        raise ValueError(f"[xcframeworks] in {config_file} must be a table")

    env = dict(DEFAULT_BUILD_ENV)
    env_table = table.get("env", {})
    if not isinstance(env_table, dict):
        raise ValueError("[xcframeworks.env] must be a table")
    for key, value in env_table.items():
        env[key] = _expand_env(str(value))

    return XCFrameworkConfig(
        project_dir=project_dir,
        project_name=_get_str(table, "project_name", DEFAULT_PROJECT_NAME),
        products=_get_str_list(table, "products", DEFAULT_PRODUCTS),
        platforms=_get_str_list(table, "platforms", DEFAULT_PLATFORMS),
        build_dir_name=_get_str(table, "build_dir", DEFAULT_BUILD_DIR),
        archive_name=_get_str(table, "archive_name", ""),
        build_env=env,
    )
