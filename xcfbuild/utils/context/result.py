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

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from xcfbuild.build_scripts.build_archive import BuildArtifact
    from xcfbuild.build_scripts.build_compress import DistributionArchive
    from xcfbuild.build_scripts.build_xcframework import XCFramework


class CliResult:
    def __init__(self, value=None, error=None):
        self.value = value
        self.error = error

    def is_success(self):
        return self.error is None

    def is_failure(self):
        return self.error is not None

    def get_value(self, default=None):
        if self.is_success():
            return self.value
        else:
            return default

    def get_error(self, default=None):
        if self.is_failure():
            return self.error
        else:
            return default


class FailureKind(Enum):
    """Why a step stopped the run."""
    TOOLCHAIN = "toolchain"  # xcodebuild -version failed
    TOOL_INVOCATION = "tool_invocation"  # archive exited non-zero
    MISSING_ARTIFACT = "missing_artifact"  # archive exited 0 without a framework
    PACKAGING = "packaging"  # -create-xcframework failed
    COMPRESSION = "compression"  # zip failed


@dataclass(frozen=True)
class BuildFailure:
    """A fatal failure of one pipeline step."""
    kind: FailureKind
    step: str
    exit_code: int
    product: str = ""
    platform: str = ""
    log_path: Optional[Path] = None
    log: str = ""

    def describe(self) -> str:
        target = " for ".join(p for p in (self.product, self.platform) if p)
        desc = f"{self.step} failed"
        if target:
            desc += f": {target}"
        if self.kind == FailureKind.MISSING_ARTIFACT:
            desc += " (no framework produced)"
        else:
            desc += f" (exit code {self.exit_code})"
        return desc


class PipelineState(Enum):
    IDLE = "idle"
    CLEANING = "cleaning"
    BUILDING = "building"
    PACKAGING = "packaging"
    ARCHIVING = "archiving"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineResult:
    """
    Outcome of a full run.

    Holds everything that completed before the run stopped, so a caller can
    tell which (product, platform) builds succeeded when a later one failed.
    """
    state: PipelineState = PipelineState.IDLE
    artifacts: List["BuildArtifact"] = field(default_factory=list)
    xcframeworks: List["XCFramework"] = field(default_factory=list)
    archive: Optional["DistributionArchive"] = None
    failure: Optional[BuildFailure] = None

    def is_success(self) -> bool:
        return self.state == PipelineState.DONE and self.failure is None

    @property
    def exit_code(self) -> int:
        return 0 if self.is_success() else 1

    def artifact_paths(self) -> List[Path]:
        """All filesystem outputs of the run, in creation order."""
        paths = [a.framework_path for a in self.artifacts]
        paths += [x.path for x in self.xcframeworks]
        if self.archive is not None:
            paths.append(self.archive.path)
        return paths
