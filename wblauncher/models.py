#===============================================================================
#  WB_Project_Launcher | models.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-10
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Shared data models used across the launcher.
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional


class ArtifactKind(str, Enum):
    COMPRESSED_LAUNCHER = "compressed_launcher"
    ARCHIVE = "archive"
    FLAT_FOLDER = "flat_folder"


@dataclass(frozen=True)
class Artifact:
    """A project path the operator asked us to open."""
    path: Path
    kind: ArtifactKind


@dataclass(frozen=True)
class Installation:
    version: str        # token from the install folder name
    executable: Path


@dataclass
class RunningInstance:
    pid: int
    name: str
    executable: str         # may be empty when the OS hides it
    version: Optional[str]  # from the install folder of the executable
    handle: Any = None      # psutil.Process used for termination


@dataclass(frozen=True)
class LaunchPlan:
    executable: Path
    argument: Optional[Path]
    cwd: Path
    label: str = "direct"

    def argv(self) -> List[str]:
        args = [str(self.executable)]
        if self.argument is not None:
            args.append(str(self.argument))
        return args

    def command_line(self) -> str:
        return subprocess.list2cmdline(self.argv())


@dataclass
class TemporaryExtraction:
    root: Path                          # directory created by mkdtemp
    project_root: Optional[Path] = None  # guessed project folder inside root

    @property
    def target(self) -> Path:
        return self.project_root or self.root


@dataclass(frozen=True)
class Resolution:
    """Which installation to use and why."""
    executable: Path
    version: Optional[str]
    reason: str                 # exact | closest_higher | latest | root_fallback | prompted
    compatibility_risk: bool = False


@dataclass
class LaunchOutcome:
    success: bool
    plan: Optional[LaunchPlan] = None   # the attempt that stayed up
    process: Any = None
