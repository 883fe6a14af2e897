#===============================================================================
#  WB_Project_Launcher | resolver.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-10
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Picks the Workbench installation that should open a project.
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import LauncherError
from .models import Resolution
from .registry import version_from_install_path
from .session import SessionContext
from .settings import Settings

VERSION_SHAPE_RE = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?")

# Anything that is not major.minor[.patch] sorts below every real version
LOWEST: Tuple[int, ...] = (-1,)


def version_key(version: Optional[str]) -> Tuple[int, ...]:
    """'2.10' -> (2, 10, 0). Numeric, so '2.10' > '2.9'."""
    m = VERSION_SHAPE_RE.match((version or "").strip())
    if not m:
        return LOWEST
    return (int(m.group(1)), int(m.group(2)), int(m.group(3) or 0))


def sort_versions_desc(versions) -> List[str]:
    return sorted(versions, key=version_key, reverse=True)


def select_version(target: Optional[str], available: Dict[str, Path]) -> Optional[Tuple[str, str]]:
    """Pure selection policy. Returns (version, reason) or None when nothing is installed.

    Resolution order:
      1) exact key match
      2) lowest installed version >= target (newer Workbench opens older projects)
      3) highest installed version (reason 'latest', a compatibility risk)
    """
    if not available:
        return None

    if target and target in available:
        return target, "exact"

    ordered = sort_versions_desc(available)
    target_key = version_key(target)
    if target_key != LOWEST:
        newer = [v for v in ordered if version_key(v) >= target_key]
        if newer:
            return newer[-1], "closest_higher"

    return ordered[0], "latest"


def resolve_installation(
    target: Optional[str],
    available: Dict[str, Path],
    settings: Settings,
    session: SessionContext,
) -> Resolution:
    picked = select_version(target, available)
    if picked is not None:
        version, reason = picked
        risk = reason == "latest"
        if reason == "exact":
            session.report(f"Using Workbench {version} (exact match).")
        elif reason == "closest_higher":
            session.report(f"Workbench {target} not installed; using closest newer version {version}.")
        elif target:
            session.warn(
                f"No installed Workbench is {target} or newer; falling back to latest ({version}).",
                "The project may not open correctly. Install Workbench "
                f"{target} or newer if it fails.",
            )
        else:
            session.warn(
                f"Project version unknown; using latest installed Workbench ({version}).",
                "If the project does not open, check which Workbench version saved it.",
            )
        return Resolution(executable=available[version], version=version, reason=reason, compatibility_risk=risk)

    session.warn(f"No Workbench installations found under {settings.install_base}.")
    root_exe = settings.root_executable
    if root_exe.is_file():
        session.report(f"Using root executable {root_exe}.")
        return Resolution(
            executable=root_exe,
            version=version_from_install_path(str(root_exe), settings.install_folder_pattern),
            reason="root_fallback",
            compatibility_risk=True,
        )

    chosen = session.prompter.ask_file("Workbench executable", "Locate the Workbench executable to use")
    if chosen is None:
        raise LauncherError("launch_path_unresolved", str(settings.install_base))
    session.info("Operator selected executable %s", chosen)
    return Resolution(
        executable=chosen,
        version=version_from_install_path(str(chosen), settings.install_folder_pattern),
        reason="prompted",
        compatibility_risk=True,
    )
