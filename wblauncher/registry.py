#===============================================================================
#  WB_Project_Launcher | registry.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-10
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Discovers installed Workbench versions under the install base folder.
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional

from .models import Installation
from .settings import Settings


def version_token(folder_name: str, pattern: "re.Pattern[str]") -> Optional[str]:
    m = pattern.match(folder_name)
    return m.group(1) if m else None


def find_executable(install_dir: Path, candidates: List[str]) -> Optional[Path]:
    """First candidate executable that exists, in candidate order."""
    for name in candidates:
        p = install_dir / name
        if p.is_file():
            return p
    return None


def scan_installations(settings: Settings) -> Dict[str, Path]:
    """Return {version: executable} for every usable install folder.

    Rules:
    - Only direct subfolders of install_base whose name matches the pattern
    - Folders without any candidate executable are skipped
    - Same version twice: the later folder (by name) wins
    """
    found: Dict[str, Path] = {}
    base = settings.install_base
    if not base.is_dir():
        return found

    try:
        children = sorted(base.iterdir(), key=lambda p: p.name.lower())
    except OSError:
        return found

    for item in children:
        if not item.is_dir():
            continue
        version = version_token(item.name, settings.install_folder_pattern)
        if not version:
            continue
        exe = find_executable(item, settings.executable_candidates)
        if exe:
            found[version] = exe
    return found


def installations(settings: Settings) -> List[Installation]:
    return [Installation(version=v, executable=p) for v, p in scan_installations(settings).items()]


def version_from_install_path(executable: str, pattern: "re.Pattern[str]") -> Optional[str]:
    """Version of the nearest ancestor folder that follows the install naming."""
    if not executable:
        return None
    for parent in Path(executable).parents:
        version = version_token(parent.name, pattern)
        if version:
            return version
    return None
