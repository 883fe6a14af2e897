#===============================================================================
#  WB_Project_Launcher | settings.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-10
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Load/save of host conventions (install folder, executable names, process
#  names). Anything missing from settings.json falls back to the defaults.
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import constants

log = logging.getLogger("wblauncher.settings")


def default_settings() -> Dict[str, Any]:
    return {
        "install_base": constants.INSTALL_BASE,
        "install_folder_pattern": constants.INSTALL_FOLDER_PATTERN,
        "executable_candidates": list(constants.EXECUTABLE_CANDIDATES),
        "root_executable": constants.ROOT_EXECUTABLE,
        "process_names": list(constants.PROCESS_NAMES),
        "launcher_extensions": list(constants.LAUNCHER_EXTENSIONS),
        "archive_extensions": list(constants.ARCHIVE_EXTENSIONS),
        "log_path": str(constants.SESSION_LOG_PATH),
        "prompt_mode": "console",   # console | dialog
    }


def default_settings_path() -> Path:
    return constants.SETTINGS_DIR / constants.SETTINGS_FILE_NAME


@dataclass(frozen=True)
class Settings:
    install_base: Path
    install_folder_pattern: "re.Pattern[str]"
    executable_candidates: List[str]
    root_executable: Path
    process_names: List[str]
    launcher_extensions: List[str]
    archive_extensions: List[str]
    log_path: Path
    prompt_mode: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        return cls(
            install_base=Path(data["install_base"]),
            install_folder_pattern=re.compile(data["install_folder_pattern"], re.IGNORECASE),
            executable_candidates=[str(c) for c in data["executable_candidates"]],
            root_executable=Path(data["root_executable"]),
            process_names=[str(n) for n in data["process_names"]],
            launcher_extensions=[e.lower() for e in data["launcher_extensions"]],
            archive_extensions=[e.lower() for e in data["archive_extensions"]],
            log_path=Path(data["log_path"]),
            prompt_mode=str(data.get("prompt_mode") or "console").lower(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "install_base": str(self.install_base),
            "install_folder_pattern": self.install_folder_pattern.pattern,
            "executable_candidates": list(self.executable_candidates),
            "root_executable": str(self.root_executable),
            "process_names": list(self.process_names),
            "launcher_extensions": list(self.launcher_extensions),
            "archive_extensions": list(self.archive_extensions),
            "log_path": str(self.log_path),
            "prompt_mode": self.prompt_mode,
        }


def load_settings(settings_path: Optional[Path] = None, problems: Optional[List[str]] = None) -> Settings:
    """Load settings from disk (or defaults).

    Problems are appended to `problems` so they can be repeated into the
    session log, which does not exist yet at load time.
    """
    d = default_settings()
    path = settings_path or default_settings_path()
    if not path.exists():
        return Settings.from_dict(d)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings root must be an object")
        for k in d:
            if k not in data:
                data[k] = d[k]
        return Settings.from_dict(data)
    except (OSError, ValueError, TypeError, AttributeError, re.error) as e:
        msg = f"Ignoring unreadable settings file {path}: {e}"
        log.warning(msg)
        if problems is not None:
            problems.append(msg)
        return Settings.from_dict(d)


def save_settings(settings_path: Path, settings: Settings) -> None:
    """Persist settings to disk."""
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
