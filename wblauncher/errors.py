#===============================================================================
#  WB_Project_Launcher | errors.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-12
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Fatal precondition failures and their operator-facing messages.
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

_MAP = {
    "artifact_missing": "Project path does not exist.",
    "unsupported_artifact": "Not a Workbench project (.wbl launcher, .wbz archive or project folder).",
    "flat_folder_missing": "Flat project folder not found.",
    "launch_path_unresolved": "No Workbench executable could be resolved.",
    "aborted": "Cancelled by operator.",
}


def humanize(error_code: str, details: str = "") -> str:
    code = str(error_code or "").strip()
    msg = _MAP.get(code, "An unexpected error occurred.")
    if details:
        return f"{msg} ({details})"
    return msg


class LauncherError(Exception):
    """Fatal precondition failure; the session ends with exit code 1."""

    exit_code = 1

    def __init__(self, code: str, details: str = ""):
        super().__init__(humanize(code, details))
        self.code = code
        self.details = details
