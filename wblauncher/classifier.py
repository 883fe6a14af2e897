#===============================================================================
#  WB_Project_Launcher | classifier.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-10
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Decides what kind of Workbench project a path is and whether it looks
#  structurally sound. Validity is advisory; the caller decides what to do.
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Iterable, Optional

from . import constants
from .errors import LauncherError
from .models import Artifact, ArtifactKind
from .settings import Settings


def kind_for_path(path: Path, settings: Settings) -> Optional[ArtifactKind]:
    """Kind from path shape, or None when the path is not a project."""
    suffix = path.suffix.lower()
    if path.is_file() and suffix in settings.launcher_extensions:
        return ArtifactKind.COMPRESSED_LAUNCHER
    if path.is_file() and suffix in settings.archive_extensions:
        return ArtifactKind.ARCHIVE
    if path.is_dir():
        return ArtifactKind.FLAT_FOLDER
    return None


def classify(path: Path, settings: Settings) -> Artifact:
    if not path.exists():
        raise LauncherError("artifact_missing", str(path))
    kind = kind_for_path(path, settings)
    if kind is None:
        raise LauncherError("unsupported_artifact", str(path))
    return Artifact(path=path, kind=kind)


def is_archive_marker(entry_name: str) -> bool:
    name = entry_name.replace("\\", "/").lstrip("/")
    if name.startswith(constants.ARCHIVE_MARKER_PREFIXES):
        return True
    if "/" not in name and name in constants.ROOT_MARKER_FILES:
        return True
    return name.lower().endswith(constants.PROJECT_FILE_EXTENSION)


def archive_has_markers(entry_names: Iterable[str]) -> bool:
    return any(is_archive_marker(n) for n in entry_names)


def folder_has_markers(folder: Path) -> bool:
    """True if the folder looks like an unpacked Workbench project (top level only)."""
    if not folder.is_dir():
        return False
    for name in constants.ROOT_MARKER_FILES:
        if (folder / name).is_file():
            return True
    for name in constants.FLAT_MARKER_DIRS:
        if (folder / name).is_dir():
            return True
    try:
        return any(
            p.is_file() and p.suffix.lower() == constants.PROJECT_FILE_EXTENSION
            for p in folder.iterdir()
        )
    except OSError:
        return False


def is_valid(artifact: Artifact) -> bool:
    if artifact.kind == ArtifactKind.ARCHIVE:
        try:
            with zipfile.ZipFile(artifact.path, "r") as z:
                return archive_has_markers(z.namelist())
        except (zipfile.BadZipFile, OSError):
            return False

    if artifact.kind == ArtifactKind.COMPRESSED_LAUNCHER:
        try:
            return artifact.path.stat().st_size < constants.LAUNCHER_MAX_BYTES
        except OSError:
            return False

    return folder_has_markers(artifact.path)


def paired_flat_folder(artifact: Artifact) -> Path:
    """<base>Flat next to a launcher file (may not exist)."""
    return artifact.path.with_name(artifact.path.stem + constants.FLAT_FOLDER_SUFFIX)
