#===============================================================================
#  WB_Project_Launcher | version_extractor.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-10
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Works out which Workbench version saved a project. Sources, first hit wins:
#    1) archive:  Properties/ProjectInfo.xml read straight from the .wbz
#    2) launcher: the paired <name>Flat folder (or one the operator picks)
#    3) folder:   ProjectInfo.xml -> Content/**/StorageProperties.xml
#                 -> legacy BuildNumber / PlatformVersion / FirmwareVersion
#  An archive whose metadata cannot be read directly is unpacked to a temp
#  folder and searched as a flat folder. No version found is not an error.
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import re
import shutil
import tempfile
import zipfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from . import constants
from .classifier import folder_has_markers, paired_flat_folder
from .errors import LauncherError
from .models import Artifact, ArtifactKind, TemporaryExtraction
from .session import SessionContext

VERSION_RE = re.compile(r"\d+(?:\.\d+)+")


def normalize_version(raw: Optional[str]) -> Optional[str]:
    """'V21.0.3 SP1' -> '21.0.3'; None when there is no dotted number."""
    m = VERSION_RE.search(raw or "")
    return m.group(0) if m else None


def _local(name: str) -> str:
    # "{namespace}Key" -> "Key"
    return name.rsplit("}", 1)[-1]


def _attributes(el: ET.Element) -> Dict[str, str]:
    return {_local(k): v for k, v in el.attrib.items()}


def _parse_xml(data: bytes) -> Optional[ET.Element]:
    try:
        return ET.fromstring(data)
    except ET.ParseError:
        return None


def keyed_value(root: ET.Element, key: str) -> Optional[str]:
    """Value of the first <Property Key="key" Value="..."/>-shaped element."""
    for el in root.iter():
        attrs = _attributes(el)
        if attrs.get("Key") == key and "Value" in attrs:
            return attrs["Value"]
    return None


def attribute_value(root: ET.Element, attribute: str) -> Optional[str]:
    for el in root.iter():
        attrs = _attributes(el)
        if attribute in attrs:
            return attrs[attribute]
    return None


def _product_version_from_bytes(data: bytes) -> Optional[str]:
    root = _parse_xml(data)
    if root is None:
        return None
    return normalize_version(keyed_value(root, constants.PRODUCT_VERSION_KEY))


def _read_bytes(path: Path) -> Optional[bytes]:
    try:
        return path.read_bytes()
    except OSError:
        return None


# ----------------------------
# Archive (.wbz)
# ----------------------------
def version_from_archive(archive_path: Path) -> Optional[str]:
    try:
        with zipfile.ZipFile(archive_path, "r") as z:
            data = z.read(constants.METADATA_ENTRY)
    except (zipfile.BadZipFile, KeyError, OSError, RuntimeError, NotImplementedError):
        return None
    return _product_version_from_bytes(data)


# ----------------------------
# Flat folder
# ----------------------------
def version_from_metadata_file(folder: Path) -> Optional[str]:
    data = _read_bytes(folder / constants.METADATA_ENTRY)
    return _product_version_from_bytes(data) if data is not None else None


def storage_properties_files(folder: Path) -> List[Path]:
    content = folder / constants.CONTENT_DIR
    if not content.is_dir():
        return []
    return sorted(p for p in content.rglob(constants.STORAGE_PROPERTIES_FILE) if p.is_file())


def version_from_storage_properties(folder: Path) -> Optional[str]:
    for path in storage_properties_files(folder):
        data = _read_bytes(path)
        if data is None:
            continue
        version = _product_version_from_bytes(data)
        if version:
            return version
    return None


def _key_value_lines(data: bytes) -> Dict[str, str]:
    """Fallback reader for legacy files that are plain Key=Value text."""
    out: Dict[str, str] = {}
    for line in data.decode("utf-8", errors="ignore").splitlines():
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key and key not in out:
            out[key] = value.strip().strip("\"'")
    return out


def version_from_legacy_files(folder: Path) -> Optional[str]:
    parsed = []
    for name in constants.LEGACY_FILES:
        data = _read_bytes(folder / name)
        if data is None:
            continue
        root = _parse_xml(data)
        parsed.append(root if root is not None else _key_value_lines(data))

    for attribute in constants.LEGACY_ATTRIBUTES:
        for doc in parsed:
            if isinstance(doc, dict):
                raw = doc.get(attribute)
            else:
                raw = attribute_value(doc, attribute)
            version = normalize_version(raw)
            if version:
                return version
    return None


FLAT_STRATEGIES = (
    ("project metadata", version_from_metadata_file),
    ("storage properties", version_from_storage_properties),
    ("legacy attributes", version_from_legacy_files),
)


def version_from_flat_folder(folder: Path, session: Optional[SessionContext] = None) -> Optional[str]:
    for label, strategy in FLAT_STRATEGIES:
        version = strategy(folder)
        if version:
            if session is not None:
                session.info("Version %s found via %s in %s", version, label, folder)
            return version
    return None


# ----------------------------
# Temporary extraction
# ----------------------------
def guess_project_root(extract_root: Path, archive_stem: str) -> Optional[Path]:
    names: Iterable[str] = [n if n is not None else archive_stem for n in constants.EXTRACTED_ROOT_CANDIDATES]
    for name in names:
        candidate = extract_root / name
        if folder_has_markers(candidate):
            return candidate
    if folder_has_markers(extract_root):
        return extract_root
    return None


def extract_archive(archive_path: Path, session: SessionContext) -> Optional[TemporaryExtraction]:
    """Unpack the archive once per session; returns the session's extraction."""
    if session.extraction is not None:
        return session.extraction

    root = Path(tempfile.mkdtemp(prefix=constants.EXTRACTION_PREFIX))
    try:
        with zipfile.ZipFile(archive_path, "r") as z:
            z.extractall(root)
    except (zipfile.BadZipFile, OSError, RuntimeError, NotImplementedError) as e:
        session.info("Extraction of %s failed: %s", archive_path, e)
        shutil.rmtree(root, ignore_errors=True)
        return None

    extraction = TemporaryExtraction(root=root, project_root=guess_project_root(root, archive_path.stem))
    session.extraction = extraction
    session.info("Extracted %s to %s (project root: %s)", archive_path, root, extraction.project_root)
    return extraction


# ----------------------------
# Launcher (.wbl) -> flat folder
# ----------------------------
def resolve_flat_folder(artifact: Artifact, session: SessionContext, required: bool) -> Optional[Path]:
    """Paired <name>Flat folder, or one the operator picks.

    required=True (flat mode) turns a missing folder into a fatal error.
    """
    sibling = paired_flat_folder(artifact)
    if sibling.is_dir():
        return sibling

    session.warn(
        f"Flat folder not found next to launcher: {sibling}",
        "Select the unpacked project folder, or re-save the launcher from the flat project.",
    )
    chosen = session.prompter.ask_directory("Flat project folder", f"Folder for {artifact.path.name}")
    if chosen is not None:
        session.info("Operator selected flat folder %s", chosen)
        return chosen
    if required:
        raise LauncherError("flat_folder_missing", str(sibling))
    return None


def extract_version(
    artifact: Artifact,
    session: SessionContext,
    flat_folder: Optional[Path] = None,
) -> Optional[str]:
    """Best-effort project version for any artifact kind."""
    if artifact.kind == ArtifactKind.ARCHIVE:
        version = version_from_archive(artifact.path)
        if version:
            session.info("Version %s found in archive metadata %s", version, constants.METADATA_ENTRY)
            return version
        session.info("Archive metadata unreadable; extracting %s", artifact.path)
        extraction = extract_archive(artifact.path, session)
        if extraction is None or extraction.project_root is None:
            return None
        return version_from_flat_folder(extraction.project_root, session)

    if artifact.kind == ArtifactKind.COMPRESSED_LAUNCHER:
        folder = flat_folder or resolve_flat_folder(artifact, session, required=False)
        if folder is None:
            return None
        return version_from_flat_folder(folder, session)

    return version_from_flat_folder(artifact.path, session)
