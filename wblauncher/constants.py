#===============================================================================
#  WB_Project_Launcher | constants.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-10
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Central place for Workbench file/folder naming conventions, thresholds and
#  wait intervals.
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import tempfile
from pathlib import Path

APP_TITLE = "Workbench Project Launcher"
SETTINGS_FILE_NAME = "settings.json"
SETTINGS_DIR = Path.home() / ".wblauncher"
SESSION_LOG_PATH = Path(tempfile.gettempdir()) / "wblauncher_session.log"
EXTRACTION_PREFIX = "wblauncher_"

# --- Artifact kinds (by extension) ---
LAUNCHER_EXTENSIONS = (".wbl",)
ARCHIVE_EXTENSIONS = (".wbz",)
FLAT_FOLDER_SUFFIX = "Flat"

# Launchers are small reference files; anything bigger is probably a mislabeled archive
LAUNCHER_MAX_BYTES = 100 * 1024

# --- Project markers ---
ARCHIVE_MARKER_PREFIXES = ("Properties/", "Data/")
ROOT_MARKER_FILES = ("Project.xml", "Settings.xml")
PROJECT_FILE_EXTENSION = ".wbproj"
FLAT_MARKER_DIRS = ("Properties", "Data", "Content")

# --- Version metadata ---
METADATA_ENTRY = "Properties/ProjectInfo.xml"
PRODUCT_VERSION_KEY = "ProductVersion"
CONTENT_DIR = "Content"
STORAGE_PROPERTIES_FILE = "StorageProperties.xml"
LEGACY_FILES = ("Project.xml", "Settings.xml", "Hardware.xml")
LEGACY_ATTRIBUTES = ("BuildNumber", "PlatformVersion", "FirmwareVersion")

# Extraction guesses for the project root, in order; None = archive stem
EXTRACTED_ROOT_CANDIDATES = ("Project", "project", None)

# --- Host installation defaults (overridable in settings.json) ---
INSTALL_BASE = r"C:\Program Files\Workbench"
INSTALL_FOLDER_PATTERN = r"^Workbench[ _-]?V?(\d+(?:\.\d+)*)"
EXECUTABLE_CANDIDATES = ["Workbench.exe", "bin/Workbench.exe", "WorkbenchIDE.exe"]
ROOT_EXECUTABLE = r"C:\Program Files\Workbench\Workbench.exe"
PROCESS_NAMES = ["Workbench.exe", "WorkbenchIDE.exe", "Workbench", "WorkbenchIDE"]

# --- Wait intervals (seconds) ---
LAUNCH_SETTLE_SECONDS = 4.0
CLOSE_TIMEOUT_SECONDS = 10.0
TERMINATE_SETTLE_SECONDS = 3.0
CLEANUP_SETTLE_SECONDS = 3.0
