#===============================================================================
#  WB_Project_Launcher  |  Workbench Project Launcher
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-10
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Opens a Workbench project (.wbl launcher, .wbz archive or project folder)
#  with the installed Workbench version that best matches the project:
#    - detects the project version from its metadata
#    - picks the exact / closest newer / latest installed Workbench
#    - reuses or closes running Workbench instances
#    - falls back to the unpacked archive, then to a bare start
#
#  Usage
#  -----
#    python main.py <project> [--flat] [--keep-extracted] [--dialogs]
#
#  Copyright & License Notes
#  -------------------------
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#
#  This source code is provided "AS IS", without warranty of any kind, express
#  or implied, including but not limited to the warranties of merchantability,
#  fitness for a particular purpose, and noninfringement.
#
#  Permission Notice (Personal/Internal Use)
#  -----------------------------------------
#  You may use, copy, and modify this software for personal or internal use.
#  Redistribution or public release should include this header and credit the
#  author. If you plan to open-source this project, consider replacing this
#  section with an OSI-approved license (e.g., MIT) for clarity.
#
#  Third-Party Components
#  ----------------------
#  This project uses third-party libraries (e.g., psutil, PySide6, pywin32)
#  which are licensed separately by their respective authors. Ensure
#  compliance with their license terms when distributing this software.
#===============================================================================

import sys

from wblauncher.cli import main

if __name__ == "__main__":
    sys.exit(main())
