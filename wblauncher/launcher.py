#===============================================================================
#  WB_Project_Launcher | launcher.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-10
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Starts Workbench against the project and falls back when it dies at once:
#    1) direct        : exe <project>            (cwd = project folder parent)
#    2) extracted     : exe <unpacked .wbz root> (archives only)
#    3) no argument   : exe                      (operator opens it by hand)
#  Then removes the temporary extraction when nothing still needs it.
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from . import constants
from .models import Artifact, ArtifactKind, LaunchOutcome, LaunchPlan
from .processes import ProcessTable
from .session import SessionContext
from .version_extractor import extract_archive


def spawn(argv: List[str], cwd: Path):
    return subprocess.Popen(argv, cwd=str(cwd))


def try_plan(plan: LaunchPlan, session: SessionContext, spawner: Callable = spawn):
    """Start one plan; return the process if it survives the settle interval."""
    session.record_attempt(plan)
    try:
        proc = spawner(plan.argv(), plan.cwd)
    except OSError as e:
        session.info("Attempt failed to start: %s", e)
        return None

    session.sleep(constants.LAUNCH_SETTLE_SECONDS)
    rc = proc.poll()
    if rc is None:
        session.info("Process alive after %.0fs; launch OK", constants.LAUNCH_SETTLE_SECONDS)
        return proc
    session.info("Process exited immediately (rc=%s)", rc)
    return None


def _extracted_plan(artifact: Artifact, executable: Path, session: SessionContext) -> Optional[LaunchPlan]:
    if artifact.kind != ArtifactKind.ARCHIVE:
        return None
    extraction = session.extraction or extract_archive(artifact.path, session)
    if extraction is None:
        return None
    target = extraction.target
    return LaunchPlan(executable=executable, argument=target, cwd=target.parent, label="extracted")


def launch_with_fallback(
    artifact: Artifact,
    target: Path,
    executable: Path,
    session: SessionContext,
    spawner: Callable = spawn,
) -> LaunchOutcome:
    """Run the attempt chain; never raises for a failed launch."""
    outcome = LaunchOutcome(success=False)

    direct = LaunchPlan(executable=executable, argument=target, cwd=target.parent, label="direct")
    proc = try_plan(direct, session, spawner)
    if proc is not None:
        outcome.success, outcome.plan, outcome.process = True, direct, proc
        return outcome

    session.report("Workbench exited immediately; trying fallbacks...")

    extracted = _extracted_plan(artifact, executable, session)
    if extracted is not None:
        proc = try_plan(extracted, session, spawner)
        if proc is not None:
            session.report(f"Opened the unpacked project from {extracted.argument}.")
            outcome.success, outcome.plan, outcome.process = True, extracted, proc
            return outcome

    bare = LaunchPlan(executable=executable, argument=None, cwd=executable.parent, label="no-argument")
    proc = try_plan(bare, session, spawner)
    if proc is not None:
        session.report("Workbench started without a project; open it manually via File > Open.")
        outcome.success, outcome.plan, outcome.process = True, bare, proc
        return outcome

    last = session.last_attempt
    session.warn(
        "All launch attempts failed.",
        f"Retry manually:  {last.command_line()}   (working directory: {last.cwd})",
    )
    return outcome


def cleanup_extraction(session: SessionContext, table: ProcessTable, keep: bool, process=None) -> bool:
    """Delete the temporary extraction if nothing needs it. Returns True if deleted.

    process is the one this session launched; it may have opened the
    extraction under a name the process table does not know.
    """
    extraction = session.extraction
    if extraction is None:
        return False

    session.sleep(constants.CLEANUP_SETTLE_SECONDS)
    root = extraction.root
    if not root.exists():
        session.extraction = None
        return False
    if keep:
        session.report(f"Extracted project kept at: {root}")
        return False
    if process is not None and process.poll() is None:
        session.report(f"Launched Workbench is still running; extracted project kept at: {root}")
        return False
    if table.any_alive():
        session.report(f"Workbench is still running; extracted project kept at: {root}")
        return False

    shutil.rmtree(root, ignore_errors=True)
    session.info("Removed temporary extraction %s", root)
    session.extraction = None
    return True
