#===============================================================================
#  WB_Project_Launcher | cli.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-10
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Command line entry: classify the project, detect its version, pick an
#  installed Workbench, reconcile running instances, launch with fallback.
#
#  Exit codes
#  ----------
#    0 : normal completion (including "all attempts failed" with diagnostics)
#    1 : precondition failure (missing project / flat folder / executable)
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, List, Optional

from . import __version__
from .classifier import classify, is_valid
from .constants import APP_TITLE
from .errors import LauncherError
from .launcher import cleanup_extraction, launch_with_fallback, spawn
from .models import Artifact, ArtifactKind
from .processes import ProcessTable, reconcile_running_instances
from .prompts import Prompter, make_prompter
from .registry import installations, scan_installations
from .resolver import resolve_installation, sort_versions_desc
from .session import SessionContext, open_session
from .settings import Settings, default_settings_path, load_settings, save_settings
from .version_extractor import extract_version, resolve_flat_folder


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wblauncher",
        description=f"{APP_TITLE}: open a Workbench project with a matching Workbench version.",
    )
    parser.add_argument("artifact", nargs="?", help="Project to open (.wbl launcher, .wbz archive or project folder)")
    parser.add_argument("--flat", action="store_true",
                        help="Open the paired <name>Flat folder of a launcher instead of the launcher itself")
    parser.add_argument("--keep-extracted", action="store_true",
                        help="Never delete a temporary extraction of an archive")
    parser.add_argument("--settings", type=Path, default=None,
                        help=f"Settings file (default: {default_settings_path()})")
    parser.add_argument("--dialogs", action="store_true", help="Ask for missing paths with dialogs")
    parser.add_argument("--dry-run", action="store_true",
                        help="Resolve everything and print the launch command without starting anything")
    parser.add_argument("--list-installations", action="store_true",
                        help="List discovered Workbench installations and exit")
    parser.add_argument("--write-settings", action="store_true",
                        help="Write the effective settings to the settings file and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _check_validity(artifact: Artifact, session: SessionContext) -> None:
    if is_valid(artifact):
        session.info("Structure check passed for %s (%s)", artifact.path, artifact.kind.value)
        return

    if artifact.kind == ArtifactKind.COMPRESSED_LAUNCHER:
        session.warn(
            f"Launcher file looks wrong (too large, possibly a full archive): {artifact.path}",
            "Create a valid launcher by re-saving it from the flat project.",
        )
    elif artifact.kind == ArtifactKind.ARCHIVE:
        session.warn(
            f"Archive has no Workbench project content: {artifact.path}",
            "Re-export the archive from Workbench.",
        )
    else:
        session.warn(
            f"Folder does not look like a Workbench project: {artifact.path}",
            "Point at the folder containing Project.xml / Properties.",
        )
    if not session.prompter.confirm("Structure check failed", "The project may not open."):
        raise LauncherError("aborted", "structure check")
    session.info("Operator chose to continue despite failed structure check")


def run_session(
    args: argparse.Namespace,
    settings: Settings,
    session: SessionContext,
    table: ProcessTable,
    spawner: Callable = spawn,
) -> int:
    artifact = classify(Path(args.artifact), settings)
    session.report(f"Project: {artifact.path} ({artifact.kind.value})")
    _check_validity(artifact, session)

    target = artifact.path
    flat_folder: Optional[Path] = None
    if artifact.kind == ArtifactKind.COMPRESSED_LAUNCHER:
        if args.flat:
            flat_folder = resolve_flat_folder(artifact, session, required=True)
            target = flat_folder
            session.report(f"Flat mode: opening {flat_folder}")
    elif args.flat:
        session.info("--flat ignored for %s", artifact.kind.value)

    # Cleanup runs on every exit path, dry run and fatal errors included.
    launched = None
    try:
        version = extract_version(artifact, session, flat_folder=flat_folder)
        if version:
            session.report(f"Project version: {version}")
        else:
            session.warn("Project version could not be detected.", "The latest installed Workbench will be used.")

        available = scan_installations(settings)
        session.info("Installed versions: %s", ", ".join(sort_versions_desc(available)) or "(none)")
        resolution = resolve_installation(version, available, settings, session)

        if args.dry_run:
            session.report(f"Dry run: would start  {resolution.executable}  {target}  (cwd: {target.parent})")
            return 0

        executable = reconcile_running_instances(resolution, table, session)
        outcome = launch_with_fallback(artifact, target, executable, session, spawner)
        launched = outcome.process
        if outcome.success:
            session.info("Launch succeeded with '%s' attempt", outcome.plan.label)
        return 0
    finally:
        cleanup_extraction(session, table, keep=args.keep_extracted, process=launched)


def _list_installations(settings: Settings) -> int:
    found = {i.version: i.executable for i in installations(settings)}
    if not found:
        print(f"No Workbench installations under {settings.install_base}")
        return 0
    for v in sort_versions_desc(found):
        print(f"{v:<12} {found[v]}")
    return 0


def main(argv: Optional[List[str]] = None, prompter: Optional[Prompter] = None) -> int:
    args = build_parser().parse_args(argv)
    settings_path = args.settings or default_settings_path()
    problems: List[str] = []
    settings = load_settings(settings_path, problems)

    if args.write_settings:
        save_settings(settings_path, settings)
        print(f"Settings written to {settings_path}")
        return 0
    if args.list_installations:
        return _list_installations(settings)
    if not args.artifact:
        print(LauncherError("artifact_missing", "no project path given"))
        return 1

    if prompter is None:
        prompter = make_prompter("dialog" if args.dialogs else settings.prompt_mode)
    session = open_session(settings.log_path, prompter)
    for msg in problems:
        session.warn(msg)
    try:
        return run_session(args, settings, session, ProcessTable(settings))
    except LauncherError as e:
        session.report(f"ERROR: {e}")
        session.report(f"Log: {settings.log_path}")
        return e.exit_code
    finally:
        session.info("Session ended")
        session.close()
