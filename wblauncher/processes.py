#===============================================================================
#  WB_Project_Launcher | processes.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-11
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Finds running Workbench instances and reconciles them with the version we
#  are about to start: reuse a matching one, otherwise close them all
#  (WM_CLOSE / terminate, then kill after a timeout).
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List, Optional

import psutil

from . import constants
from .models import Resolution, RunningInstance
from .registry import version_from_install_path
from .session import SessionContext
from .settings import Settings

if sys.platform == "win32":
    import pywintypes
    import win32con
    import win32gui
    import win32process


def _window_handles_for_pid(pid: int) -> List[int]:
    handles: List[int] = []

    def _collect(hwnd, _):
        try:
            if not win32gui.IsWindowVisible(hwnd):
                return True
            _, owner = win32process.GetWindowThreadProcessId(hwnd)
            if owner == pid:
                handles.append(hwnd)
        except pywintypes.error:
            pass
        return True

    win32gui.EnumWindows(_collect, None)
    return handles


def request_close(proc) -> None:
    """Ask a process to exit the polite way.

    Windows: post WM_CLOSE to its top-level windows so Workbench can prompt
    for unsaved work. Elsewhere (or windowless): terminate().
    """
    if sys.platform == "win32":
        handles = _window_handles_for_pid(proc.pid)
        if handles:
            for hwnd in handles:
                try:
                    win32gui.PostMessage(hwnd, win32con.WM_CLOSE, 0, 0)
                except pywintypes.error:
                    pass
            return
    try:
        proc.terminate()
    except psutil.NoSuchProcess:
        pass


class ProcessTable:
    """Snapshot queries against the OS process list (never cached)."""

    def __init__(
        self,
        settings: Settings,
        process_iter: Callable = psutil.process_iter,
        wait_procs: Callable = psutil.wait_procs,
        closer: Callable = request_close,
    ):
        self.settings = settings
        self._process_iter = process_iter
        self._wait_procs = wait_procs
        self._closer = closer
        self._names = {n.lower() for n in settings.process_names}

    def running_instances(self) -> List[RunningInstance]:
        out: List[RunningInstance] = []
        for p in self._process_iter(attrs=["pid", "name", "exe"]):
            try:
                info = p.info
                name = info.get("name") or ""
                if name.lower() not in self._names:
                    continue
                exe = info.get("exe") or ""
                out.append(
                    RunningInstance(
                        pid=info.get("pid") or p.pid,
                        name=name,
                        executable=exe,
                        version=version_from_install_path(exe, self.settings.install_folder_pattern),
                        handle=p,
                    )
                )
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        return out

    def any_alive(self) -> bool:
        return bool(self.running_instances())

    def terminate_all(self, instances: List[RunningInstance], timeout: float, session: SessionContext) -> None:
        procs = [i.handle for i in instances if i.handle is not None]
        for inst in instances:
            session.info("Closing Workbench pid=%s version=%s", inst.pid, inst.version or "?")
            if inst.handle is not None:
                self._closer(inst.handle)

        _, alive = self._wait_procs(procs, timeout=timeout)
        for p in alive:
            session.info("pid=%s still running after %.0fs; killing", p.pid, timeout)
            try:
                p.kill()
            except psutil.NoSuchProcess:
                pass
        if alive:
            self._wait_procs(alive, timeout=timeout)


def reconcile_running_instances(
    resolution: Resolution,
    table: ProcessTable,
    session: SessionContext,
) -> Path:
    """Return the executable to start, after dealing with live Workbench processes."""
    instances = table.running_instances()
    if not instances:
        session.info("No running Workbench instances")
        return resolution.executable

    session.info("Running Workbench instances: %s",
                 ", ".join(f"{i.pid}:{i.version or '?'}" for i in instances))

    matching: Optional[RunningInstance] = None
    if resolution.version:
        matching = next((i for i in instances if i.version == resolution.version), None)

    if matching is not None:
        exe = Path(matching.executable) if matching.executable else resolution.executable
        session.report(f"Workbench {resolution.version} is already running (pid {matching.pid}); reusing it.")
        return exe

    session.report(
        f"Closing {len(instances)} running Workbench instance(s) that do not match "
        f"version {resolution.version or 'unknown'}..."
    )
    table.terminate_all(instances, constants.CLOSE_TIMEOUT_SECONDS, session)
    session.sleep(constants.TERMINATE_SETTLE_SECONDS)
    return resolution.executable
