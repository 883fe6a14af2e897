#===============================================================================
#  WB_Project_Launcher | prompts.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-12
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Operator prompts used when a path cannot be resolved automatically.
#  Console (blocking input) and Qt dialog flavours share one contract:
#    - ask_directory / ask_file return a Path, or None when cancelled
#    - confirm returns True/False
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from .constants import APP_TITLE


class Prompter:
    """Base contract. Subclasses must not raise on cancellation."""

    def ask_directory(self, title: str, message: str) -> Optional[Path]:
        raise NotImplementedError

    def ask_file(self, title: str, message: str) -> Optional[Path]:
        raise NotImplementedError

    def confirm(self, title: str, message: str) -> bool:
        raise NotImplementedError


def _clean_answer(text: str) -> str:
    text = (text or "").strip()
    # Paths pasted from Explorer come quoted
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        text = text[1:-1].strip()
    return text


class ConsolePrompter(Prompter):
    def __init__(self, read: Callable[[str], str] = input, write: Callable[[str], None] = print):
        self._read = read
        self._write = write

    def _ask(self, title: str, message: str) -> str:
        self._write(f"\n[{title}] {message}")
        try:
            return _clean_answer(self._read("Path (empty to cancel): "))
        except EOFError:
            return ""

    def ask_directory(self, title: str, message: str) -> Optional[Path]:
        while True:
            answer = self._ask(title, message)
            if not answer:
                return None
            p = Path(answer)
            if p.is_dir():
                return p
            self._write(f"Not a folder: {p}")

    def ask_file(self, title: str, message: str) -> Optional[Path]:
        while True:
            answer = self._ask(title, message)
            if not answer:
                return None
            p = Path(answer)
            if p.is_file():
                return p
            self._write(f"Not a file: {p}")

    def confirm(self, title: str, message: str) -> bool:
        self._write(f"\n[{title}] {message}")
        try:
            answer = self._read("Continue? [y/N]: ")
        except EOFError:
            return False
        return (answer or "").strip().lower() in ("y", "yes")


class DialogPrompter(Prompter):
    """Same prompts as native dialogs (for shortcut / file-association use)."""

    def __init__(self):
        # Qt is loaded only when dialogs are requested; console runs stay headless
        from PySide6 import QtWidgets

        self._qt = QtWidgets
        self._app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])

    def ask_directory(self, title: str, message: str) -> Optional[Path]:
        folder = self._qt.QFileDialog.getExistingDirectory(None, f"{APP_TITLE} - {title}: {message}", str(Path.home()))
        return Path(folder) if folder else None

    def ask_file(self, title: str, message: str) -> Optional[Path]:
        file_path, _ = self._qt.QFileDialog.getOpenFileName(
            None,
            f"{APP_TITLE} - {title}: {message}",
            str(Path.home()),
            "Executables (*.exe);;All files (*)",
        )
        return Path(file_path) if file_path else None

    def confirm(self, title: str, message: str) -> bool:
        res = self._qt.QMessageBox.question(
            None,
            f"{APP_TITLE} - {title}",
            f"{message}\n\nContinue anyway?",
            self._qt.QMessageBox.Yes | self._qt.QMessageBox.No,
        )
        return res == self._qt.QMessageBox.Yes


def make_prompter(mode: str) -> Prompter:
    if (mode or "").lower() == "dialog":
        return DialogPrompter()
    return ConsolePrompter()
