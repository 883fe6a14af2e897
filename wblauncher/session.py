#===============================================================================
#  WB_Project_Launcher | session.py
#===============================================================================
#  Author      : Edwin A. Rodriguez
#  Role/Team   : SAP COE / SAP SRE (GRM-Testing-Automation & Governance)
#  Created     : 2026-02-12
#  Last Update : 2026-02-18
#
#  Summary
#  -------
#  Per-run session context: the session log, operator messages, the prompt
#  capability, every LaunchPlan attempted and the temporary extraction (if any).
#
#  Copyright (c) 2026 Edwin A. Rodriguez. All rights reserved.
#  Provided "AS IS", without warranty of any kind.
#===============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from .models import LaunchPlan, TemporaryExtraction
from .prompts import Prompter

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(message)s"
LOGGER_NAME = "wblauncher"


@dataclass
class SessionContext:
    prompter: Prompter
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(LOGGER_NAME))
    log_path: Optional[Path] = None
    sleep: Callable[[float], None] = time.sleep
    echo: Callable[[str], None] = print
    attempts: List[LaunchPlan] = field(default_factory=list)
    extraction: Optional[TemporaryExtraction] = None
    _handler: Optional[logging.Handler] = None

    def info(self, msg: str, *args) -> None:
        self.logger.info(msg, *args)

    def report(self, msg: str, level: int = logging.INFO) -> None:
        """Log a message and show it to the operator."""
        self.logger.log(level, msg)
        self.echo(msg)

    def warn(self, msg: str, hint: str = "") -> None:
        self.report(f"WARNING: {msg}", logging.WARNING)
        if hint:
            self.report(f"  -> {hint}", logging.WARNING)

    def record_attempt(self, plan: LaunchPlan) -> None:
        self.attempts.append(plan)
        self.logger.info("Attempt %d (%s): %s  [cwd=%s]",
                         len(self.attempts), plan.label, plan.command_line(), plan.cwd)

    @property
    def last_attempt(self) -> Optional[LaunchPlan]:
        return self.attempts[-1] if self.attempts else None

    def close(self) -> None:
        if self._handler is not None:
            self.logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None


def open_session(log_path: Path, prompter: Prompter, **kwargs) -> SessionContext:
    """Create a session whose events are appended to log_path."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    handler: Optional[logging.Handler] = None
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    except OSError as e:
        # Session still runs; operator output is unaffected
        logger.warning("Session log unavailable at %s: %s", log_path, e)
    session = SessionContext(prompter=prompter, logger=logger, log_path=log_path, **kwargs)
    session._handler = handler
    session.info("=" * 60)
    session.info("Session started")
    return session
