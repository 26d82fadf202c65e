#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

"""
Leveled logging to stderr for the Kiln front end.

Every function takes the CompilationContext of the current run; a missing
context falls back to the default one (warnings and errors only).
"""

import sys
import time
from typing import Optional

from kn_context import CompilationContext, LogLevel

_LEVEL_TAGS = {
    LogLevel.ERROR: "ERROR",
    LogLevel.WARNING: "WARNING",
    LogLevel.INFO: "INFO",
    LogLevel.DEBUG: "DEBUG",
}


def _prefix(context: CompilationContext, log_level: LogLevel) -> str:
    if not context.log_rich_format:
        return ""
    timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
    return f"{timestamp} [{_LEVEL_TAGS[log_level]}] "


def log(context: Optional[CompilationContext], log_level: LogLevel, message: str) -> None:
    """
    Print `message` to stderr when the context's level admits `log_level`.

    Args:
        context:    The compilation context of the current run, or None.
        log_level:  Level of this message; never SILENT.
        message:    The text to print, without trailing newline.
    """
    if context is None:
        context = CompilationContext.default()
    if context.admits(log_level):
        print(f"{_prefix(context, log_level)}{message}", file=sys.stderr)


def log_error(context: Optional[CompilationContext], message: str) -> None:
    log(context, LogLevel.ERROR, message)


def log_warning(context: Optional[CompilationContext], message: str) -> None:
    log(context, LogLevel.WARNING, message)


def log_info(context: Optional[CompilationContext], message: str) -> None:
    log(context, LogLevel.INFO, message)


def log_debug(context: Optional[CompilationContext], message: str) -> None:
    log(context, LogLevel.DEBUG, message)


def log_stage(context: Optional[CompilationContext], stage: str, filename: Optional[str] = None) -> None:
    """Announce a front-end stage at INFO level, e.g. ``Lexing 'main.kn'``."""
    log(context, LogLevel.INFO, f"{stage} '{filename}'" if filename else f"{stage}...")
