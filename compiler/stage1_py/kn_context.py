#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

"""
Options shared by every Kiln front-end stage: which files count as source,
and how much the logger says.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    SILENT = 0
    ERROR = 3
    WARNING = 6  # default
    INFO = 10  # -v
    DEBUG = 30  # -vvv


@dataclass
class CompilationContext:
    """
    Attributes:
        source_extension:   Suffix a file must carry to be analyzed.
        log_rich_format:    Prefix log lines with a timestamp and level tag.
        log_level:          Most verbose level that still gets printed.
    """
    source_extension: str = ".kn"
    log_rich_format: bool = False
    log_level: LogLevel = LogLevel.WARNING

    @staticmethod
    def default() -> 'CompilationContext':
        return CompilationContext()

    @staticmethod
    def from_verbosity(verbosity: int, rich: bool = False) -> 'CompilationContext':
        """Map a repeated -v count onto a log level: 1-2 is INFO, 3 or more is DEBUG."""
        if verbosity >= 3:
            level = LogLevel.DEBUG
        elif verbosity >= 1:
            level = LogLevel.INFO
        else:
            level = LogLevel.WARNING
        return CompilationContext(log_rich_format=rich, log_level=level)

    def admits(self, level: LogLevel) -> bool:
        return level != LogLevel.SILENT and self.log_level >= level
