#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass
from typing import Optional

from kn_lexer import Location, Token


DIAGNOSTIC_CODE_FAMILIES = {
    "LEX": [
        "LEX-0010",
        "LEX-0020",
        "LEX-0021",
        "LEX-0040",
    ],
    "PAR": [
        "PAR-0010",
        "PAR-0011",
        "PAR-0012",
        "PAR-0013",
        "PAR-0020",
        "PAR-0021",
        "PAR-0022",
        "PAR-0024",
        "PAR-0030",
        "PAR-0050",
        "PAR-0060",
        "PAR-0061",
        "PAR-0062",
        "PAR-0063",
        "PAR-0070",
        "PAR-0090",
    ],
    "EVL": [
        "EVL-0010",
        "EVL-0020",
        "EVL-0030",
        "EVL-0040",
        "EVL-0041",
        "EVL-0042",
        "EVL-0043",
        "EVL-0044",
        "EVL-0045",
        "EVL-0046",
        "EVL-0047",
        "EVL-0050",
        "EVL-0060",
        "EVL-0070",
        "EVL-0080",
    ],
    "DRV": [
        "DRV-0010",
        "DRV-0020",
        "DRV-0030",  # empty source file (warning)
    ],
    # ICE codes are internal compiler errors raised as exceptions,
    # not user-facing diagnostics; they are excluded from this registry.
}


@dataclass
class Diagnostic:
    kind: str  # "error" or "warning"
    message: str
    filename: Optional[str] = None  # file path

    # Primary location
    line: Optional[int] = None
    column: Optional[int] = None

    # Return the one-line header; snippets will be printed at the call site
    def format(self) -> str:
        loc = ""
        if self.filename is not None:
            loc += f"{self.filename}"
            if self.line is not None:
                loc += f":{self.line}"
                if self.column is not None:
                    loc += f":{self.column}"
            loc += ": "
        return f"{loc}{self.kind.upper()}: {self.message}"


def diag_from_location(
        kind: str,
        message: str,
        *,
        location: Optional[Location],
        filename: Optional[str] = None,
) -> Diagnostic:
    if location is None:
        return Diagnostic(kind=kind, message=message, filename=filename)
    return Diagnostic(
        kind=kind,
        message=message,
        filename=location.file_path,
        line=location.row,
        column=location.column,
    )


def diag_from_token(
        kind: str,
        message: str,
        *,
        filename: Optional[str],
        token: Optional[Token],
) -> Diagnostic:
    location = token.location if token is not None else None
    return diag_from_location(kind, message, location=location, filename=filename)
