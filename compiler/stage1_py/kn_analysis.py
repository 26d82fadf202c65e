#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import List, Optional

from kn_context import CompilationContext
from kn_decls import Function
from kn_diagnostics import Diagnostic
from kn_lexer import Token
from kn_values import Value


@dataclass
class FrontEndResult:
    """
    Result of running the front end over one source file or expression.

    Contains:
      - the source file name (if any)
      - compilation context
      - the lexed tokens
      - the recognized function declarations
      - the evaluated value (expression mode only)
      - diagnostics accumulated from all stages
    """
    filename: Optional[str] = None
    context: CompilationContext = field(default_factory=CompilationContext.default)

    tokens: List[Token] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)
    value: Optional[Value] = None

    diagnostics: List[Diagnostic] = field(default_factory=list)

    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.diagnostics)

    def has_warnings(self) -> bool:
        return any(d.kind == "warning" for d in self.diagnostics)

    def function(self, name: str) -> Optional[Function]:
        return next((fn for fn in self.functions if fn.name == name), None)
