#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from pathlib import Path
from typing import Optional

from kn_analysis import FrontEndResult
from kn_context import CompilationContext
from kn_decls import DeclarationParser, ParseError
from kn_diagnostics import Diagnostic, diag_from_token
from kn_expr import EvalError, ExpressionReader
from kn_lexer import Lexer, LexerError
from kn_logger import log_debug, log_info, log_stage


class KnDriver:
    """
    Front-end driver:
      - check the file extension
      - read file
      - tokenize
      - recognize function declarations (or evaluate a standalone expression)

    Errors raised by the core stages are turned into diagnostics on the
    returned FrontEndResult; the driver never exits the process.

    Entry points:
      - analyze_file(path): read, lex and parse one source file.
      - analyze_source(text, filename): lex and parse in-memory source.
      - evaluate_source(text): lex and evaluate one standalone expression.
    """

    def __init__(self, context: CompilationContext | None = None):
        self.context = context or CompilationContext.default()

    # --- Public API ---

    def analyze_file(self, path: str | Path, parse: bool = True) -> FrontEndResult:
        path = Path(path)
        result = FrontEndResult(filename=str(path), context=self.context)
        log_info(self.context, f"Starting analysis for '{path}'")

        text = self._read_source(path, result)
        if text is None:
            return result
        return self._run(text, result, parse)

    def analyze_source(self, text: str, filename: str = "<input>", parse: bool = True) -> FrontEndResult:
        result = FrontEndResult(filename=filename, context=self.context)
        return self._run(text, result, parse)

    def evaluate_source(self, text: str, filename: str = "<expr>") -> FrontEndResult:
        result = FrontEndResult(filename=filename, context=self.context)
        if not self._lex(text, result):
            return result
        if not result.tokens:
            result.diagnostics.append(
                Diagnostic(kind="error", message="[EVL-0010] expected an operand", filename=filename)
            )
            return result

        log_stage(self.context, "Evaluating expression from", filename)
        try:
            result.value = ExpressionReader(result.tokens, filename=filename).evaluate()
        except EvalError as e:
            result.diagnostics.append(
                diag_from_token(kind="error", message=e.message, token=e.token, filename=e.filename)
            )
            return result

        log_debug(self.context, f"Expression evaluated to {result.value.format(with_type=True)}")
        return result

    # --- Internal helpers ---

    def _read_source(self, path: Path, result: FrontEndResult) -> Optional[str]:
        expected = self.context.source_extension
        if path.suffix != expected:
            result.diagnostics.append(
                Diagnostic(
                    kind="error",
                    message=f"[DRV-0020] expected a '{expected}' source file, got '{path.name}'",
                    filename=str(path),
                )
            )
            return None

        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            message = f"[DRV-0010] source file not found: {path}"
        except UnicodeDecodeError as e:
            message = f"[DRV-0010] cannot decode {path} as UTF-8: byte {e.start}"
        except OSError as e:
            message = f"[DRV-0010] cannot read {path}: {e.strerror or e}"
        result.diagnostics.append(Diagnostic(kind="error", message=message))
        return None

    def _run(self, text: str, result: FrontEndResult, parse: bool) -> FrontEndResult:
        if not self._lex(text, result):
            return result

        if not result.tokens:
            message = f"[DRV-0030] source file '{result.filename}' is empty"
            result.diagnostics.append(Diagnostic(kind="warning", message=message, filename=result.filename))
            return result

        if not parse:
            return result

        log_stage(self.context, "Recognizing declarations in", result.filename)
        parser = DeclarationParser(result.tokens, filename=result.filename)
        try:
            result.functions = parser.parse()
        except ParseError as e:
            result.diagnostics.append(
                diag_from_token(kind="error", message=e.message, token=e.token, filename=e.filename)
            )
            return result

        log_debug(
            self.context,
            f"Found {len(result.functions)} function(s): {', '.join(fn.name for fn in result.functions) or '<none>'}",
        )
        return result

    def _lex(self, text: str, result: FrontEndResult) -> bool:
        log_stage(self.context, "Lexing", result.filename)
        try:
            result.tokens = Lexer(text, filename=result.filename).tokenize()
        except LexerError as e:
            result.diagnostics.append(
                Diagnostic(
                    kind="error",
                    message=e.message,
                    filename=e.filename,
                    line=e.line,
                    column=e.column,
                )
            )
            return False
        log_debug(self.context, f"Lexed {len(result.tokens)} token(s) from {result.filename}")
        return True
