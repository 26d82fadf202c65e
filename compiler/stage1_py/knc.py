#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import argparse
from pathlib import Path
from typing import Dict, List, Optional

from kn_analysis import FrontEndResult
from kn_context import CompilationContext
from kn_diagnostics import Diagnostic
from kn_driver import KnDriver
from kn_internal_error import InternalCompilerError
from kn_logger import log_error, log_info, log_warning
from kn_printer import format_function


def _source_lines(text: str) -> List[str]:
    # same normalization as the lexer, so rows line up with diagnostics
    return text.strip().replace("\r", "").split("\n")


def _load_file_lines(path: str, cache: Dict[str, List[str]]) -> List[str]:
    if path not in cache:
        cache[path] = _source_lines(Path(path).read_text(encoding="utf-8"))
    return cache[path]


def print_diagnostics(result: FrontEndResult, context: CompilationContext, source: Optional[str] = None) -> None:
    file_cache: Dict[str, List[str]] = {}
    if source is not None and result.filename is not None:
        file_cache[result.filename] = _source_lines(source)

    for diag in result.diagnostics:
        print_diagnostic_with_snippet(diag, file_cache, context)


def print_diagnostic_with_snippet(diag: Diagnostic, file_cache: Dict[str, List[str]], context: CompilationContext = None) -> None:
    emit = log_warning if diag.kind == "warning" else log_error

    # First line: header
    emit(context, diag.format())

    if not diag.filename or diag.line is None:
        return

    try:
        lines = _load_file_lines(diag.filename, file_cache)
    except OSError:
        # Can't read file; fall back to header only
        return

    line_idx = diag.line - 1
    if not (0 <= line_idx < len(lines)):
        return

    src_line = lines[line_idx]

    # Pretty "N | ..." formatting (calculate width so multi-digit line numbers align)
    width = max(5, len(str(diag.line)))
    gutter = f"{diag.line:>{width}} | "

    emit(context, gutter + src_line)

    if diag.column is None:
        return

    caret_prefix = " " * width + " | " + " " * (max(1, diag.column) - 1)
    emit(context, caret_prefix + "^")


def build_compilation_context(args: argparse.Namespace) -> CompilationContext:
    """Build a CompilationContext from command-line arguments."""
    return CompilationContext.from_verbosity(
        getattr(args, 'verbosity', 0),
        rich=getattr(args, 'log', False),
    )


def _run_analysis(args: argparse.Namespace, parse: bool = True):
    """Run the front end over args.file, returning (result, context, exit_code)."""
    context = build_compilation_context(args)
    driver = KnDriver(context=context)
    try:
        result = driver.analyze_file(args.file, parse=parse)
    except InternalCompilerError as e:
        log_error(context, e.format())
        return None, context, 1
    print_diagnostics(result, context=context)
    exit_code = 1 if result.has_errors() else 0
    return result, context, exit_code


def cmd_check(args: argparse.Namespace) -> int:
    """Lex and parse a source file, reporting diagnostics only."""
    result, context, exit_code = _run_analysis(args)
    if exit_code == 0:
        log_info(context, f"{result.filename}: {len(result.functions)} function(s), no errors")
    return exit_code


def cmd_tok(args: argparse.Namespace) -> int:
    """Dump lexer tokens."""
    result, _, exit_code = _run_analysis(args, parse=False)
    if exit_code != 0:
        return exit_code

    for tok in result.tokens:
        # Format: file:row:col: KIND  'text'
        print(
            f"{result.filename}:{tok.line}:{tok.column}:\t"
            f"{tok.kind.name:<14} {tok.text!r}"
        )
    return 0


def cmd_funcs(args: argparse.Namespace) -> int:
    """Pretty-print the recognized function declarations."""
    result, _, exit_code = _run_analysis(args)
    if exit_code != 0:
        return exit_code

    if not result.functions:
        print("<none>")
    for fn in result.functions:
        print(format_function(fn, with_body=args.tokens))
    return 0


def cmd_eval(args: argparse.Namespace) -> int:
    """Evaluate a standalone expression such as `3 + 4`."""
    context = build_compilation_context(args)
    driver = KnDriver(context=context)
    try:
        result = driver.evaluate_source(args.expr)
    except InternalCompilerError as e:
        log_error(context, e.format())
        return 1

    print_diagnostics(result, context=context, source=args.expr)
    if result.has_errors() or result.value is None:
        return 1

    print(result.value.format(with_type=args.with_type))
    return 0


def _add_file_arg(parser: argparse.ArgumentParser) -> None:
    """Add the source file argument."""
    parser.add_argument("file", help="Kiln source file (e.g. 'main.kn')")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="knc", description="Kiln front end (Stage 1)")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    parser.add_argument("-v", "--verbose",
                        action='count',
                        default=0,
                        dest='verbosity',
                        help="Increase verbosity: -v=INFO, -vvv=DEBUG")
    parser.add_argument("-l", "--log",
                        action='store_true',
                        default=False,
                        help="Enable rich log formatting (timestamps, levels)")

    ###########################
    # check command
    ###########################
    p_check = subparsers.add_parser("check", help="Lex and parse a source file", aliases=["analyze"])
    _add_file_arg(p_check)
    p_check.set_defaults(func=cmd_check)

    ###########################
    # tok command
    ###########################
    p_tok = subparsers.add_parser("tok", help="Dump lexer tokens", aliases=["tokens"])
    _add_file_arg(p_tok)
    p_tok.set_defaults(func=cmd_tok)

    ###########################
    # funcs command
    ###########################
    p_funcs = subparsers.add_parser("funcs", help="Dump recognized function declarations", aliases=["functions"])
    p_funcs.add_argument("--tokens", "-t", action="store_true",
                         help="Also print the raw body tokens of each function")
    _add_file_arg(p_funcs)
    p_funcs.set_defaults(func=cmd_funcs)

    ###########################
    # eval command
    ###########################
    p_eval = subparsers.add_parser("eval", help="Evaluate a standalone expression")
    p_eval.add_argument("--with-type", "-T", action="store_true",
                        help="Append the result type, e.g. 7(int)")
    p_eval.add_argument("expr", help="Expression to evaluate (e.g. '3 + 4')")
    p_eval.set_defaults(func=cmd_eval)

    args = parser.parse_args(argv)

    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
