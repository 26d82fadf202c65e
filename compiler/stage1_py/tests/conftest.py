#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

import sys
from pathlib import Path
from textwrap import dedent

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from kn_decls import DeclarationParser
from kn_driver import KnDriver
from kn_lexer import Lexer


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def write_kn_file(temp_project: Path):
    def _write(name: str, content: str, suffix: str = ".kn") -> Path:
        file_path = temp_project / f"{name}{suffix}"
        file_path.write_text(dedent(content))
        return file_path

    return _write


@pytest.fixture
def lex():
    """Tokenize a source string.

    Usage:
        def test_something(lex):
            tokens = lex("func f() { }")
    """

    def _lex(src: str, filename: str = "<input>"):
        return Lexer(src, filename=filename).tokenize()

    return _lex


@pytest.fixture
def parse_source():
    """Recognize the function declarations in a source string."""

    def _parse(src: str):
        lexer = Lexer(dedent(src), filename="main.kn")
        return DeclarationParser(lexer.tokenize(), filename="main.kn").parse()

    return _parse


@pytest.fixture
def analyze_single():
    """Run the driver over an in-memory source and return the FrontEndResult.

    Usage:
        def test_something(analyze_single):
            result = analyze_single('''
                func f() -> int { }
            ''')
            assert not result.has_errors()
    """

    def _analyze(src: str):
        return KnDriver().analyze_source(dedent(src), filename="main.kn")

    return _analyze


def has_error_code(diagnostics, code: str) -> bool:
    """Check if any diagnostic contains the given error code.

    Args:
        diagnostics: List of Diagnostic objects
        code: Error code string like "PAR-0030" or "[PAR-0030]"

    Returns:
        True if any diagnostic message contains the error code
    """
    if not code.startswith("["):
        code = f"[{code}]"
    return any(code in d.message for d in diagnostics)
