#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import pytest

from kn_lexer import Lexer, LexerError


def _lex_error(src: str) -> LexerError:
    with pytest.raises(LexerError) as excinfo:
        Lexer(src, filename="main.kn").tokenize()
    return excinfo.value


def test_unexpected_character_reports_position():
    err = _lex_error("func f() {\n  x @ y\n}")

    assert "[LEX-0040]" in err.message
    assert "'@'" in err.message
    assert err.filename == "main.kn"
    assert (err.line, err.column) == (2, 5)


def test_unexpected_character_at_start():
    err = _lex_error("#")

    assert "[LEX-0040]" in err.message
    assert (err.line, err.column) == (1, 1)


def test_unterminated_string_literal():
    err = _lex_error('"abc')

    assert "[LEX-0010]" in err.message
    assert "unterminated string literal" in err.message
    assert (err.line, err.column) == (1, 5)


def test_string_literal_does_not_span_lines():
    err = _lex_error('"abc\ndef"')

    assert "[LEX-0010]" in err.message
    assert err.line == 1


def test_lone_single_quote_is_unterminated():
    err = _lex_error("'")

    assert "[LEX-0020]" in err.message
    assert (err.line, err.column) == (1, 2)


@pytest.mark.parametrize("src", ["'ab'", "''", "'a"])
def test_char_literal_needs_exactly_one_character(src):
    err = _lex_error(src)

    assert "[LEX-0021]" in err.message


@pytest.mark.parametrize("src", ["² + 1", "1٣"])
def test_non_ascii_digits_are_unexpected_characters(src):
    err = _lex_error(src)

    assert "[LEX-0040]" in err.message
