#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass
from enum import Enum, auto
from typing import List


# ==========================
# Tokens and lexer
# ==========================

class TokenKind(Enum):
    NAME = auto()  # identifier or keyword, e.g. func, add, x
    NUMBER = auto()  # integer literal, e.g. 42

    # Punctuation / operators
    OPEN_PAREN = auto()  # (
    CLOSE_PAREN = auto()  # )
    SEMICOLON = auto()  # ;
    COLON = auto()  # :
    COMMA = auto()  # ,
    MINUS = auto()  # -
    PLUS = auto()  # +
    STAR = auto()  # *
    SLASH = auto()  # /
    PERCENT = auto()  # %
    EQUAL = auto()  # =
    ARROW = auto()  # ->
    OPEN_BRACE = auto()  # {
    CLOSE_BRACE = auto()  # }

    # Quoted literals, always emitted as a delimiter/literal/delimiter triplet
    DOUBLE_QUOTE = auto()  # "
    SINGLE_QUOTE = auto()  # '
    STRING_LITERAL = auto()
    CHAR_LITERAL = auto()

    @property
    def display_name(self) -> str:
        """CamelCase name used by the debug printers, e.g. ``OpenParen``."""
        return "".join(part.capitalize() for part in self.name.split("_"))


class Keyword(Enum):
    FUNC = auto()


KEYWORDS = {
    "func": Keyword.FUNC,
}

PUNCTUATION = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    ";": TokenKind.SEMICOLON,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    "+": TokenKind.PLUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "=": TokenKind.EQUAL,
    "{": TokenKind.OPEN_BRACE,
    "}": TokenKind.CLOSE_BRACE,
}

WHITESPACE = (" ", "\t")
DIGITS = "0123456789"


@dataclass(frozen=True)
class Location:
    file_path: str
    row: int
    column: int

    def __str__(self) -> str:
        return f"{self.file_path}:{self.row}:{self.column}"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    location: Location

    @property
    def line(self) -> int:
        return self.location.row

    @property
    def column(self) -> int:
        return self.location.column

    def __repr__(self) -> str:
        return f"{self.text!r}"


@dataclass
class LexerError(Exception):
    message: str
    filename: str
    line: int
    column: int


def is_keyword(word: str) -> bool:
    return word in KEYWORDS


class Lexer:
    """
    Line-oriented lexer.

    The source is trimmed, carriage returns are dropped, and each physical
    line is scanned left to right by dispatching on its first unconsumed
    character. Rows and columns are 1-based.
    """

    def __init__(self, source: str, filename: str = "<input>") -> None:
        self.source = source.strip().replace("\r", "")
        self.filename = filename
        self.row = 1
        self.column = 1
        self.line = ""
        self.index = 0

    @classmethod
    def from_source(cls, source: str) -> "Lexer":
        return cls(source)

    # --- low-level char utilities ---

    def _at_end_of_line(self) -> bool:
        return self.index >= len(self.line)

    def _peek(self) -> str:
        if self._at_end_of_line():
            return "\0"
        return self.line[self.index]

    def _peek_next(self) -> str:
        if self.index + 1 >= len(self.line):
            return "\0"
        return self.line[self.index + 1]

    def _here(self) -> Location:
        return Location(self.filename, self.row, self.column)

    def _error(self, message: str, column: int) -> LexerError:
        return LexerError(message, self.filename, self.row, column)

    def _push(self, tokens: List[Token], kind: TokenKind, text: str) -> None:
        tokens.append(Token(kind, text, self._here()))
        self.index += len(text)
        self.column += len(text)

    # --- main API ---

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        if not self.source:
            return tokens

        for line in self.source.split("\n"):
            self.line = line
            self.index = 0
            self.column = 1
            while not self._at_end_of_line():
                self._scan_one(tokens)
            self.row += 1
        return tokens

    def _scan_one(self, tokens: List[Token]) -> None:
        c = self._peek()

        if c in WHITESPACE:
            self.index += 1
            self.column += 1
            return

        if c.isalpha():
            self._push(tokens, TokenKind.NAME, self._read_run(str.isalpha))
            return

        if c in DIGITS:
            self._push(tokens, TokenKind.NUMBER, self._read_run(DIGITS.__contains__))
            return

        # the only two-character token: longest match wins
        if c == "-":
            if self._peek_next() == ">":
                self._push(tokens, TokenKind.ARROW, "->")
            else:
                self._push(tokens, TokenKind.MINUS, c)
            return

        if c == '"':
            self._read_string_literal(tokens)
            return

        if c == "'":
            self._read_char_literal(tokens)
            return

        kind = PUNCTUATION.get(c)
        if kind is not None:
            self._push(tokens, kind, c)
            return

        raise self._error(f"[LEX-0040] unexpected character {c!r} at {self.row}:{self.column}", self.column)

    def _read_run(self, predicate) -> str:
        end = self.index
        while end < len(self.line) and predicate(self.line[end]):
            end += 1
        return self.line[self.index:end]

    def _read_string_literal(self, tokens: List[Token]) -> None:
        start_col = self.column
        close = self.line.find('"', self.index + 1)
        if close < 0:
            raise self._error("[LEX-0010] unterminated string literal", start_col + len(self.line) - self.index)

        text = self.line[self.index + 1:close]
        self._push(tokens, TokenKind.DOUBLE_QUOTE, '"')
        self._push(tokens, TokenKind.STRING_LITERAL, text)
        self._push(tokens, TokenKind.DOUBLE_QUOTE, '"')

    def _read_char_literal(self, tokens: List[Token]) -> None:
        start_col = self.column
        ch = self._peek_next()
        if ch == "\0":
            raise self._error("[LEX-0020] unterminated char literal", start_col + 1)
        if ch == "'" or self.line[self.index + 2:self.index + 3] != "'":
            raise self._error(
                "[LEX-0021] invalid char literal, expected exactly one character between single quotes",
                start_col + 1,
            )

        self._push(tokens, TokenKind.SINGLE_QUOTE, "'")
        self._push(tokens, TokenKind.CHAR_LITERAL, ch)
        self._push(tokens, TokenKind.SINGLE_QUOTE, "'")
