#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List, Optional, Sequence

from kn_internal_error import ICELocation, InternalCompilerError
from kn_lexer import Token, TokenKind
from kn_values import INT_MAX, INT_MIN, Value, ValueType


# ==========================
# Operators and expressions
# ==========================

class Operator(Enum):
    SUM = "+"
    SUB = "-"
    MULT = "*"
    DIV = "/"
    MOD = "%"

    @property
    def glyph(self) -> str:
        return self.value


OPERATOR_TOKENS = {
    TokenKind.PLUS: Operator.SUM,
    TokenKind.MINUS: Operator.SUB,
    TokenKind.STAR: Operator.MULT,
    TokenKind.SLASH: Operator.DIV,
    TokenKind.PERCENT: Operator.MOD,
}

BOOL_LITERALS = {"true": True, "false": False}

NUMERIC_TYPES = (ValueType.INT, ValueType.FLOAT, ValueType.PTR)


@dataclass
class EvalError(Exception):
    message: str
    token: Optional[Token] = None
    filename: Optional[str] = None


def _trunc_div(a: int, b: int) -> int:
    # C semantics: the quotient is truncated toward zero
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


@dataclass
class Expression:
    """
    Two operands and an operator that evaluate to a single value,
    e.g. ``2 * 3``. Built, evaluated once, and thrown away.
    """
    operator: Operator
    operands: Sequence[Value]
    token: Optional[Token] = field(default=None, compare=False)

    def format(self, with_type: bool = False) -> str:
        return f" {self.operator.glyph} ".join(v.format(with_type) for v in self.operands)

    def _fail(self, message: str) -> EvalError:
        filename = self.token.location.file_path if self.token is not None else None
        return EvalError(message, self.token, filename)

    def _invalid_operands(self) -> EvalError:
        a, b = self.operands
        return self._fail(
            f"[EVL-0030] invalid operands for '{self.operator.glyph}': {a.format(True)}, {b.format(True)}"
        )

    def evaluate(self) -> Value:
        if len(self.operands) != 2:
            raise self._fail(
                f"[EVL-0010] insufficient operands for '{self.operator.glyph}': "
                f"expected 2, got {len(self.operands)}"
            )

        a, b = self.operands
        if a.type is not b.type:
            raise self._fail(f"[EVL-0020] type mismatch for operator '{self.operator.glyph}': {self.format(True)}")

        if a.type is ValueType.BOOL:
            raise self._invalid_operands()

        op = self.operator
        if op is Operator.SUM:
            return self._sum(a, b)
        if op is Operator.SUB:
            return self._sub(a, b)
        if op is Operator.MULT:
            return self._mult(a, b)
        if op is Operator.DIV:
            return self._div(a, b)
        if op is Operator.MOD:
            return self._mod(a, b)
        loc = None
        if self.token is not None:
            loc = ICELocation(self.token.location.file_path, self.token.line, self.token.column)
        raise InternalCompilerError(f"[ICE-0110] unknown operator {op!r}", loc)

    # --- per-operator rules ---

    def _sum(self, a: Value, b: Value) -> Value:
        if a.type is ValueType.INT:
            return Value.of_int(a.payload + b.payload)
        if a.type is ValueType.FLOAT:
            return Value.of_float(a.payload + b.payload)
        if a.type is ValueType.PTR:
            return Value.of_ptr(a.payload + b.payload)
        if a.type is ValueType.STR:
            return Value.of_str(a.payload + b.payload)
        raise self._invalid_operands()

    def _sub(self, a: Value, b: Value) -> Value:
        if a.type is ValueType.INT:
            return Value.of_int(a.payload - b.payload)
        if a.type is ValueType.FLOAT:
            return Value.of_float(a.payload - b.payload)
        if a.type is ValueType.PTR:
            return Value.of_ptr(a.payload - b.payload)
        raise self._invalid_operands()

    def _mult(self, a: Value, b: Value) -> Value:
        if a.type is ValueType.INT:
            return Value.of_int(a.payload * b.payload)
        if a.type is ValueType.FLOAT:
            return Value.of_float(a.payload * b.payload)
        if a.type is ValueType.PTR:
            return Value.of_ptr(a.payload * b.payload)
        if a.type is ValueType.CHAR:
            raise self._fail("[EVL-0040] cannot multiply characters")
        if a.type is ValueType.STR:
            raise self._fail("[EVL-0041] cannot multiply strings")
        raise self._invalid_operands()

    def _check_divisor(self, b: Value) -> None:
        if b.type in NUMERIC_TYPES and b.payload == 0:
            raise self._fail(f"[EVL-0050] division by zero in '{self.format(True)}'")

    def _div(self, a: Value, b: Value) -> Value:
        if a.type is ValueType.CHAR:
            raise self._fail("[EVL-0042] cannot divide characters")
        if a.type is ValueType.STR:
            raise self._fail("[EVL-0043] cannot divide strings")
        self._check_divisor(b)
        if a.type is ValueType.INT:
            return Value.of_int(_trunc_div(a.payload, b.payload))
        if a.type is ValueType.FLOAT:
            return Value.of_float(a.payload / b.payload)
        if a.type is ValueType.PTR:
            return Value.of_ptr(a.payload // b.payload)
        raise self._invalid_operands()

    def _mod(self, a: Value, b: Value) -> Value:
        if a.type is ValueType.FLOAT:
            raise self._fail("[EVL-0044] floats have no modulo")
        if a.type is ValueType.PTR:
            raise self._fail("[EVL-0045] pointers have no modulo")
        if a.type is ValueType.CHAR:
            raise self._fail("[EVL-0046] cannot take the modulo of characters")
        if a.type is ValueType.STR:
            raise self._fail("[EVL-0047] cannot take the modulo of strings")
        self._check_divisor(b)
        if a.type is ValueType.INT:
            return Value.of_int(a.payload - b.payload * _trunc_div(a.payload, b.payload))
        raise self._invalid_operands()


def evaluate(operator: Operator, a: Value, b: Value, token: Optional[Token] = None) -> Value:
    return Expression(operator, (a, b), token).evaluate()


def value_from_token(tok: Token) -> Value:
    """Convert a literal token into a Value."""
    if tok.kind is TokenKind.NUMBER:
        number = int(tok.text)
        if not INT_MIN <= number <= INT_MAX:
            raise EvalError(
                f"[EVL-0080] integer literal {tok.text} does not fit in a 32-bit int", tok, tok.location.file_path
            )
        return Value.of_int(number)
    if tok.kind is TokenKind.CHAR_LITERAL:
        return Value.of_char(tok.text)
    if tok.kind is TokenKind.STRING_LITERAL:
        return Value.of_str(tok.text)
    if tok.kind is TokenKind.NAME and tok.text in BOOL_LITERALS:
        return Value.of_bool(BOOL_LITERALS[tok.text])
    raise EvalError(f"[EVL-0060] expected a literal, got {tok!r}", tok, tok.location.file_path)


class ExpressionReader:
    """
    Evaluates a standalone expression given as tokens:

        operand ( operator operand )* [ ";" ]

    Operators have no precedence; each step folds the running result and the
    next operand into a two-operand Expression, left to right.
    """

    def __init__(self, tokens: List[Token], filename: Optional[str] = None) -> None:
        self.pending: Deque[Token] = deque(tokens)
        self.filename = filename
        self.last: Optional[Token] = None

    def _pop(self) -> Optional[Token]:
        if not self.pending:
            return None
        self.last = self.pending.popleft()
        return self.last

    def _fail(self, message: str, tok: Optional[Token]) -> EvalError:
        return EvalError(message, tok, self.filename)

    def _expect(self, kind: TokenKind, what: str) -> Token:
        tok = self._pop()
        if tok is None or tok.kind is not kind:
            raise self._fail(f"[EVL-0070] expected {what}, got {tok!r}", tok or self.last)
        return tok

    def _read_operand(self) -> Value:
        tok = self._pop()
        if tok is None:
            raise self._fail("[EVL-0010] expected an operand", self.last)

        if tok.kind is TokenKind.DOUBLE_QUOTE:
            lit = self._expect(TokenKind.STRING_LITERAL, "a string literal")
            self._expect(TokenKind.DOUBLE_QUOTE, "a closing '\"'")
            return value_from_token(lit)
        if tok.kind is TokenKind.SINGLE_QUOTE:
            lit = self._expect(TokenKind.CHAR_LITERAL, "a char literal")
            self._expect(TokenKind.SINGLE_QUOTE, "a closing \"'\"")
            return value_from_token(lit)
        return value_from_token(tok)

    def evaluate(self) -> Value:
        result = self._read_operand()
        while self.pending:
            tok = self._pop()
            if tok.kind is TokenKind.SEMICOLON and not self.pending:
                break
            operator = OPERATOR_TOKENS.get(tok.kind)
            if operator is None:
                raise self._fail(f"[EVL-0070] expected an operator, got {tok!r}", tok)
            result = evaluate(operator, result, self._read_operand(), tok)
        return result
