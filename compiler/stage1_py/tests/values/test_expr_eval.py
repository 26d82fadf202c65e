#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import pytest

from kn_expr import EvalError, Expression, Operator, evaluate
from kn_values import Value, ValueType


def _eval_error(op, a, b) -> EvalError:
    with pytest.raises(EvalError) as excinfo:
        evaluate(op, a, b)
    return excinfo.value


def test_sum_of_ints():
    assert evaluate(Operator.SUM, Value.of_int(3), Value.of_int(4)) == Value.of_int(7)


def test_mixed_operand_types_are_a_type_mismatch():
    err = _eval_error(Operator.SUM, Value.of_int(3), Value.of_float(4.0))

    assert "[EVL-0020]" in err.message
    assert "type mismatch for operator '+'" in err.message
    assert "3(int) + 4.00f(float)" in err.message


@pytest.mark.parametrize(
    "op, a, b, expected",
    [
        (Operator.SUB, 10, 4, 6),
        (Operator.MULT, 6, 7, 42),
        (Operator.DIV, 7, 2, 3),
        (Operator.DIV, -7, 2, -3),
        (Operator.DIV, 7, -2, -3),
        (Operator.MOD, 7, 3, 1),
        (Operator.MOD, -7, 2, -1),
        (Operator.MOD, 7, -2, 1),
    ],
)
def test_int_arithmetic_follows_c_semantics(op, a, b, expected):
    assert evaluate(op, Value.of_int(a), Value.of_int(b)) == Value.of_int(expected)


def test_int_overflow_wraps():
    result = evaluate(Operator.SUM, Value.of_int(2 ** 31 - 1), Value.of_int(1))

    assert result == Value.of_int(-(2 ** 31))


@pytest.mark.parametrize(
    "op, expected",
    [
        (Operator.SUM, 3.5),
        (Operator.SUB, -0.5),
        (Operator.MULT, 3.0),
        (Operator.DIV, 0.75),
    ],
)
def test_float_arithmetic(op, expected):
    result = evaluate(op, Value.of_float(1.5), Value.of_float(2.0))

    assert result.type is ValueType.FLOAT
    assert result.payload == pytest.approx(expected)


def test_ptr_arithmetic_wraps_below_zero():
    c = evaluate(Operator.SUB, Value.of_ptr(3), Value.of_ptr(2))
    d = evaluate(Operator.SUB, c, Value.of_ptr(100))

    assert c == Value.of_ptr(1)
    assert d.payload == 2 ** 64 - 99
    assert d.format() == "ffffffffffffff9d"


def test_ptr_sum_mult_div():
    assert evaluate(Operator.SUM, Value.of_ptr(0x10), Value.of_ptr(0x20)) == Value.of_ptr(0x30)
    assert evaluate(Operator.MULT, Value.of_ptr(4), Value.of_ptr(4)) == Value.of_ptr(16)
    assert evaluate(Operator.DIV, Value.of_ptr(9), Value.of_ptr(2)) == Value.of_ptr(4)


def test_string_sum_concatenates():
    result = evaluate(Operator.SUM, Value.of_str("ab"), Value.of_str("cd"))

    assert result == Value.of_str("abcd")


@pytest.mark.parametrize(
    "op, a, b, code",
    [
        (Operator.SUM, Value.of_char("a"), Value.of_char("b"), "EVL-0030"),
        (Operator.SUB, Value.of_char("a"), Value.of_char("b"), "EVL-0030"),
        (Operator.SUB, Value.of_str("a"), Value.of_str("b"), "EVL-0030"),
        (Operator.SUM, Value.of_bool(True), Value.of_bool(False), "EVL-0030"),
        (Operator.MULT, Value.of_char("a"), Value.of_char("b"), "EVL-0040"),
        (Operator.MULT, Value.of_str("a"), Value.of_str("b"), "EVL-0041"),
        (Operator.DIV, Value.of_char("a"), Value.of_char("b"), "EVL-0042"),
        (Operator.DIV, Value.of_str("a"), Value.of_str("b"), "EVL-0043"),
        (Operator.MOD, Value.of_float(1.0), Value.of_float(2.0), "EVL-0044"),
        (Operator.MOD, Value.of_ptr(1), Value.of_ptr(2), "EVL-0045"),
        (Operator.MOD, Value.of_char("a"), Value.of_char("b"), "EVL-0046"),
        (Operator.MOD, Value.of_str("a"), Value.of_str("b"), "EVL-0047"),
    ],
)
def test_disallowed_operator_type_combinations(op, a, b, code):
    err = _eval_error(op, a, b)

    assert f"[{code}]" in err.message


def test_invalid_operands_message_shows_typed_values():
    err = _eval_error(Operator.SUM, Value.of_char("a"), Value.of_char("b"))

    assert err.message == "[EVL-0030] invalid operands for '+': a(char), b(char)"


@pytest.mark.parametrize(
    "op, a, b",
    [
        (Operator.DIV, Value.of_int(1), Value.of_int(0)),
        (Operator.MOD, Value.of_int(1), Value.of_int(0)),
        (Operator.DIV, Value.of_float(1.0), Value.of_float(0.0)),
        (Operator.DIV, Value.of_ptr(1), Value.of_ptr(0)),
    ],
)
def test_division_by_zero_is_an_error(op, a, b):
    err = _eval_error(op, a, b)

    assert "[EVL-0050]" in err.message
    assert "division by zero" in err.message


def test_expression_needs_exactly_two_operands():
    expr = Expression(Operator.SUM, (Value.of_int(1),))

    with pytest.raises(EvalError) as excinfo:
        expr.evaluate()

    assert "[EVL-0010]" in excinfo.value.message


def test_expression_format():
    expr = Expression(Operator.SUB, (Value.of_int(3), Value.of_int(2)))

    assert expr.format() == "3 - 2"
    assert expr.format(with_type=True) == "3(int) - 2(int)"


def test_operator_glyphs():
    assert [op.glyph for op in Operator] == ["+", "-", "*", "/", "%"]
