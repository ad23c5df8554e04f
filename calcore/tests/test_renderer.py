"""Tests for text rendering."""

from fractions import Fraction

import pytest
from calcore import (
    Const, ConstKind, Cos, Exp, Inverse, Num, Priority, Sin, Tan, VarOp, VarOpKind,
    add, div, mul, priority, render, sub,
)

pi = Const(ConstKind.PI)
tau = Const(ConstKind.TAU)
e = Const(ConstKind.E)


class TestPriority:
    """Tests for node printing priority."""

    def test_atomic_values(self):
        """Constants, integers and functions are atomic."""
        assert priority(pi) is Priority.VALUE
        assert priority(Num(-3)) is Priority.VALUE
        assert priority(Sin(add(pi, e))) is Priority.VALUE

    def test_fractions_bind_like_products(self):
        """A non-integer literal prints with a slash."""
        assert priority(Num(Fraction(1, 2))) is Priority.MUL
        assert priority(Inverse(pi)) is Priority.MUL

    def test_operators(self):
        """Sums, products and powers have increasing priority."""
        assert priority(add(pi, e)) < priority(mul(pi, e)) < priority(Exp(pi, e))

    def test_unknown_node(self):
        """Non-nodes cannot be rendered."""
        with pytest.raises(TypeError):
            priority(3)


class TestRenderLeaves:
    """Tests for constants and literals."""

    def test_constants(self):
        """Constants print by name."""
        assert render(pi) == "pi"
        assert render(tau) == "tau"
        assert render(e) == "e"

    def test_literals(self):
        """Literals print as reduced fractions."""
        assert render(Num(42)) == "42"
        assert render(Num(Fraction(4, 6))) == "2/3"
        assert render(Num(-5)) == "-5"

    def test_base_hint_not_shown(self):
        """The display base is a hint for the output layer, not for render."""
        assert render(Num(255, 16)) == "255"


class TestRenderOperators:
    """Tests for sums and products."""

    def test_flat_sum(self):
        """n-ary sums print every child."""
        assert render(VarOp(VarOpKind.ADD, [Num(1), Num(2), Num(3)])) == "1 + 2 + 3"

    def test_product_in_sum(self):
        """Products bind tighter than sums."""
        assert render(add(mul(Num(2), pi), Num(3))) == "2 * pi + 3"

    def test_sum_in_product(self):
        """Sums inside products get parentheses."""
        assert render(mul(add(Num(1), pi), Num(2))) == "(1 + pi) * 2"

    def test_subtraction_shape(self):
        """sub builds a sum with a -1 coefficient."""
        assert render(sub(pi, e)) == "pi + -1 * e"

    def test_nested_same_kind(self):
        """A nested sum in a sum needs no parentheses."""
        assert render(add(add(Num(1), Num(2)), pi)) == "1 + 2 + pi"


class TestRenderDivision:
    """Tests for inverses and division."""

    def test_division(self):
        """An inverse after the first factor prints as a division."""
        assert render(div(pi, e)) == "pi / e"

    def test_product_divisor_is_not_wrapped(self):
        """Divisors use the product rule: products and fractions print bare."""
        assert render(div(pi, mul(Num(2), e))) == "pi / 2 * e"
        assert render(div(pi, Num(Fraction(2, 3)))) == "pi / 2/3"
        assert render(div(pi, Inverse(e))) == "pi / 1/e"

    def test_sum_divisor_is_wrapped(self):
        """Sums bind looser than division."""
        assert render(div(pi, add(pi, e))) == "pi / (pi + e)"

    def test_power_divisor(self):
        """Powers bind tighter than division."""
        assert render(div(pi, Exp(e, Num(2)))) == "pi / e^2"

    def test_inverse(self):
        """A standalone inverse prints as 1/x."""
        assert render(Inverse(pi)) == "1/pi"
        assert render(Inverse(add(pi, Num(1)))) == "1/(pi + 1)"
        assert render(Inverse(mul(Num(2), e))) == "1/2 * e"

    def test_leading_inverse(self):
        """An inverse in first position keeps its 1/x form."""
        assert render(mul(Inverse(pi), e)) == "1/pi * e"


class TestRenderPower:
    """Tests for exponentiation."""

    def test_simple(self):
        """Atomic operands need no parentheses."""
        assert render(Exp(pi, Num(2))) == "pi^2"

    def test_right_associative(self):
        """Nested powers are always parenthesized."""
        assert render(Exp(pi, Exp(e, Num(2)))) == "pi^(e^2)"
        assert render(Exp(Exp(pi, Num(2)), e)) == "(pi^2)^e"

    def test_fraction_base(self):
        """A fraction base is wrapped."""
        assert render(Exp(Num(Fraction(1, 2)), pi)) == "(1/2)^pi"

    def test_operator_operands(self):
        """Sums and products in a power are wrapped."""
        assert render(Exp(add(pi, Num(1)), mul(Num(2), e))) == "(pi + 1)^(2 * e)"


class TestRenderFunctions:
    """Tests for function application."""

    def test_atomic_argument(self):
        """Atomic arguments are separated by a space."""
        assert render(Sin(pi)) == "sin pi"
        assert render(Cos(Num(0))) == "cos 0"

    def test_compound_argument(self):
        """Anything else is parenthesized."""
        assert render(Tan(add(pi, Num(1)))) == "tan(pi + 1)"
        assert render(Sin(Num(Fraction(1, 2)))) == "sin(1/2)"
        assert render(Sin(Exp(pi, Num(2)))) == "sin(pi^2)"

    def test_nested_functions(self):
        """Functions are atomic themselves."""
        assert render(Sin(Sin(pi))) == "sin sin pi"

    def test_function_in_product(self):
        """A function application binds tighter than any operator."""
        assert render(mul(Num(2), Cos(tau))) == "2 * cos tau"
