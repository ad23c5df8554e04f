"""
Node builder for calcore.

E builds expression trees programmatically. It is a convenience for code
and tests, not a text parser: every helper goes through the binary
constructors, so the trees it builds are shaped like a parser's output.

Examples:
    from calcore import E

    E.add(1, 2, E.pi)            # add(add(Num(1), Num(2)), pi)
    E.mul(2, E.sin(E.tau))       # mul(Num(2), Sin(tau))
    E.num(255, base=16)          # Num(255, base=16)
    E.div(1, 3)                  # mul(Num(1), Inverse(Num(3)))
"""

from functools import reduce as _fold
from typing import Optional, Union

from .nodes import (
    Const, ConstKind, Cos, Exp, Inverse, Node, Num, RationalLike, Sin, Tan,
    add, div, mul, opposite, sub,
)

Operand = Union[Node, RationalLike]


def as_node(value: Operand) -> Node:
    """Wrap ints, Fractions and fraction strings in a Num; pass nodes through."""
    if isinstance(value, Node):
        return value
    return Num(value)


class _NodeBuilder:
    """
    Node builder.

    Constants are attributes (E.pi, E.tau, E.e); everything else is a
    method taking nodes or rationals.
    """

    pi = Const(ConstKind.PI)
    tau = Const(ConstKind.TAU)
    e = Const(ConstKind.E)

    def const(self, name: str) -> Const:
        """
        Look up a named constant.

        Example:
            E.const("tau") -> Const(TAU)
        """
        try:
            return Const(ConstKind(name.lower()))
        except ValueError:
            names = ", ".join(kind.value for kind in ConstKind)
            raise ValueError(f"Unknown constant: {name!r}. Known: {names}") from None

    def num(self, value: RationalLike, base: Optional[int] = None) -> Num:
        """
        Create a literal, optionally tagged with the radix it was typed in.

        Example:
            E.num("2/3") -> Num(2/3)
            E.num(5, base=2) -> Num(5, base=2)
        """
        return Num(value, base)

    def add(self, first: Operand, *rest: Operand) -> Node:
        """Left-nested sum: E.add(a, b, c) -> add(add(a, b), c)."""
        return _fold(add, [as_node(x) for x in rest], as_node(first))

    def mul(self, first: Operand, *rest: Operand) -> Node:
        """Left-nested product: E.mul(a, b, c) -> mul(mul(a, b), c)."""
        return _fold(mul, [as_node(x) for x in rest], as_node(first))

    def sub(self, a: Operand, b: Operand) -> Node:
        return sub(as_node(a), as_node(b))

    def div(self, a: Operand, b: Operand) -> Node:
        return div(as_node(a), as_node(b))

    def neg(self, x: Operand) -> Node:
        return opposite(as_node(x))

    def inv(self, x: Operand) -> Inverse:
        return Inverse(as_node(x))

    def pow(self, base: Operand, exponent: Operand) -> Exp:
        return Exp(as_node(base), as_node(exponent))

    def sin(self, x: Operand) -> Sin:
        return Sin(as_node(x))

    def cos(self, x: Operand) -> Cos:
        return Cos(as_node(x))

    def tan(self, x: Operand) -> Tan:
        return Tan(as_node(x))

    def __repr__(self) -> str:
        return "E (node builder)"


# Singleton instance
E = _NodeBuilder()
