"""
Operator descriptors for the n-ary operators.

Each VarOpKind gets an OperatorSpec: its identity element and binary
operation (in float and exact form), and its compression rule, which says
how a repeated term collapses. Collecting like terms (2*x + 3*x) and
collecting like factors (x^2 * x^3) are then the same algorithm run with a
different OperatorSpec:

    OPERATORS[VarOpKind.ADD].compress(x, Num(5))  # => 5 * x
    OPERATORS[VarOpKind.MUL].compress(x, Num(5))  # => x^5
"""

import operator
from fractions import Fraction
from typing import Callable, Dict, Iterable

from .nodes import Exp, Node, VarOp, VarOpKind


def nary_fold(identity, binary_op: Callable) -> Callable[[Iterable], object]:
    """Create an n-ary folder that starts from identity.

    Examples:
        nary_fold(0, operator.add)([1, 2, 3])  # => 6
        nary_fold(1, operator.mul)([])         # => 1
    """
    def handler(values: Iterable):
        result = identity
        for value in values:
            result = binary_op(result, value)
        return result
    return handler


def _compress_terms(term: Node, count: Node) -> Node:
    # k copies of term: coefficient first, splicing an existing product
    if isinstance(term, VarOp) and term.kind is VarOpKind.MUL:
        return VarOp(VarOpKind.MUL, (count,) + term.children)
    return VarOp(VarOpKind.MUL, (count, term))


def _compress_factors(factor: Node, count: Node) -> Node:
    return Exp(factor, count)


class OperatorSpec:
    """Identity, combination and compression rules of one n-ary operator."""

    __slots__ = ("kind", "symbol", "identity", "exact_identity",
                 "combine", "combine_exact", "fold", "fold_exact", "_compress")

    def __init__(self, kind: VarOpKind, symbol: str, identity: int,
                 binary_op: Callable, compress: Callable[[Node, Node], Node]):
        self.kind = kind
        self.symbol = symbol
        self.identity = float(identity)
        self.exact_identity = Fraction(identity)
        self.combine = binary_op
        self.combine_exact = binary_op
        self.fold = nary_fold(self.identity, binary_op)
        self.fold_exact = nary_fold(self.exact_identity, binary_op)
        self._compress = compress

    def compress(self, term: Node, count: Node) -> Node:
        """Collapse ``count`` copies of ``term`` into one node."""
        return self._compress(term, count)

    def __repr__(self) -> str:
        return f"OperatorSpec({self.kind.name}, {self.symbol!r})"


OPERATORS: Dict[VarOpKind, OperatorSpec] = {
    VarOpKind.ADD: OperatorSpec(VarOpKind.ADD, "+", 0, operator.add, _compress_terms),
    VarOpKind.MUL: OperatorSpec(VarOpKind.MUL, "*", 1, operator.mul, _compress_factors),
}


def spec_for(kind: VarOpKind) -> OperatorSpec:
    """Look up the OperatorSpec of a kind."""
    try:
        return OPERATORS[kind]
    except KeyError:
        raise KeyError(f"No operator registered for {kind!r}") from None
