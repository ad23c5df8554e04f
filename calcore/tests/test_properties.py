"""Properties every reduction must satisfy, checked over a corpus of trees."""

import pytest
from calcore import (
    EXACT_PI_TABLE, Const, ConstKind, Cos, Exp, Inverse, Num, Reducer, Sin, Tan,
    VarOp, VarOpKind, add, div, evaluate, mul, opposite, reduce, sub,
)

pi = Const(ConstKind.PI)
tau = Const(ConstKind.TAU)
e = Const(ConstKind.E)

CORPUS = [
    add(mul(Num(2), pi), mul(Num(3), pi)),
    mul(pi, pi),
    add(add(Num(1), Num(2)), pi),
    sub(pi, e),
    div(pi, Num(2)),
    Tan(mul(Num(-7), pi)),
    add(Sin(e), Sin(e)),
    mul(add(pi, e), add(pi, e)),
    add(mul(pi, e), mul(e, pi)),
    mul(Exp(pi, e), Exp(pi, e)),
    add(mul(mul(Num(2), pi), e), mul(mul(Num(3), pi), e)),
    Exp(add(pi, pi), add(Num(1), Num(1))),
    Inverse(add(e, e)),
    div(pi, mul(Num(2), e)),
    Cos(add(pi, pi)),
    add(VarOp(VarOpKind.MUL, [add(pi, e)]), pi),
    mul(Exp(pi, Num(2)), pi),
    mul(mul(Num(2), Inverse(Num(2))), pi),
    add(mul(Num(2), pi), mul(Num(-1), pi)),
    Cos(mul(Num(-3), pi)),
    Sin(mul(Num(3), tau)),
    Exp(Num(1, 16), add(pi, e)),
    add(Num(1, 16), Num(2, 2)),
    add(Exp(Num(2), e), Exp(Num(2), e)),
    VarOp(VarOpKind.ADD, [mul(pi, Exp(Num(3), e))] * 3),
    add(add(Exp(Num(2), Num(-1)), Exp(Num(2), Num(-1))), Num(3)),
]


@pytest.mark.parametrize("node", CORPUS, ids=str)
def test_reduce_is_idempotent(node):
    """Reducing a reduced tree changes nothing."""
    once = reduce(node)
    assert reduce(once) == once


@pytest.mark.parametrize("node", CORPUS, ids=str)
def test_reduce_preserves_value(node):
    """Reduction never changes the evaluated value."""
    before = evaluate(node).value
    after = evaluate(reduce(node)).value
    assert after == pytest.approx(before, rel=1e-9, abs=1e-9)


@pytest.mark.parametrize("multiple", [-5, -1, 1, 3, 7])
def test_exact_table_preserves_sine_value(multiple):
    """With the exact table, sine at odd multiples of pi keeps its value."""
    node = Sin(mul(Num(multiple), pi))
    reduced = Reducer(pi_table=EXACT_PI_TABLE)(node)
    assert reduced == Num(0)
    assert evaluate(reduced).value == pytest.approx(evaluate(node).value, abs=1e-9)


@pytest.mark.parametrize("x", [pi, e, Sin(e), Exp(pi, e), mul(Num(2), pi), mul(pi, e)],
                         ids=str)
def test_term_minus_itself_is_zero(x):
    """x + (-1 * x) reduces to 0."""
    assert reduce(add(x, opposite(x))) == Num(0)


@pytest.mark.parametrize("x", [pi, tau, Sin(e), add(pi, e)], ids=str)
def test_factor_times_reciprocal_is_one(x):
    """x * x^-1 reduces to 1."""
    assert reduce(mul(x, Exp(x, Num(-1)))) == Num(1)


@pytest.mark.parametrize("a,b", [
    (Num(1), Num(2)),
    (pi, e),
    (Num(3), mul(Num(2), pi)),
], ids=str)
def test_grouping_does_not_matter(a, b):
    """Different groupings of the same sum reduce alike."""
    c = Num(5)
    assert reduce(add(add(a, b), c)) == reduce(add(a, add(b, c)))
    assert reduce(mul(mul(a, b), c)) == reduce(mul(a, mul(b, c)))


@pytest.mark.parametrize("node", CORPUS, ids=str)
def test_reduced_trees_are_flat(node):
    """No reduced operator has a child of its own kind."""
    def check(n):
        if isinstance(n, VarOp):
            assert all(not (isinstance(c, VarOp) and c.kind is n.kind) for c in n.children)
            assert len(n.children) >= 2
            for c in n.children:
                check(c)
        elif isinstance(n, Exp):
            check(n.base)
            check(n.exponent)
        elif isinstance(n, (Inverse, Sin, Cos, Tan)):
            check(n.child)

    check(reduce(node))


@pytest.mark.parametrize("x", [pi, e, Sin(e), mul(pi, e), Exp(tau, e)], ids=str)
def test_mixed_numeric_folding(x):
    """1 + 2 + x has exactly two terms, one of them the literal 3."""
    result = reduce(VarOp(VarOpKind.ADD, [Num(1), Num(2), x]))
    assert isinstance(result, VarOp)
    assert len(result.children) == 2
    assert Num(3) in result.children


@pytest.mark.parametrize("x", [pi, e, Sin(e), add(pi, e), Inverse(e)], ids=str)
def test_like_factor_collection(x):
    """x * x is x^2 for any non-numeric x."""
    assert reduce(mul(x, x)) == Exp(reduce(x), Num(2))
