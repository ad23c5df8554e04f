"""
Node model for calcore.

An expression is a tree of immutable nodes over exact rationals and the
named constants pi, tau and e:

    Const(kind)              - pi, tau or e
    Num(value, input_base)   - exact Fraction, with the radix the user typed
    Inverse(child)           - 1/child
    VarOp(kind, children)    - n-ary addition or multiplication
    Exp(base, exponent)      - base^exponent
    Sin/Cos/Tan(child)       - trigonometric functions

Nodes compare and hash structurally, so whole subtrees can be used as
dictionary keys:

    add(Num(1), Const(ConstKind.PI)) == add(Num(1), Const(ConstKind.PI))  # => True
"""

from enum import Enum
from fractions import Fraction
from numbers import Rational
from typing import Iterable, Optional, Union

RationalLike = Union[int, Fraction, str]


class ConstKind(Enum):
    """A named mathematical constant."""

    PI = "pi"
    TAU = "tau"
    E = "e"


class VarOpKind(Enum):
    """A kind of operator that can take any number of children."""

    ADD = "add"
    MUL = "mul"


# ============================================================
# Node classes
# ============================================================

class Node:
    """
    Base class of every expression node.

    Subclasses define ``_key()``; equality and hashing are derived from it
    together with the concrete class, so two nodes are equal iff they are
    the same variant with recursively equal payloads.
    """

    __slots__ = ()

    def _key(self) -> tuple:
        raise NotImplementedError

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._key()))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} nodes are immutable")

    def __str__(self) -> str:
        from .renderer import render
        return render(self)


class Const(Node):
    """A named constant (pi, tau or e)."""

    __slots__ = ("kind",)

    def __init__(self, kind: ConstKind):
        if not isinstance(kind, ConstKind):
            raise TypeError(f"Const kind must be a ConstKind, got {kind!r}")
        object.__setattr__(self, "kind", kind)

    def _key(self) -> tuple:
        return (self.kind,)

    def __repr__(self) -> str:
        return f"Const({self.kind.name})"


class Num(Node):
    """
    An exact rational literal.

    Args:
        value: An int, Fraction or fraction string ("2/3"); stored as a
            Fraction, which keeps it in lowest terms.
        input_base: The radix the user wrote the literal in, or None for
            derived values.
    """

    __slots__ = ("value", "input_base")

    def __init__(self, value: RationalLike, input_base: Optional[int] = None):
        object.__setattr__(self, "value", to_fraction(value))
        object.__setattr__(self, "input_base", input_base)

    def _key(self) -> tuple:
        return (self.value.numerator, self.value.denominator, self.input_base)

    @property
    def is_integer(self) -> bool:
        return self.value.denominator == 1

    def __repr__(self) -> str:
        if self.input_base is None:
            return f"Num({self.value})"
        return f"Num({self.value}, base={self.input_base})"


class Inverse(Node):
    """Multiplicative inverse of its child."""

    __slots__ = ("child",)

    def __init__(self, child: Node):
        object.__setattr__(self, "child", _check_node(child))

    def _key(self) -> tuple:
        return (self.child,)

    def __repr__(self) -> str:
        return f"Inverse({self.child!r})"


class VarOp(Node):
    """
    An n-ary associative operator (addition or multiplication).

    Child order only matters for display; the reducer treats the children
    as a multiset.
    """

    __slots__ = ("kind", "children")

    def __init__(self, kind: VarOpKind, children: Iterable[Node]):
        if not isinstance(kind, VarOpKind):
            raise TypeError(f"VarOp kind must be a VarOpKind, got {kind!r}")
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "children", tuple(_check_node(c) for c in children))

    def _key(self) -> tuple:
        return (self.kind, self.children)

    def __repr__(self) -> str:
        inner = ", ".join(repr(c) for c in self.children)
        return f"VarOp({self.kind.name}, [{inner}])"


class Exp(Node):
    """Exponentiation, right-associative when printed."""

    __slots__ = ("base", "exponent")

    def __init__(self, base: Node, exponent: Node):
        object.__setattr__(self, "base", _check_node(base))
        object.__setattr__(self, "exponent", _check_node(exponent))

    def _key(self) -> tuple:
        return (self.base, self.exponent)

    def __repr__(self) -> str:
        return f"Exp({self.base!r}, {self.exponent!r})"


class Function(Node):
    """A unary function application; subclasses set ``name``."""

    __slots__ = ("child",)
    name = ""

    def __init__(self, child: Node):
        object.__setattr__(self, "child", _check_node(child))

    def _key(self) -> tuple:
        return (self.child,)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.child!r})"


class Sin(Function):
    __slots__ = ()
    name = "sin"


class Cos(Function):
    __slots__ = ()
    name = "cos"


class Tan(Function):
    __slots__ = ()
    name = "tan"


# ============================================================
# Helpers
# ============================================================

def to_fraction(value: RationalLike) -> Fraction:
    """
    Convert an int, Fraction or fraction string to a Fraction.

    Floats are rejected: they are not exact, and a calculator literal
    should reach the core already converted to a rational.

    Raises:
        TypeError: If value is not a rational type
        ValueError: If a string does not describe a rational
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Expected an exact rational, got {type(value).__name__}: {value!r}")
    if isinstance(value, (Rational, str)):
        return Fraction(value)
    raise TypeError(f"Expected an exact rational, got {type(value).__name__}: {value!r}")


def _check_node(value) -> Node:
    if not isinstance(value, Node):
        raise TypeError(f"Expected a Node, got {type(value).__name__}: {value!r}")
    return value


def is_literal(node: Node, value: RationalLike) -> bool:
    """True if node is a Num equal to value, whatever its base tag."""
    return isinstance(node, Num) and node.value == to_fraction(value)


# ============================================================
# Constructors
# ============================================================

def zero() -> Num:
    return Num(0)


def one() -> Num:
    return Num(1)


def minus_one() -> Num:
    return Num(-1)


def _op(kind: VarOpKind, a: Node, b: Node) -> VarOp:
    return VarOp(kind, (a, b))


def add(a: Node, b: Node) -> VarOp:
    """a + b as a two-child addition."""
    return _op(VarOpKind.ADD, a, b)


def sub(a: Node, b: Node) -> VarOp:
    """a - b, built as a + (-1 * b)."""
    return add(a, opposite(b))


def mul(a: Node, b: Node) -> VarOp:
    """a * b as a two-child multiplication."""
    return _op(VarOpKind.MUL, a, b)


def div(a: Node, b: Node) -> VarOp:
    """a / b, built as a * Inverse(b)."""
    return mul(a, Inverse(b))


def opposite(node: Node) -> VarOp:
    """-node, built as -1 * node."""
    return mul(minus_one(), node)
