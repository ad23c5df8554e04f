"""
Floating-point evaluation of expression trees.

evaluate() folds a tree into an EvalResult: a float approximation plus the
display base hint propagated from the literals the user typed. The hint
never affects the value; the output layer uses it to pick a radix.

Float semantics follow IEEE-754 doubles rather than Python's exception
behaviour: 1/0.0 is a signed infinity, domain errors give nan.
"""

import math
from fractions import Fraction
from typing import Callable, Dict, Optional

from .nodes import ConstKind, Const, Exp, Function, Inverse, Node, Num, VarOp
from .operators import nary_fold, spec_for

RatioToFloat = Callable[[Fraction], float]

CONSTANT_VALUES: Dict[ConstKind, float] = {
    ConstKind.PI: math.pi,
    ConstKind.TAU: math.tau,
    ConstKind.E: math.e,
}

FUNCTION_VALUES: Dict[str, Callable[[float], float]] = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
}


class EvalResult:
    """An approximate value and its preferred display base."""

    __slots__ = ("value", "display_base")

    def __init__(self, value: float, display_base: Optional[int] = None):
        self.value = value
        self.display_base = display_base

    def __eq__(self, other):
        if not isinstance(other, EvalResult):
            return NotImplemented
        same_value = self.value == other.value or (
            math.isnan(self.value) and math.isnan(other.value))
        return same_value and self.display_base == other.display_base

    def __hash__(self) -> int:
        return hash((self.value, self.display_base))

    def __repr__(self) -> str:
        return f"EvalResult(value={self.value!r}, display_base={self.display_base!r})"

    def to_dict(self) -> Dict:
        """Convert to a dictionary for JSON serialization."""
        return {"value": self.value, "display_base": self.display_base}


# ============================================================
# Base hints
# ============================================================

def combine_base(a: Optional[int], b: Optional[int]) -> Optional[int]:
    """
    Merge the display base hints of two operands.

    Decimal is the least interesting base and binary the most: a
    non-decimal hint beats 10, and 2 beats everything. Two other distinct
    bases keep the first operand's.

    Examples:
        combine_base(2, None)   # => 2
        combine_base(10, 16)    # => 16
        combine_base(2, 16)     # => 2
        combine_base(8, 16)     # => 8
    """
    if a is None:
        return b
    if b is None:
        return a
    if a == 10:
        return b
    if b == 10:
        return a
    if a == 2 or b == 2:
        return 2
    return a


fold_bases = nary_fold(None, combine_base)


# ============================================================
# Float helpers
# ============================================================

def ratio_to_float(value: Fraction) -> float:
    """
    Convert an exact rational to the nearest float.

    Magnitudes beyond the float range give a signed infinity instead of
    raising OverflowError.
    """
    try:
        return value.numerator / value.denominator
    except OverflowError:
        return -math.inf if value < 0 else math.inf


def _reciprocal(x: float) -> float:
    if x == 0.0:
        return math.copysign(math.inf, x)
    return 1.0 / x


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        odd_integer = exponent.is_integer() and int(exponent) % 2 == 1
        return -math.inf if base < 0 and odd_integer else math.inf
    except ValueError:
        if base == 0.0 and exponent < 0:
            # pole: 0^-n
            odd_integer = exponent.is_integer() and int(exponent) % 2 == 1
            return math.copysign(math.inf, base) if odd_integer else math.inf
        return math.nan


def _apply(func: Callable[[float], float], x: float) -> float:
    try:
        return func(x)
    except ValueError:
        # sin/cos/tan of an infinity
        return math.nan


# ============================================================
# Evaluation
# ============================================================

def evaluate(node: Node, ratio_to_float: RatioToFloat = ratio_to_float) -> EvalResult:
    """
    Approximate the value of a node.

    Args:
        node: The expression to evaluate
        ratio_to_float: Converter for exact literals; override to plug in a
            different rounding routine.

    Returns:
        EvalResult with the float value and the folded display base hint
    """
    if isinstance(node, Const):
        return EvalResult(CONSTANT_VALUES[node.kind], None)

    if isinstance(node, Num):
        return EvalResult(ratio_to_float(node.value), node.input_base)

    if isinstance(node, Inverse):
        inner = evaluate(node.child, ratio_to_float)
        return EvalResult(_reciprocal(inner.value), inner.display_base)

    if isinstance(node, VarOp):
        results = [evaluate(child, ratio_to_float) for child in node.children]
        value = spec_for(node.kind).fold(r.value for r in results)
        return EvalResult(value, fold_bases(r.display_base for r in results))

    if isinstance(node, Exp):
        a = evaluate(node.base, ratio_to_float)
        b = evaluate(node.exponent, ratio_to_float)
        return EvalResult(_power(a.value, b.value), combine_base(a.display_base, b.display_base))

    if isinstance(node, Function):
        inner = evaluate(node.child, ratio_to_float)
        return EvalResult(_apply(FUNCTION_VALUES[node.name], inner.value), inner.display_base)

    raise TypeError(f"Cannot evaluate {type(node).__name__}: {node!r}")
