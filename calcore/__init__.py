"""
calcore - the symbolic core of a calculator

Represents arithmetic and trigonometric expressions as trees over exact
rationals and the constants pi, tau and e, then reduces, evaluates and
renders them.

Quick Start:
    from calcore import E, reduce, evaluate, render

    node = E.add(E.mul(2, E.pi), E.mul(3, E.pi))
    render(node)            # => "2 * pi + 3 * pi"
    render(reduce(node))    # => "5 * pi"
    evaluate(node).value    # => 15.70796...

    evaluate(E.add(E.num(5, base=16), 1)).display_base  # => 16

Operations:
    reduce(node)      - canonical form: flattening, exact folding, like
                        term/factor collection, exponent identities and
                        exact trig values at integer multiples of pi
    evaluate(node)    - float approximation plus a display base hint
    render(node)      - text with minimal parentheses (also str(node))
"""

__version__ = "0.1.0"

# Node model
from .nodes import (
    Node,
    Const,
    ConstKind,
    Num,
    Inverse,
    VarOp,
    VarOpKind,
    Exp,
    Function,
    Sin,
    Cos,
    Tan,
    zero,
    one,
    minus_one,
    add,
    sub,
    mul,
    div,
    opposite,
)

# Operator descriptors
from .operators import OperatorSpec, OPERATORS, nary_fold, spec_for

# Evaluation
from .evaluator import EvalResult, combine_base, evaluate, ratio_to_float

# Reduction
from .reducer import (
    Reducer,
    ReductionStep,
    ReductionTrace,
    reduce,
    pi_multiplier,
    COMPAT_PI_TABLE,
    EXACT_PI_TABLE,
)

# Rendering
from .renderer import Priority, priority, render

# Node builder
from .builder import E

# Public API
__all__ = [
    # Version
    "__version__",
    # Nodes
    "Node",
    "Const",
    "ConstKind",
    "Num",
    "Inverse",
    "VarOp",
    "VarOpKind",
    "Exp",
    "Function",
    "Sin",
    "Cos",
    "Tan",
    # Constructors
    "zero",
    "one",
    "minus_one",
    "add",
    "sub",
    "mul",
    "div",
    "opposite",
    # Operators
    "OperatorSpec",
    "OPERATORS",
    "nary_fold",
    "spec_for",
    # Evaluation
    "EvalResult",
    "combine_base",
    "evaluate",
    "ratio_to_float",
    # Reduction
    "Reducer",
    "ReductionStep",
    "ReductionTrace",
    "reduce",
    "pi_multiplier",
    "COMPAT_PI_TABLE",
    "EXACT_PI_TABLE",
    # Rendering
    "Priority",
    "priority",
    "render",
    # Builder
    "E",
]
