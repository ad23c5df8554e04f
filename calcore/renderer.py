"""
Text rendering of expression trees with minimal parentheses.

Every node has a Priority (ADD < MUL < EXP < VALUE). A child printed in a
parent context of priority P gets parentheses when its own priority is
lower than P, or lower-or-equal in a right-associative position (either
side of a power). A divisor follows the plain product rule, so only sums
are wrapped:

    render(add(mul(Num(2), pi), Num(3)))  # => "2 * pi + 3"
    render(mul(add(Num(1), pi), Num(2)))  # => "(1 + pi) * 2"
    render(Exp(pi, Exp(pi, Num(2))))      # => "pi^(pi^2)"
    render(div(pi, add(pi, Num(1))))      # => "pi / (pi + 1)"
"""

from enum import IntEnum
from typing import List

from .nodes import Const, Exp, Function, Inverse, Node, Num, VarOp, VarOpKind
from .operators import spec_for


class Priority(IntEnum):
    """Binding strength of a node when printed."""

    ADD = 0
    MUL = 1
    EXP = 2
    VALUE = 3


def priority(node: Node) -> Priority:
    """
    Get the printing priority of a node.

    Integer literals, constants and function applications are atomic
    values. A non-integer literal prints with a division sign, so it binds
    like a product, and so does an Inverse.
    """
    if isinstance(node, (Const, Function)):
        return Priority.VALUE
    if isinstance(node, Num):
        return Priority.VALUE if node.is_integer else Priority.MUL
    if isinstance(node, Inverse):
        return Priority.MUL
    if isinstance(node, VarOp):
        return Priority.ADD if node.kind is VarOpKind.ADD else Priority.MUL
    if isinstance(node, Exp):
        return Priority.EXP
    raise TypeError(f"Cannot render {type(node).__name__}: {node!r}")


def _with_paren(node: Node, context: Priority, right_assoc: bool = False,
                separate: bool = False) -> str:
    prio = priority(node)
    needs_paren = prio <= context if right_assoc else prio < context
    text = render(node)
    if needs_paren:
        return f"({text})"
    if separate:
        return f" {text}"
    return text


def _render_var_op(node: VarOp) -> str:
    context = priority(node)
    symbol = spec_for(node.kind).symbol
    parts: List[str] = []
    for index, child in enumerate(node.children):
        if index == 0:
            parts.append(_with_paren(child, context))
        elif node.kind is VarOpKind.MUL and isinstance(child, Inverse):
            # "a / b" rather than "a * 1/b"
            parts.append(" / " + _with_paren(child.child, Priority.MUL))
        else:
            parts.append(f" {symbol} " + _with_paren(child, context))
    return "".join(parts)


def render(node: Node) -> str:
    """
    Convert a node to human-readable text.

    Examples:
        render(Num(Fraction(2, 3)))        # => "2/3"
        render(Sin(pi))                    # => "sin pi"
        render(Sin(add(Num(1), pi)))       # => "sin(1 + pi)"
        render(div(pi, mul(Num(2), e)))    # => "pi / 2 * e"
    """
    if isinstance(node, Const):
        return node.kind.value
    if isinstance(node, Num):
        return str(node.value)
    if isinstance(node, Inverse):
        return "1/" + _with_paren(node.child, Priority.MUL)
    if isinstance(node, VarOp):
        return _render_var_op(node)
    if isinstance(node, Exp):
        return (_with_paren(node.base, Priority.EXP, right_assoc=True)
                + "^"
                + _with_paren(node.exponent, Priority.EXP, right_assoc=True))
    if isinstance(node, Function):
        return node.name + _with_paren(node.child, Priority.VALUE, separate=True)
    raise TypeError(f"Cannot render {type(node).__name__}: {node!r}")
