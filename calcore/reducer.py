"""
Deep structural reduction of expression trees.

reduce() rewrites a tree into a canonical, structurally comparable form:

    - n-ary operators are flattened: (1 + (2 + pi)) -> 1 + 2 + pi
    - exact literals are folded:     1 + 2 + pi     -> pi + 3
    - like terms are collected:      2*pi + 3*pi    -> 5 * pi
    - like factors are collected:    pi * pi^2      -> pi^3
    - exponent identities:           1^x -> 1, x^0 -> 1
    - literal inverses are folded:   1/(2/3)        -> 3/2
    - trig functions of integer multiples of pi resolve to exact values

Only rewrites that provably keep the value are applied; when the reducer
cannot tell, the node is left as it is.

Tracing:
    result, trace = Reducer().reduce(node, trace=True)
    print(trace.format("rules"))  # => "fold-numbers -> collect-terms"
"""

import logging
from typing import Dict, List, Mapping, Optional, Tuple, Type, Union

from .nodes import (
    Const, ConstKind, Cos, Exp, Function, Inverse, Node, Num, Sin, Tan,
    VarOp, VarOpKind, is_literal, minus_one, one, zero,
)
from .operators import spec_for
from .evaluator import fold_bases

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

PiTable = Mapping[Tuple[Type[Function], int], Num]


# ============================================================
# Trig values at integer multiples of pi
# ============================================================

# Keyed by (function class, k mod 2). The compat table keeps the
# historical sin(odd * pi) = 1 entry.
COMPAT_PI_TABLE: Dict[Tuple[Type[Function], int], Num] = {
    (Sin, 0): zero(),
    (Cos, 0): one(),
    (Tan, 0): zero(),
    (Sin, 1): one(),
    (Cos, 1): minus_one(),
    (Tan, 1): zero(),
}

EXACT_PI_TABLE: Dict[Tuple[Type[Function], int], Num] = {
    **COMPAT_PI_TABLE,
    (Sin, 1): zero(),
}


def _check_pi_table(table: PiTable) -> PiTable:
    for func in (Sin, Cos, Tan):
        for remainder in (0, 1):
            value = table.get((func, remainder))
            if not isinstance(value, Num):
                raise ValueError(
                    f"pi table needs a Num for ({func.__name__}, {remainder}), got {value!r}")
    return table


def _checked_mul(a: int, b: int) -> Optional[int]:
    product = a * b
    if product < INT64_MIN or product > INT64_MAX:
        return None
    return product


def pi_multiplier(node: Node) -> Optional[int]:
    """
    Find the integer k such that node equals k * pi.

    Returns None when the node is not recognisably an integer multiple of
    pi: fractional literals, pi^2, unknown subexpressions, or a multiplier
    outside the signed 64-bit range.

    Examples:
        pi_multiplier(Const(ConstKind.TAU))               # => 2
        pi_multiplier(mul(Num(-3), Const(ConstKind.PI)))  # => -3
        pi_multiplier(mul(Num("1/2"), Const(ConstKind.PI)))  # => None
    """
    if isinstance(node, Const):
        if node.kind is ConstKind.PI:
            return 1
        if node.kind is ConstKind.TAU:
            return 2
        return None

    if isinstance(node, Num):
        return 0 if node.value == 0 else None

    if not (isinstance(node, VarOp) and node.kind is VarOpKind.MUL):
        return None

    multiplier = 1
    has_pi = False
    for child in node.children:
        if isinstance(child, Num):
            if not child.is_integer:
                return None
            factor = child.value.numerator
            if factor < INT64_MIN or factor > INT64_MAX:
                return None
            multiplier = _checked_mul(multiplier, factor)
            if multiplier is None:
                return None
            continue

        sub = pi_multiplier(child)
        if sub is None:
            return None
        if sub == 0:
            return 0
        if has_pi:
            # pi^2 is not an integer multiple of pi
            return None
        multiplier = _checked_mul(multiplier, sub)
        if multiplier is None:
            return None
        has_pi = True

    return multiplier if has_pi else None


# ============================================================
# Tracing
# ============================================================

class ReductionStep:
    """A single rewrite applied during reduction."""

    __slots__ = ("rule", "before", "after")

    def __init__(self, rule: str, before: Node, after: Node):
        self.rule = rule
        self.before = before
        self.after = after

    def __repr__(self) -> str:
        return f"{self.rule}: {self.before} -> {self.after}"

    def to_dict(self) -> Dict:
        """Convert step to dictionary for serialization."""
        return {
            "rule": self.rule,
            "before": str(self.before),
            "after": str(self.after),
        }


class ReductionTrace:
    """
    A record of the rewrites applied while reducing one tree.

    Steps are recorded bottom-up, in the order the rewrites happened.

    Formatting options:
        - format("verbose"): multi-line, with before/after of each step
        - format("compact"): single line showing the rule chain
        - format("rules"): just the rule names
        - format("chain"): the node after each step
    """

    def __init__(self, initial: Optional[Node] = None):
        self.steps: List[ReductionStep] = []
        self.initial: Optional[Node] = initial
        self.final: Optional[Node] = None

    def add_step(self, step: ReductionStep):
        self.steps.append(step)

    def format(self, style: str = "verbose") -> str:
        """
        Format the trace.

        Raises:
            ValueError: If style is not one of verbose, compact, rules, chain
        """
        if style == "compact":
            return f"{self.initial} --[{', '.join(self.rules_applied())}]--> {self.final}"

        if style == "rules":
            rules = self.rules_applied()
            return " -> ".join(rules) if rules else "(no rules applied)"

        if style == "chain":
            parts = [str(self.initial)]
            for step in self.steps:
                parts.append(f"  --({step.rule})-->")
                parts.append(str(step.after))
            return "\n".join(parts)

        if style == "verbose":
            return repr(self)

        raise ValueError(f"Unknown trace style: {style}. "
                         "Use 'verbose', 'compact', 'rules' or 'chain'")

    def __repr__(self) -> str:
        lines = [f"Initial: {self.initial}"]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"  {i}. {step}")
        lines.append(f"Final: {self.final}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def __bool__(self) -> bool:
        """True if any rewrite was applied."""
        return len(self.steps) > 0

    def rules_applied(self) -> List[str]:
        """Rule names in order of application."""
        return [step.rule for step in self.steps]

    def rule_counts(self) -> Dict[str, int]:
        """Count how many times each rule was applied."""
        counts: Dict[str, int] = {}
        for step in self.steps:
            counts[step.rule] = counts.get(step.rule, 0) + 1
        return counts

    def summary(self) -> str:
        if not self.steps:
            return "No reduction performed"
        counts = self.rule_counts()
        most_used = max(counts.items(), key=lambda x: x[1])
        return (f"{len(self.steps)} steps using {len(counts)} unique rules. "
                f"Most used: {most_used[0]} ({most_used[1]}x)")

    def to_dict(self) -> Dict:
        """Convert trace to dictionary for JSON serialization."""
        return {
            "initial": str(self.initial),
            "final": str(self.final),
            "steps": [step.to_dict() for step in self.steps],
            "step_count": len(self.steps),
        }


# ============================================================
# Reduction helpers
# ============================================================

def flatten_children(children, kind: VarOpKind) -> List[Node]:
    """
    Splice nested operators of the same kind into one flat child list.

    Turns add(add(1, add(2)), 3) into add(1, 2, 3). The work list is
    expanded until no same-kind operator remains in it.
    """
    result: List[Node] = []
    remaining = list(children)
    while remaining:
        pending: List[Node] = []
        for child in remaining:
            if isinstance(child, VarOp) and child.kind is kind:
                pending.extend(child.children)
            else:
                result.append(child)
        remaining = pending
    return result


def fold_numbers(children, kind: VarOpKind) -> List[Node]:
    """
    Fold every literal child into one exact literal.

    Non-literal children keep their relative order. The folded literal is
    the trailing constant term of a sum and the leading coefficient of a
    product. Base hints fold with combine_base.
    """
    literals = [c for c in children if isinstance(c, Num)]
    others = [c for c in children if not isinstance(c, Num)]
    if not literals:
        return others

    value = spec_for(kind).fold_exact(c.value for c in literals)
    literal = Num(value, fold_bases(c.input_base for c in literals))
    if kind is VarOpKind.MUL:
        return [literal] + others
    return others + [literal]


def split_weight(child: Node, kind: VarOpKind) -> Tuple[Node, Node]:
    """
    Split a reduced child into a (key, weight) pair.

    For a sum, the weight is the literal coefficient of a product and the
    key the remaining factor(s); for a product, the weight is the exponent
    of a power and the key its base. Anything else has weight one.

    Raises:
        AssertionError: If a product with fewer than 2 factors appears in
            a sum, which reduction never produces.
    """
    if kind is VarOpKind.ADD:
        if isinstance(child, VarOp) and child.kind is VarOpKind.MUL:
            if len(child.children) < 2:
                raise AssertionError(
                    f"multiplication with less than 2 factors: {child!r}")
            head, rest = child.children[0], child.children[1:]
            if isinstance(head, Num):
                if len(rest) == 1:
                    return rest[0], head
                return VarOp(VarOpKind.MUL, rest), head
        return child, one()

    if isinstance(child, Exp):
        return child.base, child.exponent
    return child, one()


# ============================================================
# Reducer
# ============================================================

class Reducer:
    """
    Canonicalizes expression trees.

    The only configuration is the table of trig values at integer
    multiples of pi. Instances hold no per-call state and can be shared.

    Examples:
        reducer = Reducer()
        reducer(mul(pi, pi))                      # => Exp(pi, 2)

        exact = Reducer(pi_table=EXACT_PI_TABLE)
        exact(Sin(Const(ConstKind.PI)))           # => Num(0)
    """

    def __init__(self, pi_table: Optional[PiTable] = None):
        self.pi_table = _check_pi_table(pi_table if pi_table is not None else COMPAT_PI_TABLE)

    def with_pi_table(self, pi_table: PiTable) -> 'Reducer':
        """Return a new reducer using a different pi table."""
        return Reducer(pi_table=pi_table)

    def __call__(self, node: Node, **kwargs):
        return self.reduce(node, **kwargs)

    def __repr__(self) -> str:
        if self.pi_table == COMPAT_PI_TABLE:
            name = "compat"
        elif self.pi_table == EXACT_PI_TABLE:
            name = "exact"
        else:
            name = "custom"
        return f"Reducer(pi_table={name})"

    def reduce(self, node: Node, trace: bool = False
               ) -> Union[Node, Tuple[Node, ReductionTrace]]:
        """
        Reduce a node to canonical form.

        Args:
            node: The expression to reduce
            trace: If True, also return a ReductionTrace

        Returns:
            The reduced node, or (node, trace) if trace=True

        Raises:
            ZeroDivisionError: If the tree inverts an exact zero
        """
        if not trace:
            return self._reduce(node, None)
        rtrace = ReductionTrace(node)
        result = self._reduce(node, rtrace)
        rtrace.final = result
        return result, rtrace

    def _reduce(self, node: Node, rtrace: Optional[ReductionTrace]) -> Node:
        if isinstance(node, VarOp):
            return self._reduce_var_op(node, rtrace)
        if isinstance(node, Exp):
            return self._reduce_exp(node, rtrace)
        if isinstance(node, Inverse):
            return self._reduce_inverse(node, rtrace)
        if isinstance(node, Function):
            return self._reduce_function(node, rtrace)
        return node

    @staticmethod
    def _record(rtrace: Optional[ReductionTrace], rule: str, before: Node, after: Node):
        if rtrace is not None:
            rtrace.add_step(ReductionStep(rule, before, after))

    def _reduce_var_op(self, node: VarOp, rtrace: Optional[ReductionTrace]) -> Node:
        kind = node.kind
        spec = spec_for(kind)

        children = flatten_children(node.children, kind)
        if any(isinstance(c, VarOp) and c.kind is kind for c in node.children):
            self._record(rtrace, "flatten", node, VarOp(kind, children))

        reduced = [self._reduce(child, rtrace) for child in children]
        # a reduced child can itself be a same-kind operator
        children = flatten_children(reduced, kind)

        literal_count = sum(1 for c in children if isinstance(c, Num))
        folded = fold_numbers(children, kind)
        if literal_count > 1:
            self._record(rtrace, "fold-numbers", VarOp(kind, children), VarOp(kind, folded))

        groups: Dict[Node, List[Node]] = {}
        for child in folded:
            key, weight = split_weight(child, kind)
            groups.setdefault(key, []).append(weight)

        compressed: List[Node] = []
        collected = False
        changed = False
        for key, weights in groups.items():
            weight = self._combine_weights(weights, rtrace)
            if len(weights) > 1 or is_literal(weight, 0):
                collected = True
            if is_literal(weight, 0):
                continue
            # a unit weight emits the bare key and drops its base tag
            if is_literal(weight, 1):
                compressed.append(key)
                continue
            term = spec.compress(key, weight)
            if kind is VarOpKind.ADD:
                # the coefficient can merge with a power of the same literal
                # inside the key: 2 * 2^e -> 2^(e + 1)
                product = self._reduce(term, rtrace)
                changed = changed or product != term
                term = product
            compressed.append(term)

        if not compressed:
            result: Node = Num(spec.exact_identity)
        elif len(compressed) == 1:
            result = compressed[0]
        else:
            result = VarOp(kind, compressed)

        if collected:
            rule = "collect-terms" if kind is VarOpKind.ADD else "collect-factors"
            self._record(rtrace, rule, VarOp(kind, folded), result)
        if changed:
            # a rewritten term can now be a literal or match another key
            return self._reduce(result, rtrace)
        return result

    def _combine_weights(self, weights: List[Node], rtrace: Optional[ReductionTrace]) -> Node:
        # Coefficients and exponents of one key are always summed.
        weights = fold_numbers(weights, VarOpKind.ADD)
        if len(weights) == 1:
            return weights[0]
        return self._reduce(VarOp(VarOpKind.ADD, weights), rtrace)

    def _reduce_exp(self, node: Exp, rtrace: Optional[ReductionTrace]) -> Node:
        base = self._reduce(node.base, rtrace)
        exponent = self._reduce(node.exponent, rtrace)
        if is_literal(base, 1):
            result = one()
            self._record(rtrace, "exp-one-base", Exp(base, exponent), result)
            return result
        if is_literal(exponent, 0):
            result = one()
            self._record(rtrace, "exp-zero-power", Exp(base, exponent), result)
            return result
        return Exp(base, exponent)

    def _reduce_inverse(self, node: Inverse, rtrace: Optional[ReductionTrace]) -> Node:
        inner = self._reduce(node.child, rtrace)
        if not isinstance(inner, Num):
            return Inverse(inner)
        if inner.value == 0:
            raise ZeroDivisionError(f"division by zero: cannot invert {inner}")
        result = Num(1 / inner.value, inner.input_base)
        self._record(rtrace, "inverse-literal", Inverse(inner), result)
        return result

    def _reduce_function(self, node: Function, rtrace: Optional[ReductionTrace]) -> Node:
        func = type(node)
        inner = self._reduce(node.child, rtrace)
        multiplier = pi_multiplier(inner)
        if multiplier is None:
            return func(inner)

        remainder = multiplier % 2
        result = self.pi_table[(func, remainder)]
        if func is Sin and remainder == 1 and not is_literal(result, 0):
            logger.warning("sin(%s) reduced to %s through the odd pi-multiple table entry; "
                           "the exact value is 0", inner, result)
        self._record(rtrace, "trig-pi-multiple", func(inner), result)
        return result


_DEFAULT_REDUCER = Reducer()


def reduce(node: Node, trace: bool = False) -> Union[Node, Tuple[Node, ReductionTrace]]:
    """
    Reduce a node with the default (compat) reducer.

    Examples:
        reduce(add(add(Num(1), Num(2)), Num(3)))  # => Num(6)
        reduce(Inverse(Num(Fraction(2, 3))))      # => Num(3/2)
    """
    return _DEFAULT_REDUCER.reduce(node, trace=trace)
