from functools import reduce

from ..frontend.ast_expressions import (
    ADDITIVE_OPS,
    MULTIPLICATIVE_OPS,
    BinaryCall,
    Const,
    Expression,
    UnaryCall,
    negate,
)
from .core import (
    NonConvergenceError,
    Pass,
    Rewrite,
    RewriteContext,
    run_until_stable,
    transform,
)
from .structural import normalize_structure, unflatten


def _expand_sub_node(expr: Expression) -> Expression:
    if isinstance(expr, BinaryCall) and expr.op == "-":
        return BinaryCall("+", expr.left, negate(expr.right))
    return expr


def expand_sub(expr: Expression, context: RewriteContext) -> Expression:
    return transform(expr, _expand_sub_node)


def _ones_from_zero(value: int) -> Expression:
    expanded: Expression = Const(0)
    for _ in range(value):
        expanded = BinaryCall("+", expanded, Const(1))
    return expanded


def expand_const(expr: Expression, context: RewriteContext) -> Expression:
    def expand(node: Expression) -> Expression:
        if not isinstance(node, Const):
            return node
        magnitude = abs(node.value)
        if 2 * magnitude + 1 > context.max_nodes:
            raise NonConvergenceError(
                "ExpandConst", f"constant {node.value} is too large to expand"
            )
        expanded = _ones_from_zero(magnitude)
        return negate(expanded) if node.value < 0 else expanded

    return transform(expr, expand)


def _expand_unary_node(expr: Expression) -> Expression:
    if isinstance(expr, UnaryCall):
        return BinaryCall("*", Const(-1), expr.arg)
    return expr


def expand_unary(expr: Expression, context: RewriteContext) -> Expression:
    return transform(expr, _expand_unary_node)


def _additive_chain(expr: Expression) -> tuple[str | None, list[Expression]]:
    """Split a left-leaning chain of one additive operator into its operands.

    `((t0 - t1) - t2)` gives `("-", [t0, t1, t2])`; anything that is not a sum
    or difference gives `(None, [expr])`.
    """
    if not (isinstance(expr, BinaryCall) and expr.op in ADDITIVE_OPS):
        return None, [expr]
    op = expr.op
    operands: list[Expression] = []
    while isinstance(expr, BinaryCall) and expr.op == op:
        operands.append(expr.right)
        expr = expr.left
    operands.append(expr)
    operands.reverse()
    return op, operands


def _join(op: str | None, terms: list[Expression]) -> Expression:
    if op is None:
        [term] = terms
        return term
    return reduce(lambda left, right: BinaryCall(op, left, right), terms)


def _distributor(context: RewriteContext) -> Rewrite:
    def distribute(expr: Expression) -> Expression:
        if not (isinstance(expr, BinaryCall) and expr.op in MULTIPLICATIVE_OPS):
            return expr

        op = expr.op
        left_op, left_terms = _additive_chain(expr.left)
        # A divisor never distributes: a / (b + c) stays as it is.
        if op == "*":
            right_op, right_terms = _additive_chain(expr.right)
        else:
            right_op, right_terms = None, [expr.right]
        if left_op is None and right_op is None:
            return expr

        # Every left term meets every right term; refuse before building.
        rows, columns = len(left_terms), len(right_terms)
        grown = (
            2 * rows * columns
            - 1
            + columns * sum(term.size for term in left_terms)
            + rows * sum(term.size for term in right_terms)
        )
        if grown > context.max_nodes:
            raise NonConvergenceError(
                "Distributive",
                f"product would grow to {grown} nodes (limit {context.max_nodes})",
            )

        products = [
            _join(right_op, [BinaryCall(op, left, right) for right in right_terms])
            for left in left_terms
        ]
        return _join(left_op, products)

    return distribute


def distributive(expr: Expression, context: RewriteContext) -> Expression:
    distribute = _distributor(context)

    def step(current: Expression) -> Expression:
        distributed = transform(unflatten(current, context), distribute)
        context.writer.trace("Distribute", distributed)
        return normalize_structure(distributed, context)

    return run_until_stable(expr, step, context, "Distributive")


EXPAND_SUB = Pass("ExpandSub", expand_sub)
EXPAND_CONST = Pass("ExpandConst", expand_const)
EXPAND_UNARY = Pass("ExpandUnary", expand_unary)
DISTRIBUTIVE = Pass("Distributive", distributive)
