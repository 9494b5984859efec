"""Passes that reshape a tree without changing what it denotes.

Flatten and Unflatten convert between nested binary chains of an associative
operator and a single n-ary `FlatCall`. The canonical passes sort the operands
of commutative operators by structural digest, which is the only place where
`a + b` and `b + a` become the same tree.
"""

import math
from functools import reduce

from ..frontend.ast_expressions import (
    ASSOCIATIVE_OPS,
    BinaryCall,
    Const,
    Expression,
    FlatCall,
)
from ..writer import indented_output
from .core import Pass, Rewrite, RewriteContext, run_passes, run_until_stable, transform


def _associative_op(expr: Expression) -> str | None:
    if isinstance(expr, (BinaryCall, FlatCall)) and expr.op in ASSOCIATIVE_OPS:
        return expr.op
    return None


def _flatten_tree(expr: Expression) -> Expression:
    # A child sharing its parent's associative operator leaves its operand
    # list on the results stack instead of a node; the parent splices it in.
    results: list[Expression | list[Expression]] = []
    stack: list[tuple[Expression, bool, bool]] = [(expr, False, False)]
    while stack:
        node, expanded, spliced = stack.pop()
        children = node.children
        op = _associative_op(node)
        if children and not expanded:
            stack.append((node, True, spliced))
            stack.extend(
                (child, False, op is not None and _associative_op(child) == op)
                for child in reversed(children)
            )
            continue

        parts = results[len(results) - len(children) :]
        del results[len(results) - len(children) :]
        if op is None:
            results.append(node.with_children(parts) if children else node)
            continue

        first = parts[0]
        operands = first if isinstance(first, list) else [first]
        for part in parts[1:]:
            if isinstance(part, list):
                operands.extend(part)
            else:
                operands.append(part)
        if spliced:
            results.append(operands)
        elif isinstance(node, FlatCall):
            results.append(node.with_children(operands))
        else:
            results.append(FlatCall(op, tuple(operands)))

    [flat] = results
    assert isinstance(flat, Expression)
    return flat


def flatten(expr: Expression, context: RewriteContext) -> Expression:
    return run_until_stable(expr, _flatten_tree, context, "Flatten")


def _unflatten_node(expr: Expression) -> Expression:
    if isinstance(expr, FlatCall):
        op = expr.op
        return reduce(lambda left, right: BinaryCall(op, left, right), expr.args)
    return expr


def unflatten(expr: Expression, context: RewriteContext) -> Expression:
    return run_until_stable(
        expr, lambda current: transform(current, _unflatten_node), context, "Unflatten"
    )


def _canonicalizer(op: str) -> Rewrite:
    def canonicalize(expr: Expression) -> Expression:
        if isinstance(expr, FlatCall) and expr.op == op:
            ordered = sorted(expr.args, key=lambda arg: arg.digest)
            return expr.with_children(ordered)
        if isinstance(expr, BinaryCall) and expr.op == op:
            if expr.left.digest > expr.right.digest:
                return BinaryCall(op, expr.right, expr.left)
        return expr

    return lambda expr: transform(expr, canonicalize)


_canonicalize_adds = _canonicalizer("+")
_canonicalize_muls = _canonicalizer("*")


def canonical_adds(expr: Expression, context: RewriteContext) -> Expression:
    return run_until_stable(expr, _canonicalize_adds, context, "CanonicalAdds")


def canonical_muls(expr: Expression, context: RewriteContext) -> Expression:
    return run_until_stable(expr, _canonicalize_muls, context, "CanonicalMuls")


def canonicalize(expr: Expression, context: RewriteContext) -> Expression:
    # Sorting products changes the digests that sums are sorted by (and the
    # other way around), so both run together until neither moves anything.
    return run_until_stable(
        expr,
        lambda current: canonical_muls(canonical_adds(current, context), context),
        context,
        "Canonicalize",
    )


def _fold_constants_node(expr: Expression) -> Expression:
    if not isinstance(expr, FlatCall):
        return expr

    args: list[Expression] = []
    for arg in expr.args:
        if isinstance(arg, FlatCall) and arg.op == expr.op:
            args.extend(arg.args)
        else:
            args.append(arg)

    values = [arg.value for arg in args if isinstance(arg, Const)]
    rest = [arg for arg in args if not isinstance(arg, Const)]
    if expr.op == "+":
        total, identity = sum(values), 0
    else:
        total, identity = math.prod(values), 1
        if total == 0:
            return Const(0)

    if total != identity:
        rest.insert(0, Const(total))
    if not rest:
        return Const(total)
    if len(rest) == 1:
        return rest[0]
    folded = FlatCall(expr.op, tuple(rest))
    return expr if folded == expr else folded


def fold_constants(expr: Expression, context: RewriteContext) -> Expression:
    return run_until_stable(
        expr,
        lambda current: transform(current, _fold_constants_node),
        context,
        "FoldConstants",
    )


FLATTEN = Pass("Flatten", flatten)
UNFLATTEN = Pass("Unflatten", unflatten)
CANONICALIZE = Pass("Canonicalize", canonicalize)
FOLD_CONSTANTS = Pass("FoldConstants", fold_constants)


def normalize_structure(expr: Expression, context: RewriteContext) -> Expression:
    """Flatten, fold (when folding constants), canonicalize, unflatten."""
    passes = [FLATTEN]
    if context.constants == "fold":
        passes.append(FOLD_CONSTANTS)
    passes += [CANONICALIZE, UNFLATTEN]
    with indented_output(context.writer):
        return run_passes(expr, passes, context)


NORMALIZE = Pass("Normalize", normalize_structure)
