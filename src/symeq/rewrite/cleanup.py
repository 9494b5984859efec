from collections import Counter

from ..frontend.ast_expressions import (
    BinaryCall,
    Const,
    Expression,
    FlatCall,
    StructuralInvariantViolation,
    UnaryCall,
    is_const,
    negate,
)
from .core import Pass, RewriteContext, run_until_stable, transform
from .structural import canonical_muls, flatten, unflatten


def _clean_zeros_ones_node(expr: Expression) -> Expression:
    if isinstance(expr, FlatCall):
        raise StructuralInvariantViolation(
            f"CleanZerosOnes expects unflattened input, got flat call '{expr}'"
        )
    if not isinstance(expr, BinaryCall):
        return expr

    left, right = expr.left, expr.right
    if expr.op == "*":
        if is_const(left, 0) or is_const(right, 0):
            return Const(0)
        if is_const(left, 1):
            return right
        if is_const(right, 1):
            return left
    elif expr.op == "+":
        if is_const(left, 0):
            return right
        if is_const(right, 0):
            return left
    elif expr.op == "-":
        if is_const(right, 0):
            return left
        if is_const(left, 0):
            return negate(right)

    return expr


def clean_zeros_ones(expr: Expression, context: RewriteContext) -> Expression:
    return run_until_stable(
        expr,
        lambda current: transform(current, _clean_zeros_ones_node),
        context,
        "CleanZerosOnes",
    )


def _clean_neg_ones_node(expr: Expression) -> Expression:
    if not (isinstance(expr, FlatCall) and expr.op == "*"):
        return expr

    # Sorted products keep equal factors adjacent, so the -1s form one run.
    neg_ones = sum(1 for arg in expr.args if is_const(arg, -1))
    if neg_ones == 0:
        return expr
    rest = tuple(arg for arg in expr.args if not is_const(arg, -1))
    sign = Const(-1) if neg_ones % 2 else Const(1)
    # The 1 placeholder keeps the call at two or more arguments when the
    # product was made only of -1s; CleanZerosOnes removes it afterwards.
    return FlatCall("*", (sign, Const(1)) + rest)


def clean_neg_ones(expr: Expression, context: RewriteContext) -> Expression:
    prepared = canonical_muls(flatten(expr, context), context)
    return unflatten(transform(prepared, _clean_neg_ones_node), context)


def _neg_ones_to_unary_node(expr: Expression) -> Expression:
    if not (isinstance(expr, FlatCall) and expr.op == "*"):
        return expr

    for index, arg in enumerate(expr.args):
        if isinstance(arg, Const) and arg.value < 0:
            break
    else:
        return expr

    rest = list(expr.args[:index] + expr.args[index + 1 :])
    if arg.value != -1:
        rest.insert(0, Const(-arg.value))
    return negate(rest[0] if len(rest) == 1 else FlatCall("*", tuple(rest)))


def neg_ones_to_unary(expr: Expression, context: RewriteContext) -> Expression:
    return run_until_stable(
        flatten(expr, context),
        lambda current: transform(current, _neg_ones_to_unary_node),
        context,
        "NegOnesToUnary",
    )


def _negated_term(expr: Expression) -> Expression | None:
    if isinstance(expr, UnaryCall):
        return expr.arg
    if isinstance(expr, Const) and expr.value < 0:
        return Const(-expr.value)
    return None


def _reduce_add_negates_node(expr: Expression) -> Expression:
    if not (isinstance(expr, FlatCall) and expr.op == "+"):
        return expr

    negated: Counter[Expression] = Counter()
    plain: Counter[Expression] = Counter()
    for arg in expr.args:
        term = _negated_term(arg)
        if term is None:
            plain[arg] += 1
        else:
            negated[term] += 1

    cancelled = Counter(
        {term: min(count, plain[term]) for term, count in negated.items() if plain[term]}
    )
    if not cancelled:
        return expr

    pending_negated, pending_plain = cancelled.copy(), cancelled.copy()
    kept: list[Expression] = []
    for arg in expr.args:
        term = _negated_term(arg)
        pending, key = (pending_plain, arg) if term is None else (pending_negated, term)
        if pending[key] > 0:
            pending[key] -= 1
        else:
            kept.append(arg)

    if not kept:
        return Const(0)
    if len(kept) == 1:
        return kept[0]
    return FlatCall("+", tuple(kept))


def reduce_add_negates(expr: Expression, context: RewriteContext) -> Expression:
    return run_until_stable(
        flatten(expr, context),
        lambda current: transform(current, _reduce_add_negates_node),
        context,
        "ReduceAddNegates",
    )


CLEAN_ZEROS_ONES = Pass("CleanZerosOnes", clean_zeros_ones)
CLEAN_NEG_ONES = Pass("CleanNegOnes", clean_neg_ones)
NEG_ONES_TO_UNARY = Pass("NegOnesToUnary", neg_ones_to_unary)
REDUCE_ADD_NEGATES = Pass("ReduceAddNegates", reduce_add_negates)
