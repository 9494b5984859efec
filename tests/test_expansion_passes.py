import pytest

from symeq.frontend.ast_expressions import BinaryCall, Const, UnaryCall
from symeq.frontend.parser import parse
from symeq.rewrite.core import NonConvergenceError, RewriteContext
from symeq.rewrite.expansion import distributive, expand_const, expand_sub, expand_unary
from symeq.rewrite.structural import normalize_structure

from .helpers import a, b, c, minus_one, one, x, zero


# ===== ExpandSub =====
def test_expand_sub_rewrites_subtraction_as_added_negation() -> None:
    result = expand_sub(parse("a - b"), RewriteContext())
    assert result == BinaryCall("+", a, UnaryCall("-", b))


def test_expand_sub_reaches_nested_subtractions() -> None:
    result = expand_sub(parse("a - (b - c)"), RewriteContext())
    assert result == BinaryCall(
        "+", a, UnaryCall("-", BinaryCall("+", b, UnaryCall("-", c)))
    )


# ===== ExpandUnary =====
def test_expand_unary_multiplies_by_minus_one() -> None:
    assert expand_unary(parse("-x"), RewriteContext()) == BinaryCall("*", minus_one, x)


def test_expand_unary_handles_double_negation() -> None:
    result = expand_unary(parse("-(-x)"), RewriteContext())
    assert result == BinaryCall("*", minus_one, BinaryCall("*", minus_one, x))


# ===== ExpandConst =====
def test_expand_const_builds_additions_of_one() -> None:
    three = expand_const(Const(3), RewriteContext(constants="expand"))
    assert three == BinaryCall(
        "+", BinaryCall("+", BinaryCall("+", zero, one), one), one
    )


def test_expand_const_keeps_zero_and_negates_negatives() -> None:
    context = RewriteContext(constants="expand")
    assert expand_const(zero, context) == zero
    assert expand_const(Const(-1), context) == UnaryCall("-", BinaryCall("+", zero, one))


def test_expand_const_refuses_huge_constants() -> None:
    with pytest.raises(NonConvergenceError, match="ExpandConst"):
        expand_const(parse("x + 10"), RewriteContext(constants="expand", max_nodes=5))


# ===== Distributive =====
@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("a * (b + c)", "a*b + a*c"),
        ("(b + c) * a", "b*a + c*a"),
        ("(a + b) * (a + c)", "a*a + a*c + b*a + b*c"),
        ("(a + b) / c", "a/c + b/c"),
        ("x * (a * (b + c))", "x*a*b + x*a*c"),
    ],
)
def test_distribution(source: str, expected: str) -> None:
    context = RewriteContext()
    assert distributive(parse(source), context) == normalize_structure(parse(expected), context)


def test_divisor_does_not_distribute() -> None:
    context = RewriteContext()
    source = parse("a / (b + c)")
    assert distributive(source, context) == normalize_structure(source, context)


def test_distribution_respects_node_ceiling() -> None:
    source = parse("(a+b) * (c+x) * (a+x) * (b+c) * (a+c)")
    with pytest.raises(NonConvergenceError, match="Distributive"):
        distributive(source, RewriteContext(max_nodes=50))
