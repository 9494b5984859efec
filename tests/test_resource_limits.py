from io import StringIO

import pytest

from symeq.equivalence import check_for_cli, equivalent
from symeq.frontend.errors import NestingTooDeepError, ParseError
from symeq.frontend.parser import MAX_NESTING, parse
from symeq.rewrite.core import NonConvergenceError, RewriteContext

from .helpers import assert_keywords_in_output


# ===== Wide Input =====
def test_long_sum_matches_its_reversal() -> None:
    names = [f"a{index}" for index in range(1_000)]
    assert equivalent(" + ".join(names), " + ".join(reversed(names)))


def test_long_sum_of_one_variable() -> None:
    total = " + ".join(["x"] * 400)
    assert equivalent(total, total)
    assert not equivalent(total, "x")


def test_repeated_product_of_sums_distributes_fully() -> None:
    product = " * ".join(["(a+b+c+d)"] * 5)
    reordered = " * ".join(["(d+c+b+a)"] * 5)
    stderr = StringIO()

    assert check_for_cli(product, reordered, stderr=stderr) is True
    assert stderr.getvalue() == ""


# ===== Deep Input =====
def test_redundant_parentheses_do_not_nest() -> None:
    wrapped = "(" * 300 + "x" + ")" * 300
    assert parse(wrapped) == parse("x")
    assert equivalent(wrapped, "x")


def test_deep_grouping_is_a_parse_error() -> None:
    source = "(x+" * 300 + "y" + ")" * 300
    with pytest.raises(NestingTooDeepError) as error:
        parse(source)

    assert isinstance(error.value, ParseError)
    assert error.value.position == 3 * MAX_NESTING


def test_grouping_up_to_the_limit_parses() -> None:
    depth = MAX_NESTING
    source = "(x+" * depth + "y" + ")" * depth
    flipped = "(" * depth + "y" + "+x)" * depth
    assert equivalent(source, flipped)


def test_cli_reports_deep_grouping_as_syntax_error() -> None:
    stderr = StringIO()
    source = "(x+" * 300 + "y" + ")" * 300

    assert check_for_cli(source, "x", stderr=stderr) is None
    assert_keywords_in_output(("syntax error", "nested"), stderr)


# ===== Expanded Constants =====
def test_expanded_constants_with_nested_differences() -> None:
    context = RewriteContext(constants="expand")
    source = "((3 - (1 + 2)) * ((2 - 2) * (1 * 3)))"
    assert equivalent(source, "0", context)


def test_large_constants_expand_into_long_chains() -> None:
    context = RewriteContext(constants="expand")
    assert equivalent("x + 2000", "1999 + x + 1", context)


def test_expansion_beyond_the_node_ceiling_is_refused() -> None:
    context = RewriteContext(constants="expand")
    with pytest.raises(NonConvergenceError, match="ExpandConst"):
        equivalent("x + 60000", "x", context)
