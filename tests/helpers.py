from typing import TextIO

from symeq.frontend.ast_expressions import Const, Expression, Var
from symeq.frontend.parser import parse
from symeq.rewrite.core import RewriteContext
from symeq.rewrite.normalizer import normalize

a, b, c = Var("a"), Var("b"), Var("c")
x, y = Var("x"), Var("y")
zero, one, minus_one = Const(0), Const(1), Const(-1)


def assert_keywords_in_output(keywords: tuple[str, ...], stream: TextIO) -> None:
    getvalue = getattr(stream, "getvalue", None)
    assert callable(getvalue)
    output = str(getvalue()).lower()
    for keyword in keywords:
        assert keyword.lower() in output


def normalized(source: str, context: RewriteContext | None = None) -> Expression:
    return normalize(parse(source), context)
