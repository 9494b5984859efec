import sys
from typing import TextIO

from .frontend.ast_expressions import Expression
from .frontend.errors import ParseError
from .frontend.parser import parse
from .rewrite.core import NonConvergenceError, RewriteContext, same_structure
from .rewrite.normalizer import normalize


def normal_form(source: str, context: RewriteContext | None = None) -> Expression:
    return normalize(parse(source), context)


def equivalent(
    first: str,
    second: str,
    context: RewriteContext | None = None,
) -> bool:
    """Whether both expressions rewrite to the same normal form.

    Parse errors propagate before any rewriting happens. A `False` result only
    means the normal forms differ; the passes are sound, not complete.
    """
    context = context or RewriteContext()
    first_expr = parse(first)
    second_expr = parse(second)
    return same_structure(normalize(first_expr, context), normalize(second_expr, context))


def check_for_cli(
    first: str,
    second: str,
    context: RewriteContext | None = None,
    stderr: TextIO | None = None,
) -> bool | None:
    stream = stderr if stderr is not None else sys.stderr

    try:
        return equivalent(first, second, context)
    except ParseError as error:
        print(f"Syntax error: {error}", file=stream)
        return None
    except NonConvergenceError as error:
        print(f"Could not determine equivalence: {error}", file=stream)
        return None
