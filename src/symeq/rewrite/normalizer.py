from ..frontend.ast_expressions import Expression
from .cleanup import CLEAN_NEG_ONES, CLEAN_ZEROS_ONES, NEG_ONES_TO_UNARY, REDUCE_ADD_NEGATES
from .core import Pass, RewriteContext, run_passes
from .expansion import DISTRIBUTIVE, EXPAND_CONST, EXPAND_SUB, EXPAND_UNARY
from .structural import NORMALIZE


def pipeline(context: RewriteContext) -> list[Pass]:
    """The ordered passes whose output is the normal form."""
    passes = [EXPAND_SUB]
    if context.constants == "expand":
        passes.append(EXPAND_CONST)
    passes += [
        EXPAND_UNARY,
        DISTRIBUTIVE,
        CLEAN_NEG_ONES,
        CLEAN_ZEROS_ONES,
        NEG_ONES_TO_UNARY,
        REDUCE_ADD_NEGATES,
        NORMALIZE,
    ]
    return passes


def normalize(expr: Expression, context: RewriteContext | None = None) -> Expression:
    context = context or RewriteContext()
    context.writer.trace("Input", expr)
    return run_passes(expr, pipeline(context), context)
