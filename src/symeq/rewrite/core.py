from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Literal

from ..frontend.ast_expressions import Expression
from ..writer import IndentingWriter

ConstantStrategy = Literal["fold", "expand"]
Rewrite = Callable[[Expression], Expression]


class NonConvergenceError(RuntimeError):
    """A rewrite did not reach a fixed point within the configured limits."""

    def __init__(self, pass_name: str, message: str) -> None:
        super().__init__(f"{pass_name}: {message}")
        self.pass_name = pass_name


@dataclass
class RewriteContext:
    writer: IndentingWriter = field(default_factory=IndentingWriter)
    # "fold" combines integer constants arithmetically; "expand" rewrites each
    # constant n into n nested additions of 1 instead.
    constants: ConstantStrategy = "fold"
    max_iterations: int = 1_000
    max_nodes: int = 100_000

    def __post_init__(self) -> None:
        if self.constants not in ("fold", "expand"):
            raise ValueError(f"unknown constant strategy: {self.constants!r}")


@dataclass(frozen=True, slots=True)
class Pass:
    name: str
    run: Callable[[Expression, RewriteContext], Expression]

    def __call__(self, expr: Expression, context: RewriteContext) -> Expression:
        return self.run(expr, context)


def same_structure(first: Expression, second: Expression) -> bool:
    if first is second:
        return True
    return first.digest == second.digest and first == second


def check_size(expr: Expression, context: RewriteContext, pass_name: str) -> None:
    if expr.size > context.max_nodes:
        raise NonConvergenceError(
            pass_name,
            f"tree grew to {expr.size} nodes (limit {context.max_nodes})",
        )


def run_until_stable(
    expr: Expression,
    step: Rewrite,
    context: RewriteContext,
    name: str,
) -> Expression:
    previous = expr
    current = step(previous)
    iterations = 1
    while not same_structure(previous, current):
        check_size(current, context, name)
        if iterations >= context.max_iterations:
            raise NonConvergenceError(
                name, f"no fixed point after {iterations} iterations"
            )
        previous = current
        current = step(previous)
        iterations += 1
    return current


def run_passes(
    expr: Expression,
    passes: Iterable[Pass],
    context: RewriteContext,
) -> Expression:
    current = expr
    for rewrite_pass in passes:
        current = rewrite_pass(current, context)
        context.writer.trace(rewrite_pass.name, current)
    return current


def transform(expr: Expression, rewrite: Rewrite) -> Expression:
    """Apply `rewrite` to every node, children before their parent.

    Each node is rebuilt from its already rewritten children before `rewrite`
    sees it. The walk keeps its own stack, so tree depth is bounded only by
    `max_nodes`.
    """
    results: list[Expression] = []
    stack: list[tuple[Expression, bool]] = [(expr, False)]
    while stack:
        node, expanded = stack.pop()
        children = node.children
        if children and not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(children))
            continue
        rewritten = results[len(results) - len(children) :]
        del results[len(results) - len(children) :]
        results.append(rewrite(node.with_children(rewritten) if children else node))
    return results[0]
