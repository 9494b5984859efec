from dataclasses import dataclass, field
from hashlib import blake2b
from typing import Literal as TypingLiteral
from typing import Sequence

BinaryOp = TypingLiteral["+", "-", "*", "/"]
UnaryOp = TypingLiteral["-"]
FlatOp = TypingLiteral["+", "*"]

ADDITIVE_OPS: frozenset[str] = frozenset({"+", "-"})
MULTIPLICATIVE_OPS: frozenset[str] = frozenset({"*", "/"})
# Only these are ever flattened or reordered.
ASSOCIATIVE_OPS: frozenset[str] = frozenset({"+", "*"})

_DIGEST_SIZE = 16


class StructuralInvariantViolation(AssertionError):
    """A tree was built or rewritten in a shape the passes never produce."""


def _digest(tag: str, payload: str, children: tuple["Expression", ...] = ()) -> int:
    hasher = blake2b(digest_size=_DIGEST_SIZE)
    hasher.update(f"{tag}:{len(payload)}:{payload}".encode("utf-8"))
    for child in children:
        hasher.update(child.digest.to_bytes(_DIGEST_SIZE, "big"))
    return int.from_bytes(hasher.digest(), "big")


class Expression:
    """Base of the expression tree.

    Trees can be tens of thousands of nodes deep (a long sum parses into a
    left-leaning chain), so nothing here recurses: equality and rendering walk
    the tree with an explicit stack, and `digest`/`size` are computed once per
    node from the children's own values.
    """

    # Filled in by each node's __post_init__ from its own content and its
    # children's digests, so equal trees always carry equal digests.
    digest: int
    size: int

    @property
    def children(self) -> tuple["Expression", ...]:
        return ()

    def with_children(self, children: Sequence["Expression"]) -> "Expression":
        return self

    def _label(self) -> object:
        raise NotImplementedError

    def _render(self, parts: list[str]) -> str:
        raise NotImplementedError

    def __hash__(self) -> int:
        return self.digest

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Expression):
            return NotImplemented
        pending: list[tuple[Expression, Expression]] = [(self, other)]
        while pending:
            first, second = pending.pop()
            if first is second:
                continue
            if type(first) is not type(second) or first.digest != second.digest:
                return False
            if first._label() != second._label():
                return False
            first_children, second_children = first.children, second.children
            if len(first_children) != len(second_children):
                return False
            pending.extend(zip(first_children, second_children))
        return True

    def __str__(self) -> str:
        rendered: list[str] = []
        stack: list[tuple[Expression, bool]] = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            children = node.children
            if children and not expanded:
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(children))
                continue
            parts = rendered[len(rendered) - len(children) :]
            del rendered[len(rendered) - len(children) :]
            rendered.append(node._render(parts))
        return rendered[0]


@dataclass(frozen=True, slots=True, eq=False)
class Const(Expression):
    value: int
    digest: int = field(init=False, repr=False)
    size: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "digest", _digest("const", str(self.value)))
        object.__setattr__(self, "size", 1)

    def _label(self) -> object:
        return self.value

    def _render(self, parts: list[str]) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True, eq=False)
class Var(Expression):
    name: str
    digest: int = field(init=False, repr=False)
    size: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "digest", _digest("var", self.name))
        object.__setattr__(self, "size", 1)

    def _label(self) -> object:
        return self.name

    def _render(self, parts: list[str]) -> str:
        return self.name


@dataclass(frozen=True, slots=True, eq=False)
class UnaryCall(Expression):
    op: UnaryOp
    arg: Expression
    digest: int = field(init=False, repr=False)
    size: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "digest", _digest("unary", self.op, (self.arg,)))
        object.__setattr__(self, "size", 1 + self.arg.size)

    @property
    def children(self) -> tuple[Expression, ...]:
        return (self.arg,)

    def with_children(self, children: Sequence[Expression]) -> Expression:
        [arg] = children
        return self if arg is self.arg else UnaryCall(self.op, arg)

    def _label(self) -> object:
        return self.op

    def _render(self, parts: list[str]) -> str:
        return f"{self.op}({parts[0]})"


@dataclass(frozen=True, slots=True, eq=False)
class BinaryCall(Expression):
    op: BinaryOp
    left: Expression
    right: Expression
    digest: int = field(init=False, repr=False)
    size: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        digest = _digest("binary", self.op, (self.left, self.right))
        object.__setattr__(self, "digest", digest)
        object.__setattr__(self, "size", 1 + self.left.size + self.right.size)

    @property
    def children(self) -> tuple[Expression, ...]:
        return (self.left, self.right)

    def with_children(self, children: Sequence[Expression]) -> Expression:
        left, right = children
        if left is self.left and right is self.right:
            return self
        return BinaryCall(self.op, left, right)

    def _label(self) -> object:
        return self.op

    def _render(self, parts: list[str]) -> str:
        return f"({parts[0]} {self.op} {parts[1]})"


# An n-ary grouping of one associative operator. It only lives between
# Flatten and Unflatten; the parser never produces it.
@dataclass(frozen=True, slots=True, eq=False)
class FlatCall(Expression):
    op: FlatOp
    args: tuple[Expression, ...]
    digest: int = field(init=False, repr=False)
    size: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.op not in ASSOCIATIVE_OPS:
            raise StructuralInvariantViolation(
                f"cannot flatten non-associative operator '{self.op}'"
            )
        if len(self.args) < 2:
            raise StructuralInvariantViolation(
                f"flat '{self.op}' call needs at least two arguments, got {len(self.args)}"
            )
        args = tuple(self.args)
        object.__setattr__(self, "args", args)
        object.__setattr__(self, "digest", _digest("flat", self.op, args))
        object.__setattr__(self, "size", 1 + sum(arg.size for arg in args))

    @property
    def children(self) -> tuple[Expression, ...]:
        return self.args

    def with_children(self, children: Sequence[Expression]) -> Expression:
        if len(children) == len(self.args) and all(
            new is old for new, old in zip(children, self.args)
        ):
            return self
        return FlatCall(self.op, tuple(children))

    def _label(self) -> object:
        return self.op

    def _render(self, parts: list[str]) -> str:
        return f" {self.op} ".join(parts)


def negate(expr: Expression) -> UnaryCall:
    return UnaryCall("-", expr)


def is_const(expr: Expression, value: int) -> bool:
    return isinstance(expr, Const) and expr.value == value

