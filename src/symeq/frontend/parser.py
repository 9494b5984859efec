from .ast_expressions import (
    BinaryCall,
    BinaryOp,
    Const,
    Expression,
    UnaryCall,
    Var,
)
from .errors import NestingTooDeepError, UnexpectedTokenError, UnmatchedParenError
from .tokens import Token, TokenStream, tokenize

# Each group parses in a nested Parser, so this bounds the call depth.
MAX_NESTING = 100


class Parser:
    """Recursive-descent parser with left-associative precedence tiers.

        primary        := Const | Var | '(' additive ')'
        unary          := '-' primary | primary
        multiplicative := unary ( ('*' | '/') unary )*
        additive       := multiplicative ( ('+' | '-') multiplicative )*
    """

    def __init__(self, tokens: TokenStream, depth: int = 0) -> None:
        self.tokens = tokens
        self.depth = depth

    def parse(self) -> Expression:
        expr = self.parse_additive()
        leftover = self.tokens.peek()
        if leftover.kind == "rparen":
            raise UnmatchedParenError(leftover.position)
        if leftover.kind != "eof":
            raise UnexpectedTokenError(leftover, leftover.position)
        return expr

    def parse_additive(self) -> Expression:
        left = self.parse_multiplicative()
        while self._at_op("+", "-"):
            op = self._binary_op(self.tokens.advance())
            right = self.parse_multiplicative()
            left = BinaryCall(op, left, right)
        return left

    def parse_multiplicative(self) -> Expression:
        left = self.parse_unary()
        while self._at_op("*", "/"):
            op = self._binary_op(self.tokens.advance())
            right = self.parse_unary()
            left = BinaryCall(op, left, right)
        return left

    def parse_unary(self) -> Expression:
        if self._at_op("-"):
            self.tokens.advance()
            return UnaryCall("-", self.parse_primary())
        return self.parse_primary()

    def parse_primary(self) -> Expression:
        token = self.tokens.peek()
        if token.kind == "lparen":
            return self.parse_group()
        if token.kind == "const":
            self.tokens.advance()
            return Const(token.value)
        if token.kind == "var":
            self.tokens.advance()
            return Var(token.text)
        raise UnexpectedTokenError(token, token.position)

    def parse_group(self) -> Expression:
        opening = self.tokens.peek()
        group = self.tokens.advance_past_parens()
        # Redundant pairs such as ((x)) are peeled here rather than nested.
        while group.at("lparen"):
            outer = TokenStream(group.tokens)
            inner = outer.advance_past_parens()
            if not outer.at("eof"):
                break
            group = inner

        if self.depth >= MAX_NESTING:
            raise NestingTooDeepError(opening.position, MAX_NESTING)
        return Parser(group, self.depth + 1).parse()

    def _at_op(self, *symbols: str) -> bool:
        token = self.tokens.peek()
        return token.kind == "op" and token.text in symbols

    @staticmethod
    def _binary_op(token: Token) -> BinaryOp:
        assert token.text in ("+", "-", "*", "/"), f"'{token}' is not an operator"
        return token.text  # type: ignore[return-value]


def parse_tokens(tokens: TokenStream) -> Expression:
    return Parser(tokens).parse()


def parse(source: str) -> Expression:
    return parse_tokens(tokenize(source))
