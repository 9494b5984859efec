from dataclasses import dataclass
from functools import lru_cache
from importlib.resources import files
from typing import Any, Iterator, Literal, Sequence

from lark import Lark

from .errors import ExhaustedInputError, UnmatchedParenError

TokenKind = Literal["const", "var", "op", "lparen", "rparen", "eof"]

_KINDS_BY_TERMINAL: dict[str, TokenKind] = {
    "PLUS": "op",
    "MINUS": "op",
    "STAR": "op",
    "SLASH": "op",
    "LPAR": "lparen",
    "RPAR": "rparen",
}


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    # Offset of the first character in the original input, whitespace included.
    position: int

    @property
    def value(self) -> int:
        assert self.kind == "const", f"{self} is not a constant"
        return int(self.text)

    def __str__(self) -> str:
        return self.text


class TokenStream:
    def __init__(self, tokens: Sequence[Token], end: int | None = None) -> None:
        items = list(tokens)
        if not items or items[-1].kind != "eof":
            if end is None:
                end = items[-1].position + len(items[-1].text) if items else 0
            items.append(Token("eof", "EOF", end))
        self._tokens = items
        self._index = 0

    @property
    def tokens(self) -> list[Token]:
        return list(self._tokens)

    def peek(self) -> Token:
        return self._tokens[self._index]

    def at(self, kind: TokenKind, text: str | None = None) -> bool:
        token = self.peek()
        return token.kind == kind and (text is None or token.text == text)

    def advance(self) -> Token:
        token = self.peek()
        if token.kind == "eof":
            raise ExhaustedInputError(token.position)
        self._index += 1
        return token

    def advance_past_parens(self) -> "TokenStream":
        """Consume a parenthesized group and return the tokens inside it.

        The stream must be positioned at `(`. On return it sits right after the
        matching `)`; the returned stream ends with a fresh EOF placed at that
        closing parenthesis.
        """
        opening = self.peek()
        assert opening.kind == "lparen", f"expected '(' but found '{opening}'"
        start = self._index + 1
        depth = 0
        while True:
            token = self.peek()
            if token.kind == "eof":
                raise UnmatchedParenError(opening.position)
            self._index += 1
            if token.kind == "lparen":
                depth += 1
            elif token.kind == "rparen":
                depth -= 1
            if depth == 0:
                return TokenStream(self._tokens[start : self._index - 1], end=token.position)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens[self._index :])

    def __repr__(self) -> str:
        return str([str(token) for token in self._tokens])


def _load_grammar_text() -> str:
    grammar_file = files("symeq.frontend").joinpath("tokens.lark")
    return grammar_file.read_text(encoding="utf-8")


@lru_cache(maxsize=1)
def get_lexer() -> Lark:
    return Lark(_load_grammar_text(), start="start", parser="lalr", lexer="basic")


def tokenize(source: str) -> TokenStream:
    """Split `source` into tokens; never fails.

    Whitespace is dropped before splitting, so `"x y"` reads as the single
    identifier `xy`.
    """
    offsets = [index for index, char in enumerate(source) if not char.isspace()]
    compact = "".join(source[index] for index in offsets)

    lexer: Any = get_lexer()
    tokens: list[Token] = []
    for lexed in lexer.lex(compact):
        text = str(lexed)
        position = offsets[lexed.start_pos]
        if lexed.type == "IDENT":
            kind: TokenKind = "const" if text.isascii() and text.isdigit() else "var"
        else:
            kind = _KINDS_BY_TERMINAL[lexed.type]
        tokens.append(Token(kind, text, position))

    return TokenStream(tokens, end=len(source))
