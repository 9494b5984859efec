class ParseError(ValueError):
    """Raised when input text does not form a valid expression."""

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class UnexpectedTokenError(ParseError):
    def __init__(self, token: object, position: int) -> None:
        super().__init__(f"unexpected token '{token}' at position {position}", position)
        self.token = token


class UnmatchedParenError(ParseError):
    def __init__(self, position: int) -> None:
        super().__init__(f"unmatched parenthesis at position {position}", position)


class ExhaustedInputError(ParseError):
    def __init__(self, position: int | None = None) -> None:
        super().__init__("cannot advance past the end of input", position)


class NestingTooDeepError(ParseError):
    def __init__(self, position: int, limit: int) -> None:
        super().__init__(
            f"parentheses nested deeper than {limit} levels at position {position}",
            position,
        )
        self.limit = limit
