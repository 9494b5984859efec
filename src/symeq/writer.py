from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

# DEBUG = True
DEBUG = False


class IndentingWriter:
    """Console writer for pass traces; debug output is gated by `DEBUG`."""

    def __init__(self, indent_size: int = 3) -> None:
        self._indent_size = indent_size
        self._indents = 0

    def trace(self, label: str, value: object) -> None:
        if not DEBUG:
            return
        print(f"{self._margin()}{label} =>\t{value}")

    def println(self, message: str, with_title_box: bool = False) -> None:
        if with_title_box:
            self.print_division_line()

        print(self._margin() + message)

        if with_title_box:
            self.print_division_line()

    def indent(self) -> None:
        if DEBUG:
            self._indents += 1

    def dedent(self) -> None:
        if DEBUG:
            self._indents -= 1

    def print_division_line(self, size: int = 80) -> None:
        print("-" * size)

    def _margin(self) -> str:
        return " " * self._indent_size * self._indents


@contextmanager
def indented_output(output_writer: IndentingWriter) -> Iterator[None]:
    output_writer.indent()
    try:
        yield
    finally:
        output_writer.dedent()


@contextmanager
def surrounding_box_title(output_writer: IndentingWriter) -> Iterator[None]:
    output_writer.print_division_line()
    try:
        yield
    finally:
        output_writer.print_division_line()
