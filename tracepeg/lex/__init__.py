# tracepeg/lex/__init__.py
"""Input buffers and tokens.

The grammar is lexerless: tokens are not produced by a separate scanner but
cut out of the input by the `token` / `pattern` rules of a recorded grammar.
This module holds what both sides of that share:

API
---
- `Input(text, uri=None)`: immutable source buffer
    - `position(offset) -> (line, col)`  # 1-based
    - `line_of(offset) -> int`
    - `snippet(offset) -> str`          # source line with a caret
- `SyntaxToken(text, start, end, line, col)`: lexeme cut from an `Input`
- `load_input(path, charset)`: read a file into an `Input`
- `format_parse_error(input, offset, expected)`: engine failure message
"""

from __future__ import annotations
from bisect import bisect_right
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple


# --------- Public datatypes ---------

@dataclass(frozen=True)
class SyntaxToken:
    text: str   # lexeme, surrounding whitespace excluded
    start: int  # offset of the lexeme in the input
    end: int
    line: int   # 1-based
    col: int    # 1-based

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Input:
    text: str
    uri: Optional[str] = None
    _line_starts: List[int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0]
        i = self.text.find("\n")
        while i != -1:
            starts.append(i + 1)
            i = self.text.find("\n", i + 1)
        object.__setattr__(self, "_line_starts", starts)

    def __len__(self) -> int:
        return len(self.text)

    def line_of(self, offset: int) -> int:
        return bisect_right(self._line_starts, offset)

    def position(self, offset: int) -> Tuple[int, int]:
        """1-based (line, col) of an absolute offset."""
        line = self.line_of(offset)
        return line, offset - self._line_starts[line - 1] + 1

    def line_bounds(self, offset: int) -> Tuple[int, int]:
        """[start, end) of the line holding offset."""
        line = self.line_of(offset)
        start = self._line_starts[line - 1]
        end = self.text.find("\n", start)
        return start, len(self.text) if end == -1 else end

    def snippet(self, offset: int) -> str:
        """Source line holding offset with a caret (^) under it."""
        start, end = self.line_bounds(offset)
        caret = " " * (offset - start) + "^"
        return f"{self.text[start:end]}\n{caret}"

    def token(self, start: int, end: int) -> SyntaxToken:
        line, col = self.position(start)
        return SyntaxToken(self.text[start:end], start, end, line, col)


# --------- Helpers ---------

def load_input(path: str, charset: str = "utf-8") -> Input:
    """Read a source file; line endings are normalized to '\\n'."""
    p = Path(path)
    text = p.read_text(encoding=charset)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return Input(text, p.resolve().as_uri())


def format_parse_error(source: Input, offset: int, expected: Iterable[str]) -> str:
    line, col = source.position(offset)
    where = f"line {line} column {col}"
    if source.uri:
        where = f"{source.uri}: {where}"
    expected_sorted = ", ".join(sorted(set(expected)))
    if offset >= len(source):
        found = "EOF"
    else:
        found = repr(source.text[offset])
    return (
        f"Parse error at {where}: unexpected {found}, "
        f"expected one of {{{expected_sorted}}}\n" + source.snippet(offset)
    )
