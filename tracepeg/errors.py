# tracepeg/errors.py
"""Exceptions raised while building a parser or parsing input."""

from __future__ import annotations


class TracepegError(Exception):
    """Base exception for tracepeg."""

    pass


class GrammarError(TracepegError):
    """A grammar class (or its tree factory) is malformed.

    Raised while recording rules: unbalanced expression stack at `is_`,
    a rule defined twice, an arity mismatch on a factory call, or a
    reference to a method that never declared a rule.
    """

    pass


class BootstrapFailed(TracepegError):
    """A grammar method raised while its rule was being recorded."""

    def __init__(self, method: str, cause: BaseException):
        super().__init__(f"Failed to record rule {method!r}: {cause}")
        self.method = method
        self.cause = cause


class ParseFailed(TracepegError, SyntaxError):
    """The input does not match the grammar."""

    def __init__(self, line: int, message: str):
        super().__init__(message)
        self.line = line
        self.lineno = line
        self.message = message

    def __str__(self) -> str:
        return self.message


class IncompleteParse(TracepegError):
    """The root rule matched only a prefix of the input."""

    def __init__(self, consumed: int, total: int):
        super().__init__(
            f"Failed to parse the input entirely: {consumed} characters parsed, "
            f"total input length = {total}"
        )
        self.consumed = consumed
        self.total = total


class NestingTooDeep(TracepegError):
    """Parsing or lowering the input exceeded the interpreter's recursion limit."""

    def __init__(self, limit: int):
        super().__init__(
            f"Input nests too deeply to parse within the recursion limit ({limit})"
        )
        self.limit = limit
