"""
cflreach.errors
===============

Exception types raised by the solver and the grammar loader.

Error hierarchy::

    CFLRError (base)
    ├── EmptyQueueError          pop on an empty work queue
    ├── ResourceExhaustedError   edge budget exceeded / allocation failure
    ├── GrammarError             malformed production or grammar
    │   └── GrammarSyntaxError   grammar text could not be parsed
    └── UnknownLabelError        label name outside the alphabet

Every error carries an :class:`ErrorCode`.  Codes follow the pattern
``CFLR-XXXX`` where the leading digit groups the failure:

  - 1000-1999: work queue / solver contract violations
  - 2000-2999: resource failures
  - 3000-3999: grammar errors
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """Stable identifiers for every error the package raises."""

    EMPTY_QUEUE = 1001
    EDGE_BUDGET_EXCEEDED = 2001
    OUT_OF_MEMORY = 2002
    INVALID_PRODUCTION = 3001
    GRAMMAR_SYNTAX = 3002
    UNKNOWN_LABEL = 3003

    @property
    def code(self) -> str:
        return f"CFLR-{self.value:04d}"


class CFLRError(Exception):
    """Base class for all cflreach errors."""

    error_code: ErrorCode = ErrorCode.INVALID_PRODUCTION

    def __init__(self, message: str, *, code: Optional[ErrorCode] = None) -> None:
        if code is not None:
            self.error_code = code
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.error_code.code}] {self.message}"


class EmptyQueueError(CFLRError):
    """``pop()`` was called on an empty work queue.

    This is a caller contract violation: the solve loop always checks
    emptiness first.
    """

    error_code = ErrorCode.EMPTY_QUEUE

    def __init__(self, message: str = "pop from an empty work queue") -> None:
        super().__init__(message)


class ResourceExhaustedError(CFLRError, MemoryError):
    """The closure outgrew the configured edge budget or available memory."""

    error_code = ErrorCode.EDGE_BUDGET_EXCEEDED

    def __init__(
        self,
        message: str,
        *,
        edge_count: int = 0,
        limit: Optional[int] = None,
        code: Optional[ErrorCode] = None,
    ) -> None:
        self.edge_count = edge_count
        self.limit = limit
        super().__init__(message, code=code)


class GrammarError(CFLRError):
    """A production or grammar is malformed."""

    error_code = ErrorCode.INVALID_PRODUCTION


class GrammarSyntaxError(GrammarError):
    """Grammar text does not match the grammar syntax."""

    error_code = ErrorCode.GRAMMAR_SYNTAX

    def __init__(self, message: str, *, line: int = 0, column: int = 0) -> None:
        self.line = line
        self.column = column
        if line:
            message = f"line {line}, column {column}: {message}"
        super().__init__(message)


class UnknownLabelError(CFLRError, ValueError):
    """A label name is not part of the edge-label alphabet."""

    error_code = ErrorCode.UNKNOWN_LABEL

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown edge label {name!r}")
