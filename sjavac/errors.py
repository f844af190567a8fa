# sjavac/errors.py
"""
s-Java Verifier Error Types

This module provides the error handling infrastructure for the s-Java
verifier pipeline. Every failure the verifier can report is an instance of
:class:`SjavaError`; the subclass determines the exit status that the CLI
prints.

Architecture Overview:
─────────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│                          Error Hierarchy                                    │
├─────────────────────────────────────────────────────────────────────────────┤
│  SjavaError (base)                                                          │
│  ├── SjavaIOError        - Unreadable / missing source file   (status 2)    │
│  ├── UsageError          - Bad command line                   (status 2)    │
│  ├── SjavaSyntaxError    - Line classification failures       (status 1)    │
│  ├── SemanticError       - Validator failures                 (status 1)    │
│  │   ├── TypeMismatchError / InvalidValueError                              │
│  │   ├── ScopeError      - Undefined / redefined / uninitialized names      │
│  │   ├── ArityMismatchError                                                 │
│  │   └── ControlFlowError - Returns, braces, misplaced statements           │
│  └── InternalError       - Verifier bugs (should never happen) (status 2)   │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
Each error has a unique code SJAVA-NNNN where NNNN falls in:
  - 0001-0999: I/O and usage errors
  - 1000-1999: Syntax errors
  - 2000-2999: Type errors
  - 3000-3999: Scope/binding errors
  - 4000-4999: Control-flow errors
  - 9000-9999: Internal errors

Example Usage:
──────────────
    from sjavac.errors import SjavaError, exit_status_for

    try:
        ...
    except SjavaError as exc:
        print(exc.to_gcc_format(), file=sys.stderr)
        status = exit_status_for(exc)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import (
    Any,
    List,
    Optional,
    Sequence,
)

# ═══════════════════════════════════════════════════════════════════════════════
# EXIT STATUSES
# ═══════════════════════════════════════════════════════════════════════════════

STATUS_VALID: int = 0
STATUS_INVALID: int = 1
STATUS_IO_ERROR: int = 2


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorPhase(Enum):
    """
    Verification phase where the error occurred.

    The phase decides which status the CLI prints for the error.
    """

    IO = "io"                  # Command line, file access
    SYNTAX = "syntax"          # Line classification
    SEMANTIC = "semantic"      # Scope, type and control-flow validation
    INTERNAL = "internal"      # Verifier internals

    @property
    def exit_status(self) -> int:
        if self in (ErrorPhase.SYNTAX, ErrorPhase.SEMANTIC):
            return STATUS_INVALID
        return STATUS_IO_ERROR


class ErrorCode:
    """
    Structured error code ``SJAVA-NNNN``.

    Codes compare equal to their string form so tests and callers can write
    ``exc.code == "SJAVA-2000"``.
    """

    __slots__ = ("prefix", "number", "phase", "title")

    def __init__(
        self,
        number: int,
        phase: ErrorPhase,
        title: str,
        prefix: str = "SJAVA",
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.phase = phase
        self.title = title

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.title!r})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


# ───────────────────────────────────────────────────────────────────────────────
# PREDEFINED ERROR CODES
# ───────────────────────────────────────────────────────────────────────────────

class SjavaErrorCodes:
    """Predefined error codes for the s-Java verifier."""

    # ═══════════════════════════════════════════════════════════════════════════
    # I/O AND USAGE ERRORS (0001-0999)
    # ═══════════════════════════════════════════════════════════════════════════

    BAD_USAGE = ErrorCode(1, ErrorPhase.IO, "bad usage")
    BAD_EXTENSION = ErrorCode(2, ErrorPhase.IO, "bad file extension")
    FILE_NOT_FOUND = ErrorCode(3, ErrorPhase.IO, "file not found")
    NOT_A_FILE = ErrorCode(4, ErrorPhase.IO, "not a regular file")
    FILE_NOT_READABLE = ErrorCode(5, ErrorPhase.IO, "file not readable")
    READ_FAILURE = ErrorCode(6, ErrorPhase.IO, "read failure")

    # ═══════════════════════════════════════════════════════════════════════════
    # SYNTAX ERRORS (1000-1999)
    # ═══════════════════════════════════════════════════════════════════════════

    INVALID_COMMENT = ErrorCode(1000, ErrorPhase.SYNTAX, "invalid comment")
    UNTERMINATED_STATEMENT = ErrorCode(
        1001, ErrorPhase.SYNTAX, "unterminated statement"
    )
    UNRECOGNIZED_STATEMENT = ErrorCode(
        1002, ErrorPhase.SYNTAX, "unrecognized statement"
    )
    MALFORMED_ASSIGNMENT = ErrorCode(
        1003, ErrorPhase.SYNTAX, "malformed assignment list"
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # TYPE ERRORS (2000-2999)
    # ═══════════════════════════════════════════════════════════════════════════

    TYPE_MISMATCH = ErrorCode(2000, ErrorPhase.SEMANTIC, "type mismatch")
    INVALID_VALUE = ErrorCode(2001, ErrorPhase.SEMANTIC, "invalid value")
    INVALID_CONDITION = ErrorCode(2002, ErrorPhase.SEMANTIC, "invalid condition")

    # ═══════════════════════════════════════════════════════════════════════════
    # SCOPE/BINDING ERRORS (3000-3999)
    # ═══════════════════════════════════════════════════════════════════════════

    UNDEFINED_SYMBOL = ErrorCode(3000, ErrorPhase.SEMANTIC, "undefined symbol")
    REDEFINED_SYMBOL = ErrorCode(3001, ErrorPhase.SEMANTIC, "redefined symbol")
    UNINITIALIZED_VARIABLE = ErrorCode(
        3002, ErrorPhase.SEMANTIC, "uninitialized variable"
    )
    FINAL_ASSIGNMENT = ErrorCode(3003, ErrorPhase.SEMANTIC, "assignment to final")
    MISSING_INITIALIZER = ErrorCode(
        3004, ErrorPhase.SEMANTIC, "final without initializer"
    )
    INVALID_IDENTIFIER = ErrorCode(3005, ErrorPhase.SEMANTIC, "invalid identifier")
    ARITY_MISMATCH = ErrorCode(3006, ErrorPhase.SEMANTIC, "arity mismatch")
    INVALID_DECLARATION = ErrorCode(
        3007, ErrorPhase.SEMANTIC, "invalid declaration"
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # CONTROL-FLOW ERRORS (4000-4999)
    # ═══════════════════════════════════════════════════════════════════════════

    MISSING_RETURN = ErrorCode(4000, ErrorPhase.SEMANTIC, "missing return")
    MISPLACED_STATEMENT = ErrorCode(
        4001, ErrorPhase.SEMANTIC, "statement outside method"
    )
    NESTED_METHOD = ErrorCode(4002, ErrorPhase.SEMANTIC, "nested method")
    UNBALANCED_BRACES = ErrorCode(4003, ErrorPhase.SEMANTIC, "unbalanced braces")

    # ═══════════════════════════════════════════════════════════════════════════
    # INTERNAL ERRORS (9000-9999)
    # ═══════════════════════════════════════════════════════════════════════════

    INTERNAL_ERROR = ErrorCode(9000, ErrorPhase.INTERNAL, "internal error")


# Convenient access to error codes
E = SjavaErrorCodes


# ═══════════════════════════════════════════════════════════════════════════════
# SOURCE LOCATION
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SourceSpan:
    """
    Location of a diagnostic: a file name and a 1-based line number.

    s-Java is strictly line-oriented, so columns are not tracked. A line of
    ``0`` means the location is unknown.
    """

    file: str = ""
    line: int = 0

    def __str__(self) -> str:
        if not self.file and self.line == 0:
            return "<unknown location>"

        parts = []
        if self.file:
            parts.append(self.file)
        if self.line > 0:
            parts.append(str(self.line))
        return ":".join(parts)


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR MESSAGE FORMATTING
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ErrorNote:
    """Additional note attached to an error, e.g. where a name was declared."""

    message: str
    span: Optional[SourceSpan] = None
    label: str = "note"

    def __str__(self) -> str:
        prefix = f"{self.label}: " if self.label else ""
        if self.span:
            return f"{self.span}: {prefix}{self.message}"
        return f"{prefix}{self.message}"


@dataclass
class ErrorMessage:
    """
    A complete error message with all context.

    This is the internal representation of an error before it is printed.
    """

    code: ErrorCode
    message: str
    span: SourceSpan = field(default_factory=SourceSpan)
    notes: List[ErrorNote] = field(default_factory=list)
    hint: str = ""
    source_line: str = ""

    def add_note(
        self,
        message: str,
        span: Optional[SourceSpan] = None,
        label: str = "note",
    ) -> "ErrorMessage":
        self.notes.append(ErrorNote(message=message, span=span, label=label))
        return self

    def to_gcc_format(self) -> str:
        """Format as a GCC-style error message."""
        main = f"{self.span}: {self.code.phase.value} error: {self.message} [{self.code}]"
        lines = [main]

        if self.source_line:
            lines.append(f"    {self.source_line.strip()}")

        for note in self.notes:
            lines.append(str(note))

        if self.hint:
            lines.append(f"hint: {self.hint}")

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_gcc_format()


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class SjavaError(Exception):
    """
    Base exception for all verifier errors.

    Carries structured error information that the CLI renders on stderr and
    maps to an exit status through :func:`exit_status_for`.
    """

    default_code: ErrorCode = SjavaErrorCodes.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        source_line: str = "",
        notes: Optional[List[ErrorNote]] = None,
        hint: str = "",
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.error_message = ErrorMessage(
            code=code or self.default_code,
            message=message,
            span=span or SourceSpan(),
            notes=notes or [],
            hint=hint,
            source_line=source_line,
        )
        self.cause = cause

    @property
    def code(self) -> ErrorCode:
        return self.error_message.code

    @property
    def span(self) -> SourceSpan:
        return self.error_message.span

    @property
    def line_number(self) -> int:
        return self.error_message.span.line

    @property
    def message(self) -> str:
        return self.error_message.message

    @property
    def phase(self) -> ErrorPhase:
        return self.error_message.code.phase

    def add_note(
        self,
        message: str,
        span: Optional[SourceSpan] = None,
        label: str = "note",
    ) -> "SjavaError":
        """Add a note to this error."""
        self.error_message.add_note(message, span, label)
        return self

    def to_gcc_format(self) -> str:
        return self.error_message.to_gcc_format()

    def __str__(self) -> str:
        if self.line_number > 0:
            return f"Line {self.line_number}: {self.message}"
        return self.message


# ───────────────────────────────────────────────────────────────────────────────
# I/O, USAGE AND INTERNAL ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class SjavaIOError(SjavaError):
    """The source file could not be located or read."""

    default_code = SjavaErrorCodes.READ_FAILURE

    def __init__(self, message: str, path: str = "", **kwargs: Any) -> None:
        super().__init__(message, span=SourceSpan(file=path), **kwargs)
        self.path = path


class UsageError(SjavaError):
    """The command line itself is wrong."""

    default_code = SjavaErrorCodes.BAD_USAGE


class InternalError(SjavaError):
    """A verifier invariant was broken; this is a bug, not bad input."""

    default_code = SjavaErrorCodes.INTERNAL_ERROR


# ───────────────────────────────────────────────────────────────────────────────
# SYNTAX ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class SjavaSyntaxError(SjavaError):
    """A line could not be classified."""

    default_code = SjavaErrorCodes.UNRECOGNIZED_STATEMENT

    def __init__(
        self,
        message: str,
        line_number: int,
        raw_line: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            span=kwargs.pop("span", None) or SourceSpan(line=line_number),
            source_line=raw_line,
            **kwargs,
        )
        self.raw_line = raw_line


class InvalidCommentError(SjavaSyntaxError):
    """Inline or block comment."""

    default_code = SjavaErrorCodes.INVALID_COMMENT

    def __init__(self, line_number: int, raw_line: str = "", **kwargs: Any) -> None:
        super().__init__(
            "Comments must start a line with '//'; inline and block comments are not allowed",
            line_number,
            raw_line,
            **kwargs,
        )


class UnterminatedStatementError(SjavaSyntaxError):
    """Line ends with neither ';' nor '{'."""

    default_code = SjavaErrorCodes.UNTERMINATED_STATEMENT

    def __init__(self, line_number: int, raw_line: str = "", **kwargs: Any) -> None:
        super().__init__(
            "Line must end with ';' or '{'",
            line_number,
            raw_line,
            hint="Add ';' at the end of the statement",
            **kwargs,
        )


class UnrecognizedStatementError(SjavaSyntaxError):
    """Line is terminated but matches no statement shape."""

    default_code = SjavaErrorCodes.UNRECOGNIZED_STATEMENT

    def __init__(self, line_number: int, raw_line: str = "", **kwargs: Any) -> None:
        super().__init__(
            f"Unrecognized statement: {raw_line.strip()}",
            line_number,
            raw_line,
            **kwargs,
        )


class MalformedAssignmentError(SjavaSyntaxError):
    """An assignment list with an empty or invalid element."""

    default_code = SjavaErrorCodes.MALFORMED_ASSIGNMENT

    def __init__(
        self,
        line_number: int,
        raw_line: str = "",
        token: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Malformed assignment {token.strip()!r}" if token.strip()
            else "Empty element in assignment list",
            line_number,
            raw_line,
            **kwargs,
        )
        self.token = token


# ───────────────────────────────────────────────────────────────────────────────
# SEMANTIC ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class SemanticError(SjavaError):
    """Error during semantic validation."""

    default_code = SjavaErrorCodes.INVALID_DECLARATION

    def __init__(
        self,
        message: str,
        line_number: int = 0,
        raw_line: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            span=kwargs.pop("span", None) or SourceSpan(line=line_number),
            source_line=raw_line,
            **kwargs,
        )


class TypeMismatchError(SemanticError):
    """A value of one type is used where an incompatible type is required."""

    default_code = SjavaErrorCodes.TYPE_MISMATCH

    def __init__(
        self,
        expected: str,
        actual: str,
        line_number: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Cannot assign {actual} to {expected}",
            line_number,
            **kwargs,
        )
        self.expected_type = expected
        self.actual_type = actual


class InvalidValueError(SemanticError):
    """A value is neither a literal nor an identifier."""

    default_code = SjavaErrorCodes.INVALID_VALUE

    def __init__(self, value: str, line_number: int = 0, **kwargs: Any) -> None:
        super().__init__(f"Invalid value: {value}", line_number, **kwargs)
        self.value = value


class InvalidConditionError(SemanticError):
    """An if/while condition has an unsupported shape or operand."""

    default_code = SjavaErrorCodes.INVALID_CONDITION


class ScopeError(SemanticError):
    """Scope-related semantic error."""

    default_code = SjavaErrorCodes.UNDEFINED_SYMBOL

    def __init__(
        self,
        message: str,
        line_number: int = 0,
        symbol: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, line_number, **kwargs)
        self.symbol = symbol


class UndefinedSymbolError(ScopeError):
    """Reference to an undeclared variable or method."""

    default_code = SjavaErrorCodes.UNDEFINED_SYMBOL

    def __init__(
        self,
        name: str,
        line_number: int = 0,
        kind: str = "Variable",
        **kwargs: Any,
    ) -> None:
        super().__init__(f"{kind} {name} not declared", line_number, symbol=name, **kwargs)


class RedefinedSymbolError(ScopeError):
    """Name already declared where redeclaration is forbidden."""

    default_code = SjavaErrorCodes.REDEFINED_SYMBOL

    def __init__(
        self,
        name: str,
        line_number: int = 0,
        kind: str = "Variable",
        where: str = "in this scope",
        original_line: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"{kind} {name} already declared {where}".rstrip(),
            line_number,
            symbol=name,
            **kwargs,
        )
        if original_line:
            self.add_note("Previously declared here", span=SourceSpan(line=original_line))


class UninitializedVariableError(ScopeError):
    """Variable read before any assignment."""

    default_code = SjavaErrorCodes.UNINITIALIZED_VARIABLE

    def __init__(self, name: str, line_number: int = 0, **kwargs: Any) -> None:
        super().__init__(
            f"Variable {name} may not be initialized",
            line_number,
            symbol=name,
            **kwargs,
        )


class FinalAssignmentError(ScopeError):
    """Assignment to a final variable."""

    default_code = SjavaErrorCodes.FINAL_ASSIGNMENT

    def __init__(self, name: str, line_number: int = 0, **kwargs: Any) -> None:
        super().__init__(
            f"Cannot assign to final variable {name}",
            line_number,
            symbol=name,
            **kwargs,
        )


class MissingInitializerError(ScopeError):
    """Final declarator without '= value'."""

    default_code = SjavaErrorCodes.MISSING_INITIALIZER

    def __init__(self, name: str, line_number: int = 0, **kwargs: Any) -> None:
        super().__init__(
            f"Final variable {name} must be initialized",
            line_number,
            symbol=name,
            **kwargs,
        )


class InvalidIdentifierError(ScopeError):
    """Name fails the identifier rules."""

    default_code = SjavaErrorCodes.INVALID_IDENTIFIER

    def __init__(
        self,
        name: str,
        line_number: int = 0,
        kind: str = "variable",
        **kwargs: Any,
    ) -> None:
        super().__init__(f"Invalid {kind} name: {name}", line_number, symbol=name, **kwargs)


class ArityMismatchError(SemanticError):
    """Call with the wrong number or types of arguments."""

    default_code = SjavaErrorCodes.ARITY_MISMATCH

    def __init__(
        self,
        name: str,
        expected: Sequence[str],
        actual: Sequence[str],
        line_number: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Method {name} called with incompatible arguments",
            line_number,
            **kwargs,
        )
        self.expected_types = list(expected)
        self.actual_types = list(actual)
        self.add_note(f"Expected ({', '.join(self.expected_types)})")
        self.add_note(f"Got ({', '.join(self.actual_types)})")


# ───────────────────────────────────────────────────────────────────────────────
# SEMANTIC ERRORS - CONTROL FLOW
# ───────────────────────────────────────────────────────────────────────────────

class ControlFlowError(SemanticError):
    """Block structure or statement placement error."""

    default_code = SjavaErrorCodes.MISPLACED_STATEMENT


class MissingReturnError(ControlFlowError):
    """Method body does not end with 'return;'."""

    default_code = SjavaErrorCodes.MISSING_RETURN

    def __init__(self, method: str, line_number: int = 0, **kwargs: Any) -> None:
        super().__init__(
            f"Method {method} must end with return statement",
            line_number,
            **kwargs,
        )
        self.method = method


class MisplacedStatementError(ControlFlowError):
    """Statement kind not permitted at the top level."""

    default_code = SjavaErrorCodes.MISPLACED_STATEMENT


class NestedMethodError(ControlFlowError):
    """Method declared inside another method."""

    default_code = SjavaErrorCodes.NESTED_METHOD

    def __init__(self, line_number: int = 0, **kwargs: Any) -> None:
        super().__init__("Nested method declarations not allowed", line_number, **kwargs)


class UnbalancedBraceError(ControlFlowError):
    """Block never closed, or closed too often."""

    default_code = SjavaErrorCodes.UNBALANCED_BRACES


# ═══════════════════════════════════════════════════════════════════════════════
# STATUS MAPPING
# ═══════════════════════════════════════════════════════════════════════════════

def exit_status_for(exc: BaseException) -> int:
    """
    Map an exception to the status line printed by the CLI.

    Syntax and semantic errors yield ``1``; I/O, usage and internal errors,
    and anything that is not an :class:`SjavaError`, yield ``2``.
    """
    if isinstance(exc, SjavaError):
        return exc.phase.exit_status
    return STATUS_IO_ERROR
