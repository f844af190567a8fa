"""sjavac/classifier.py – line-by-line syntactic classification.

The first verification pass. Each physical line of an s-Java source file is
assigned exactly one :class:`LineKind` by matching it against the vocabulary
in :mod:`sjavac.regex_bank`. Nothing is resolved here: a line that *looks*
like a method call is a ``METHOD_CALL`` whether or not the method exists.

Design principles
-----------------
* **Fail-fast with location** – the first line that cannot be classified
  raises an :class:`~sjavac.errors.SjavaSyntaxError` carrying its 1-based
  line number and raw text.
* **Pure** – classification is a function of the input text only; the same
  file always yields the same sequence of :class:`ClassifiedLine` records.
* **Frozen records** – :class:`ClassifiedLine` is immutable and shared with
  the validator as-is.

Public API
----------
``classify_line(raw_line, line_number) -> ClassifiedLine``
``classify_lines(lines) -> list[ClassifiedLine]``
``classify_source(text) -> list[ClassifiedLine]``
``classify_file(path, encoding="utf-8") -> list[ClassifiedLine]``
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

from sjavac import regex_bank as R
from sjavac.errors import (
    InvalidCommentError,
    MalformedAssignmentError,
    SjavaIOError,
    SjavaErrorCodes,
    UnrecognizedStatementError,
    UnterminatedStatementError,
)

logger = logging.getLogger(__name__)


class LineKind(enum.Enum):
    """Syntactic category of one source line."""

    EMPTY = "empty"
    COMMENT = "comment"
    METHOD_DECLARATION = "method-declaration"
    IF_WHILE_HEADER = "if-while-header"
    CLOSE_BRACE = "close-brace"
    RETURN = "return"
    VAR_DECLARATION = "var-declaration"
    ASSIGNMENT = "assignment"
    METHOD_CALL = "method-call"

    @property
    def is_meaningful(self) -> bool:
        """Whether a line of this kind counts as a statement of its block."""
        return self not in (LineKind.EMPTY, LineKind.COMMENT, LineKind.CLOSE_BRACE)


@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    """One classified source line."""

    line_number: int
    kind: LineKind
    raw_text: str

    def __str__(self) -> str:
        return f"{self.line_number}:{self.kind.value}: {self.raw_text.strip()}"


# ═══════════════════════════════════════════════════════════════════════
#  Single line
# ═══════════════════════════════════════════════════════════════════════

def classify_line(raw_line: str, line_number: int) -> ClassifiedLine:
    """Classify one line; raise a syntax error if it fits no shape."""
    if not R.strip_ws(raw_line):
        return ClassifiedLine(line_number, LineKind.EMPTY, raw_line)

    if raw_line.startswith("//"):
        return ClassifiedLine(line_number, LineKind.COMMENT, raw_line)

    if "/*" in raw_line or "*/" in raw_line or "//" in raw_line:
        raise InvalidCommentError(line_number, raw_line)

    if R.CLOSE_BRACE.fullmatch(raw_line):
        return ClassifiedLine(line_number, LineKind.CLOSE_BRACE, raw_line)

    trimmed = R.strip_ws(raw_line)
    if trimmed.endswith(";"):
        if R.RETURN_STMT.fullmatch(raw_line):
            kind = LineKind.RETURN
        elif R.VAR_DECL_LINE.fullmatch(raw_line):
            kind = LineKind.VAR_DECLARATION
        elif R.METHOD_CALL.fullmatch(raw_line):
            kind = LineKind.METHOD_CALL
        elif "=" in trimmed:
            for token in trimmed[:-1].split(","):
                if not R.strip_ws(token) or not R.ONE_ASSIGNMENT_TOKEN.fullmatch(token):
                    raise MalformedAssignmentError(line_number, raw_line, token)
            kind = LineKind.ASSIGNMENT
        else:
            raise UnrecognizedStatementError(line_number, raw_line)
    elif trimmed.endswith("{"):
        if R.METHOD_DECL.fullmatch(raw_line):
            kind = LineKind.METHOD_DECLARATION
        elif R.IF_WHILE_HEADER.fullmatch(raw_line):
            kind = LineKind.IF_WHILE_HEADER
        else:
            raise UnrecognizedStatementError(line_number, raw_line)
    else:
        raise UnterminatedStatementError(line_number, raw_line)

    return ClassifiedLine(line_number, kind, raw_line)


# ═══════════════════════════════════════════════════════════════════════
#  Whole sources
# ═══════════════════════════════════════════════════════════════════════

def classify_lines(lines: Iterable[str]) -> List[ClassifiedLine]:
    """Classify an iterable of lines, numbering them from 1.

    Trailing ``\\n`` / ``\\r\\n`` terminators are stripped first.
    """
    classified: List[ClassifiedLine] = []
    for number, line in enumerate(lines, start=1):
        record = classify_line(line.rstrip("\r\n"), number)
        logger.debug("line %s", record)
        classified.append(record)
    return classified


def classify_source(text: str) -> List[ClassifiedLine]:
    """Classify an in-memory source string."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = normalized.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return classify_lines(lines)


def classify_file(
    path: Union[str, Path],
    encoding: str = "utf-8",
) -> List[ClassifiedLine]:
    """Read and classify a source file.

    The file is opened once and closed on every exit path. Read and decode
    failures surface as :class:`~sjavac.errors.SjavaIOError`; classification
    failures propagate unchanged.
    """
    p = Path(path)
    logger.info("Classifying %s", p)
    try:
        with open(p, "r", encoding=encoding) as fh:
            classified = classify_lines(fh)
    except UnicodeDecodeError as exc:
        raise SjavaIOError(
            f"Cannot decode {p} as {encoding}: {exc.reason}",
            path=str(p),
            code=SjavaErrorCodes.READ_FAILURE,
            cause=exc,
        ) from exc
    except OSError as exc:
        raise SjavaIOError(
            f"Cannot read {p}: {exc.strerror or exc}",
            path=str(p),
            code=SjavaErrorCodes.READ_FAILURE,
            cause=exc,
        ) from exc
    logger.info("Classified %d line(s)", len(classified))
    return classified
