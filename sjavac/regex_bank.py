"""sjavac/regex_bank.py – the s-Java surface vocabulary.

Every pattern the classifier and the validator need lives here so both
phases agree on what a line looks like. Patterns are meant to be applied
with :meth:`re.Pattern.fullmatch`; the ``\\s*`` at both ends tolerate
leading and trailing whitespace (tabs included).

Patterns are compiled with :data:`re.ASCII`, so ``\\s`` and ``\\d`` cover
ASCII whitespace and digits only; full-width digits or an em space are not
part of the language. :func:`strip_ws` trims the same whitespace set.

Capture groups
--------------
``METHOD_DECL``        1: name, 2: raw parameter list
``IF_WHILE_HEADER``    1: ``if`` | ``while``, 2: raw condition
``VAR_DECL_LINE``      1: ``final `` or ``None``, 2: type, 3: declarator list
``METHOD_CALL``        1: name, 2: raw argument list
``PARAM_TOKEN``        1: ``final `` or ``None``, 2: type, 3: name
``ONE_VAR_DECL_TOKEN`` 1: name, 2: initializer or ``None``
``ONE_ASSIGNMENT_TOKEN`` 1: name, 2: value
"""

from __future__ import annotations

import re
from typing import Final, FrozenSet, Pattern

_TYPE: Final[str] = r"(int|double|boolean|char|String)"
_NAME: Final[str] = r"[A-Za-z_][A-Za-z0-9_]*"

# Characters that count as whitespace around a line, token or value.
WHITESPACE: Final[str] = " \t\n\r\f\v"


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.ASCII)


# ═══════════════════════════════════════════════════════════════════════
#  Line shapes
# ═══════════════════════════════════════════════════════════════════════

CLOSE_BRACE: Final[Pattern[str]] = _compile(r"\s*}\s*")

RETURN_STMT: Final[Pattern[str]] = _compile(r"\s*return\s*;\s*")

METHOD_DECL: Final[Pattern[str]] = _compile(
    r"\s*void\s+([A-Za-z][A-Za-z0-9_]*)\s*\((.*)\)\s*\{\s*"
)

IF_WHILE_HEADER: Final[Pattern[str]] = _compile(
    r"\s*(if|while)\s*\((.*)\)\s*\{\s*"
)

VAR_DECL_LINE: Final[Pattern[str]] = _compile(
    r"\s*(final\s+)?" + _TYPE + r"\s+(.+?)\s*;\s*"
)

METHOD_CALL: Final[Pattern[str]] = _compile(
    r"\s*([A-Za-z][A-Za-z0-9_]*)\s*\((.*)\)\s*;\s*"
)

# ═══════════════════════════════════════════════════════════════════════
#  Tokens inside a line
# ═══════════════════════════════════════════════════════════════════════

PARAM_TOKEN: Final[Pattern[str]] = _compile(
    r"\s*(final\s+)?" + _TYPE + r"\s+(" + _NAME + r")\s*"
)

ONE_VAR_DECL_TOKEN: Final[Pattern[str]] = _compile(
    r"\s*(" + _NAME + r")\s*(?:=\s*(.+?))?\s*"
)

ONE_ASSIGNMENT_TOKEN: Final[Pattern[str]] = _compile(
    r"\s*(" + _NAME + r")\s*=\s*(.+?)\s*"
)

# ═══════════════════════════════════════════════════════════════════════
#  Values
# ═══════════════════════════════════════════════════════════════════════

INT_LITERAL: Final[Pattern[str]] = _compile(r"[+-]?\d+")

DOUBLE_LITERAL: Final[Pattern[str]] = _compile(
    r"[+-]?(?:\d+\.\d+|\d+\.|\.\d+|\d+)"
)

BOOLEAN_LITERAL: Final[Pattern[str]] = _compile(r"true|false")

CHAR_LITERAL: Final[Pattern[str]] = _compile(r"'[^']'")

STRING_LITERAL: Final[Pattern[str]] = _compile(r'"[^"]*"')

IDENTIFIER: Final[Pattern[str]] = _compile(_NAME)

# Words that may never name a variable, parameter or method.
RESERVED_WORDS: Final[FrozenSet[str]] = frozenset({
    "int", "double", "boolean", "char", "String",
    "void", "final", "if", "while", "true", "false", "return",
})


def strip_ws(text: str) -> str:
    """``str.strip`` limited to :data:`WHITESPACE`."""
    return text.strip(WHITESPACE)


def is_valid_identifier(name: str, *, reject_reserved: bool = True) -> bool:
    """Apply the s-Java naming rules on top of :data:`IDENTIFIER`.

    A bare ``_``, anything starting with ``__`` and anything starting with a
    digit is rejected. Reserved words are rejected unless *reject_reserved*
    is false.
    """
    if not name or name[0] in "0123456789":
        return False
    if name == "_" or name.startswith("__"):
        return False
    if reject_reserved and name in RESERVED_WORDS:
        return False
    return IDENTIFIER.fullmatch(name) is not None
