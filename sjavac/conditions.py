"""
conditions.py — if/while condition checking
============================================

An s-Java condition is a flat chain of operands joined by ``||`` and
``&&``; there are no parentheses, comparisons or negation. Each operand must
be a boolean literal, a numeric literal, or an initialized ``boolean``,
``int`` or ``double`` variable.

The chain shape is recognised by a small Parsimonious PEG grammar; operand
checking reuses the regex vocabulary and the current scope.

Depends on:
    - parsimonious (PEG parser)
"""

from __future__ import annotations

import logging
from typing import List

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from sjavac import regex_bank as R
from sjavac.errors import (
    InvalidConditionError,
    UndefinedSymbolError,
    UninitializedVariableError,
)
from sjavac.model import CONDITION_TYPES, Scope

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  GRAMMAR (Parsimonious PEG)
# ═══════════════════════════════════════════════════════════════════

CONDITION_GRAMMAR = Grammar(r'''
    condition   = _ operand (_ operator _ operand)* _
    operator    = "||" / "&&"
    operand     = ~r"[^|& \t\n\r\f\v]+"
    _           = ~r"[ \t\n\r\f\v]*"
''')


class OperandCollector(NodeVisitor):
    """Flattens a ``condition`` parse tree into its operand strings."""

    def generic_visit(self, node: Node, visited_children: list) -> List[str]:
        operands: List[str] = []
        for child in visited_children:
            if isinstance(child, list):
                operands.extend(child)
            elif isinstance(child, str):
                operands.append(child)
        return operands

    def visit_operand(self, node: Node, visited_children: list) -> str:
        return node.text

    def visit_operator(self, node: Node, visited_children: list) -> None:
        return None

    def visit__(self, node: Node, visited_children: list) -> None:
        return None


def split_condition(condition: str, line_number: int = 0) -> List[str]:
    """Return the operands of *condition* in source order.

    Raises :class:`InvalidConditionError` for an empty condition, an empty
    operand (``a || && b``, ``a ||``) or a stray single ``|`` / ``&``.
    """
    try:
        tree = CONDITION_GRAMMAR.parse(condition)
    except ParseError as exc:
        raise InvalidConditionError(
            f"Invalid condition: {condition.strip() or '<empty>'}",
            line_number,
            cause=exc,
        ) from exc
    return OperandCollector().visit(tree)


# ═══════════════════════════════════════════════════════════════════
#  Operand checking
# ═══════════════════════════════════════════════════════════════════

def check_operand(operand: str, scope: Scope, line_number: int = 0) -> None:
    """Validate one condition operand against *scope*."""
    if R.BOOLEAN_LITERAL.fullmatch(operand):
        return
    if R.INT_LITERAL.fullmatch(operand) or R.DOUBLE_LITERAL.fullmatch(operand):
        return
    if R.IDENTIFIER.fullmatch(operand):
        var = scope.resolve(operand)
        if var is None:
            raise UndefinedSymbolError(operand, line_number)
        if not var.is_initialized:
            raise UninitializedVariableError(operand, line_number)
        if var.type not in CONDITION_TYPES:
            raise InvalidConditionError(
                f"Condition must be boolean, int, or double; {operand} is {var.type}",
                line_number,
            )
        return
    raise InvalidConditionError(f"Invalid condition element: {operand}", line_number)


def validate_condition(
    condition: str,
    scope: Scope,
    line_number: int = 0,
) -> List[str]:
    """Check a whole condition; return its operands on success."""
    operands = split_condition(condition, line_number)
    for operand in operands:
        check_operand(operand, scope, line_number)
    logger.debug("line %d: condition operands %s", line_number, operands)
    return operands
