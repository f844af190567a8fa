"""
s-Java Semantic Validator

Consumes the classified line stream produced by :mod:`sjavac.classifier`
and checks it in two passes:

1. Collection - walks the top level only, declaring global variables and
   registering every method signature (method bodies are skipped by brace
   counting). Because all signatures are known before any body is checked,
   a method may call another one declared later in the file.
2. Body walk - for each top-level method, builds a method scope holding its
   parameters and walks the body line by line, pushing a child scope on every
   ``if``/``while`` header and popping it on the matching ``}``.

Validation is fail-fast: the first problem raises a
:class:`~sjavac.errors.SemanticError` subclass carrying the line number.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Set, Union

from sjavac import regex_bank as R
from sjavac.classifier import ClassifiedLine, LineKind, classify_file, classify_source
from sjavac.conditions import validate_condition
from sjavac.config import DEFAULT_CONFIG, VerifierConfig
from sjavac.errors import (
    ArityMismatchError,
    FinalAssignmentError,
    InternalError,
    InvalidIdentifierError,
    InvalidValueError,
    MisplacedStatementError,
    MissingInitializerError,
    MissingReturnError,
    NestedMethodError,
    RedefinedSymbolError,
    SemanticError,
    SjavaError,
    TypeMismatchError,
    UnbalancedBraceError,
    UndefinedSymbolError,
    UninitializedVariableError,
)
from sjavac.model import Method, Scope, TypeTag, Variable

logger = logging.getLogger(__name__)


# ============================================================================
# VALUE TYPES
# ============================================================================


def resolve_value_type(value: str, scope: Scope, line_number: int = 0) -> TypeTag:
    """
    Type of a value appearing on the right of ``=`` or as a call argument.

    Literals are tried in the order int, double, boolean, char, String (an
    integer also matches the double pattern, so the order matters); anything
    else must be the name of a visible, initialized variable. Widening is
    not applied here but at the use site.
    """
    value = R.strip_ws(value)
    if R.INT_LITERAL.fullmatch(value):
        return TypeTag.INT
    if R.DOUBLE_LITERAL.fullmatch(value):
        return TypeTag.DOUBLE
    if R.BOOLEAN_LITERAL.fullmatch(value):
        return TypeTag.BOOLEAN
    if R.CHAR_LITERAL.fullmatch(value):
        return TypeTag.CHAR
    if R.STRING_LITERAL.fullmatch(value):
        return TypeTag.STRING
    if R.IDENTIFIER.fullmatch(value):
        var = scope.resolve(value)
        if var is None:
            raise UndefinedSymbolError(value, line_number)
        if not var.is_initialized:
            raise UninitializedVariableError(value, line_number)
        return var.type
    raise InvalidValueError(value, line_number)


# ============================================================================
# RESULT
# ============================================================================


@dataclass
class ValidationResult:
    """What a successful validation collected."""
    global_scope: Scope
    methods: Dict[str, Method] = field(default_factory=dict)
    line_count: int = 0

    @property
    def method_names(self) -> List[str]:
        return sorted(self.methods)


# ============================================================================
# VALIDATOR
# ============================================================================


@contextmanager
def _at_line(line: ClassifiedLine) -> Iterator[None]:
    """Attach *line*'s raw text to any verifier error raised inside."""
    try:
        yield
    except SjavaError as exc:
        if not exc.error_message.source_line:
            exc.error_message.source_line = line.raw_text
        raise


class Validator:
    """
    Two-pass semantic validator.

    Owns the global scope and the method table for one source file; create a
    new instance per file.
    """

    def __init__(
        self,
        lines: Sequence[ClassifiedLine],
        config: Optional[VerifierConfig] = None,
    ) -> None:
        self.lines: List[ClassifiedLine] = list(lines)
        self.config = config or DEFAULT_CONFIG
        self.global_scope = Scope(None)
        self.methods: Dict[str, Method] = {}

    def validate(self) -> ValidationResult:
        """Run both passes; raise on the first error."""
        logger.info("Pass 1: collecting globals and method signatures")
        self._collect()
        logger.info(
            "Collected %d global(s) and %d method(s)",
            len(self.global_scope),
            len(self.methods),
        )
        logger.info("Pass 2: validating method bodies")
        self._validate_bodies()
        return ValidationResult(
            global_scope=self.global_scope,
            methods=dict(self.methods),
            line_count=len(self.lines),
        )

    # ------------------------------------------------------------------
    # Pass 1: collection
    # ------------------------------------------------------------------

    def _collect(self) -> None:
        i = 0
        while i < len(self.lines):
            line = self.lines[i]
            kind = line.kind
            with _at_line(line):
                if kind is LineKind.VAR_DECLARATION:
                    self._declare_variables(line, self.global_scope)
                    i += 1
                elif kind is LineKind.METHOD_DECLARATION:
                    self._register_method(line)
                    i = self._skip_to_method_end(i)
                elif kind is LineKind.ASSIGNMENT:
                    if not self.config.allow_global_assignments:
                        raise MisplacedStatementError(
                            "Assignments not allowed in global scope", line.line_number
                        )
                    self._assign(line, self.global_scope)
                    i += 1
                elif kind in (LineKind.EMPTY, LineKind.COMMENT):
                    i += 1
                elif kind is LineKind.METHOD_CALL:
                    raise MisplacedStatementError(
                        "Method calls not allowed in global scope", line.line_number
                    )
                elif kind in (LineKind.IF_WHILE_HEADER, LineKind.RETURN):
                    raise MisplacedStatementError(
                        "Statement only allowed inside methods", line.line_number
                    )
                elif kind is LineKind.CLOSE_BRACE:
                    raise UnbalancedBraceError(
                        "Unexpected closing brace in global scope", line.line_number
                    )
                else:
                    raise InternalError(f"Unhandled line kind {kind}")

    def _register_method(self, line: ClassifiedLine) -> Method:
        m = R.METHOD_DECL.fullmatch(line.raw_text)
        if m is None:
            raise SemanticError("Invalid method declaration", line.line_number)
        name, params_str = m.group(1), m.group(2)

        if self.config.reject_reserved_words and name in R.RESERVED_WORDS:
            raise InvalidIdentifierError(name, line.line_number, kind="method")
        existing = self.methods.get(name)
        if existing is not None:
            raise RedefinedSymbolError(
                name,
                line.line_number,
                kind="Method",
                where="",
                original_line=existing.declaration_line,
            )

        parameters: List[Variable] = []
        seen: Set[str] = set()
        if R.strip_ws(params_str):
            for param in params_str.split(","):
                pm = R.PARAM_TOKEN.fullmatch(param)
                if pm is None:
                    raise SemanticError(
                        f"Invalid parameter: {param.strip()}", line.line_number
                    )
                is_final = pm.group(1) is not None
                param_name = pm.group(3)
                self._check_name(param_name, line.line_number, kind="parameter")
                if param_name in seen:
                    raise RedefinedSymbolError(
                        param_name,
                        line.line_number,
                        kind="Parameter",
                        where=f"in method {name}",
                    )
                seen.add(param_name)
                parameters.append(
                    Variable(
                        param_name,
                        TypeTag.from_name(pm.group(2)),
                        is_final=is_final,
                        is_initialized=True,
                        declaration_line=line.line_number,
                    )
                )

        method = Method(name, parameters, declaration_line=line.line_number)
        self.methods[name] = method
        logger.debug("line %d: registered %r", line.line_number, method)
        return method

    def _skip_to_method_end(self, start: int) -> int:
        """Index just past the ``}`` closing the method declared at *start*."""
        depth = 1
        i = start + 1
        while i < len(self.lines) and depth > 0:
            kind = self.lines[i].kind
            if kind is LineKind.IF_WHILE_HEADER or (
                kind is LineKind.METHOD_DECLARATION and depth == 1
            ):
                depth += 1
            elif kind is LineKind.CLOSE_BRACE:
                depth -= 1
            i += 1
        if depth > 0:
            decl = self.lines[start]
            raise UnbalancedBraceError(
                "Unterminated method body: missing closing brace", decl.line_number
            )
        return i

    # ------------------------------------------------------------------
    # Pass 2: body walk
    # ------------------------------------------------------------------

    def _validate_bodies(self) -> None:
        i = 0
        while i < len(self.lines):
            if self.lines[i].kind is LineKind.METHOD_DECLARATION:
                i = self._validate_method_body(i)
            else:
                i += 1

    def _validate_method_body(self, start: int) -> int:
        """Walk one method body; return the index just past its ``}``."""
        decl = self.lines[start]
        m = R.METHOD_DECL.fullmatch(decl.raw_text)
        method = self.methods.get(m.group(1)) if m is not None else None
        if method is None:
            raise InternalError(
                f"Method on line {decl.line_number} was not collected",
            )
        logger.debug("line %d: validating body of %s", decl.line_number, method.name)

        method_scope = self.global_scope.child(name=method.name)
        for param in method.parameters:
            method_scope.define(param, decl.line_number)

        scope = method_scope
        depth = 1
        has_return = False
        last_meaningful: Optional[ClassifiedLine] = None

        i = start + 1
        while i < len(self.lines):
            line = self.lines[i]
            kind = line.kind
            if kind.is_meaningful:
                last_meaningful = line

            with _at_line(line):
                if kind is LineKind.CLOSE_BRACE:
                    depth -= 1
                    if depth == 0:
                        if not has_return or last_meaningful is None \
                                or last_meaningful.kind is not LineKind.RETURN:
                            raise MissingReturnError(method.name, line.line_number)
                        return i + 1
                    if scope.parent is None:
                        raise InternalError("Scope stack underflow")
                    scope = scope.parent
                elif kind is LineKind.VAR_DECLARATION:
                    self._declare_variables(line, scope)
                elif kind is LineKind.ASSIGNMENT:
                    self._assign(line, scope)
                elif kind is LineKind.METHOD_CALL:
                    self._check_call(line, scope)
                elif kind is LineKind.IF_WHILE_HEADER:
                    header = R.IF_WHILE_HEADER.fullmatch(line.raw_text)
                    if header is None:
                        raise SemanticError("Invalid if/while statement", line.line_number)
                    validate_condition(header.group(2), scope, line.line_number)
                    depth += 1
                    scope = scope.child(name=header.group(1))
                elif kind is LineKind.RETURN:
                    has_return = True
                elif kind is LineKind.METHOD_DECLARATION:
                    raise NestedMethodError(line.line_number)
            i += 1

        raise UnbalancedBraceError(
            f"Unterminated method body: {method.name} is never closed",
            decl.line_number,
        )

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _check_name(self, name: str, line_number: int, kind: str = "variable") -> None:
        if not R.is_valid_identifier(
            name, reject_reserved=self.config.reject_reserved_words
        ):
            raise InvalidIdentifierError(name, line_number, kind=kind)

    def _declare_variables(self, line: ClassifiedLine, scope: Scope) -> None:
        """``[final] type a [= v], b [= w], ...;`` declared into *scope*."""
        m = R.VAR_DECL_LINE.fullmatch(line.raw_text)
        if m is None:
            raise SemanticError("Invalid variable declaration", line.line_number)
        is_final = m.group(1) is not None
        var_type = TypeTag.from_name(m.group(2))

        for declarator in m.group(3).split(","):
            dm = R.ONE_VAR_DECL_TOKEN.fullmatch(declarator)
            if dm is None:
                raise SemanticError(
                    f"Invalid variable declaration: {declarator.strip()}",
                    line.line_number,
                )
            name, value = dm.group(1), dm.group(2)
            self._check_name(name, line.line_number)

            existing = scope.lookup_local(name)
            if existing is not None:
                raise RedefinedSymbolError(
                    name,
                    line.line_number,
                    where="in global scope" if scope.is_global else "in this scope",
                    original_line=existing.declaration_line,
                )
            if is_final and value is None:
                raise MissingInitializerError(name, line.line_number)
            if value is not None:
                value_type = resolve_value_type(value, scope, line.line_number)
                if not var_type.accepts(value_type):
                    raise TypeMismatchError(
                        str(var_type), str(value_type), line.line_number
                    )

            scope.define(
                Variable(
                    name,
                    var_type,
                    is_final=is_final,
                    is_initialized=value is not None,
                    declaration_line=line.line_number,
                ),
                line.line_number,
            )
            logger.debug(
                "line %d: declared %s %s in %s scope",
                line.line_number, var_type, name, scope.name,
            )

    def _assign(self, line: ClassifiedLine, scope: Scope) -> None:
        """``a = v, b = w;`` against variables visible from *scope*."""
        body = R.strip_ws(line.raw_text)
        if body.endswith(";"):
            body = body[:-1]

        for token in body.split(","):
            m = R.ONE_ASSIGNMENT_TOKEN.fullmatch(token)
            if m is None:
                raise SemanticError(
                    f"Invalid assignment: {token.strip()}", line.line_number
                )
            name, value = m.group(1), m.group(2)

            var = scope.resolve(name)
            if var is None:
                raise UndefinedSymbolError(name, line.line_number)
            if var.is_final:
                raise FinalAssignmentError(name, line.line_number)
            value_type = resolve_value_type(value, scope, line.line_number)
            if not var.accepts(value_type):
                raise TypeMismatchError(str(var.type), str(value_type), line.line_number)
            var.mark_initialized()

    def _check_call(self, line: ClassifiedLine, scope: Scope) -> None:
        """``name(arg, ...);`` against the method table."""
        m = R.METHOD_CALL.fullmatch(line.raw_text)
        if m is None:
            raise SemanticError("Invalid method call", line.line_number)
        name, args_str = m.group(1), m.group(2)

        method = self.methods.get(name)
        if method is None:
            raise UndefinedSymbolError(name, line.line_number, kind="Method")

        arg_types: List[TypeTag] = []
        if R.strip_ws(args_str):
            for arg in args_str.split(","):
                arg_types.append(resolve_value_type(arg, scope, line.line_number))

        if not method.accepts_arguments(arg_types):
            raise ArityMismatchError(
                name,
                [str(t) for t in method.parameter_types],
                [str(t) for t in arg_types],
                line.line_number,
            )


# ============================================================================
# CONVENIENCE ENTRY POINTS
# ============================================================================


def verify_source(text: str, config: Optional[VerifierConfig] = None) -> ValidationResult:
    """Classify and validate an in-memory source string."""
    return Validator(classify_source(text), config).validate()


def verify_file(
    path: Union[str, Path],
    config: Optional[VerifierConfig] = None,
) -> ValidationResult:
    """Classify and validate a source file."""
    config = config or DEFAULT_CONFIG
    return Validator(classify_file(path, encoding=config.encoding), config).validate()
