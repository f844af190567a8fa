"""
s-Java Data Model

Variables, methods and the lexical scope tree the validator builds while it
walks a source file.

Sharing model
-------------
A :class:`Scope` maps names to :class:`Variable` *objects*. When a child
scope resolves a name owned by an ancestor it gets the very same object, so
an assignment made through the child flips ``is_initialized`` for every
scope that can see the variable. ``is_initialized`` is the only mutable
attribute, and it only ever moves from ``False`` to ``True``.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, Optional, Sequence, Tuple

from sjavac.errors import InternalError, RedefinedSymbolError


# ============================================================================
# TYPES
# ============================================================================


class TypeTag(Enum):
    """The five primitive s-Java types."""

    INT = "int"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    CHAR = "char"
    STRING = "String"

    @classmethod
    def from_name(cls, name: str) -> TypeTag:
        """Look a tag up by its source spelling (``"int"``, ``"String"``...)."""
        for tag in cls:
            if tag.value == name:
                return tag
        raise InternalError(f"Unknown type name {name!r}")

    def accepts(self, source: TypeTag) -> bool:
        """Can a value of type *source* be stored in a slot of this type?

        Equal types are compatible; ``double`` widens from ``int``, and
        ``boolean`` widens from ``int`` and ``double``.
        """
        if self is source:
            return True
        return source in _WIDENING.get(self, ())

    def __str__(self) -> str:
        return self.value


_WIDENING: Dict[TypeTag, Tuple[TypeTag, ...]] = {
    TypeTag.DOUBLE: (TypeTag.INT,),
    TypeTag.BOOLEAN: (TypeTag.INT, TypeTag.DOUBLE),
}

# Types an if/while condition operand may have.
CONDITION_TYPES = frozenset({TypeTag.INT, TypeTag.DOUBLE, TypeTag.BOOLEAN})


# ============================================================================
# VARIABLES AND METHODS
# ============================================================================


class Variable:
    """
    A global, local or parameter variable.

    Attributes:
        name: identifier, immutable
        type: :class:`TypeTag`, immutable
        is_final: declared ``final``, immutable
        is_initialized: set once a value has been stored
        declaration_line: 1-based line of the declaration (0 if unknown)
    """

    __slots__ = ("_name", "_type", "_is_final", "_is_initialized", "_declaration_line")

    def __init__(
        self,
        name: str,
        type: TypeTag,
        is_final: bool = False,
        is_initialized: bool = False,
        declaration_line: int = 0,
    ) -> None:
        if is_final and not is_initialized:
            raise InternalError(f"Final variable {name} created without a value")
        self._name = name
        self._type = type
        self._is_final = is_final
        self._is_initialized = is_initialized
        self._declaration_line = declaration_line

    @property
    def name(self) -> str:
        return self._name

    @property
    def type(self) -> TypeTag:
        return self._type

    @property
    def is_final(self) -> bool:
        return self._is_final

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @property
    def declaration_line(self) -> int:
        return self._declaration_line

    def mark_initialized(self) -> None:
        self._is_initialized = True

    def accepts(self, source: TypeTag) -> bool:
        return self._type.accepts(source)

    def __repr__(self) -> str:
        flags = []
        if self._is_final:
            flags.append("final")
        if self._is_initialized:
            flags.append("initialized")
        return f"Variable({self._type} {self._name}{' [' + ', '.join(flags) + ']' if flags else ''})"


class Method:
    """A ``void`` method signature collected in the first pass."""

    __slots__ = ("name", "parameters", "declaration_line")

    def __init__(
        self,
        name: str,
        parameters: Sequence[Variable] = (),
        declaration_line: int = 0,
    ) -> None:
        names = [p.name for p in parameters]
        if len(set(names)) != len(names):
            raise InternalError(f"Method {name} has duplicate parameter names")
        self.name = name
        self.parameters: Tuple[Variable, ...] = tuple(parameters)
        self.declaration_line = declaration_line

    @property
    def parameter_types(self) -> Tuple[TypeTag, ...]:
        return tuple(p.type for p in self.parameters)

    def accepts_arguments(self, arg_types: Sequence[TypeTag]) -> bool:
        """Arity check followed by positional type compatibility."""
        if len(arg_types) != len(self.parameters):
            return False
        return all(p.accepts(t) for p, t in zip(self.parameters, arg_types))

    def __repr__(self) -> str:
        params = ", ".join(
            f"{'final ' if p.is_final else ''}{p.type} {p.name}" for p in self.parameters
        )
        return f"Method(void {self.name}({params}))"


# ============================================================================
# SCOPES
# ============================================================================


class Scope:
    """
    A lexical scope with a parent link.

    The global scope has ``parent=None``. A scope is created when a block is
    entered and dropped when its closing brace is seen; nothing keeps popped
    children alive.
    """

    def __init__(self, parent: Optional[Scope] = None, name: str = "") -> None:
        self.parent = parent
        self.name = name or ("global" if parent is None else "block")
        self.depth: int = 0 if parent is None else parent.depth + 1
        self._variables: Dict[str, Variable] = {}

    @property
    def is_global(self) -> bool:
        return self.parent is None

    def define(self, variable: Variable, line_number: int = 0) -> None:
        """Add *variable*; redeclaring a name of this same scope is an error."""
        existing = self._variables.get(variable.name)
        if existing is not None:
            raise RedefinedSymbolError(
                variable.name,
                line_number,
                where="in global scope" if self.is_global else "in this scope",
                original_line=existing.declaration_line,
            )
        self._variables[variable.name] = variable

    def lookup_local(self, name: str) -> Optional[Variable]:
        return self._variables.get(name)

    def resolve(self, name: str) -> Optional[Variable]:
        """Nearest enclosing variable called *name*, or ``None``."""
        scope: Optional[Scope] = self
        while scope is not None:
            found = scope._variables.get(name)
            if found is not None:
                return found
            scope = scope.parent
        return None

    def child(self, name: str = "block") -> Scope:
        return Scope(parent=self, name=name)

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._variables.values())

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"Scope({self.name!r}, depth={self.depth}, vars={sorted(self._variables)})"
