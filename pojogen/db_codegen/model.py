"""Abstract description of a generated Kotlin type.

A ``TypeDescription`` is built per table by the synthesizer, handed to the
emitter and then discarded. Bodies are pre-rendered Kotlin statements; every
type reference the emitter has to import lives in a ``TypeRef`` field.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .types import TypeRef


class TypeKind(Enum):
    DATA_HOLDER = "class"
    CONTRACT = "interface"


@dataclass(frozen=True, slots=True)
class Annotation:
    """An annotation and its members.

    Member values may be ``str`` (string literal), ``bool``, ``int``,
    ``TypeRef`` (a constant such as ``GenerationType.IDENTITY``), a nested
    ``Annotation`` or a tuple of those.
    """

    type: TypeRef
    members: tuple[tuple[str, Any], ...] = ()
    use_site: str | None = None

    def member(self, name: str) -> Any:
        return next((value for key, value in self.members if key == name), None)


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str
    type: TypeRef
    default: str | None = None


@dataclass(frozen=True, slots=True)
class Property:
    name: str
    type: TypeRef
    mutable: bool = True
    modifiers: tuple[str, ...] = ()
    initializer: str | None = None
    kdoc: str | None = None
    annotations: tuple[Annotation, ...] = ()


@dataclass(frozen=True, slots=True)
class Constructor:
    """A constructor; ``delegate`` is e.g. ``this()`` or ``this(value.a)``."""

    parameters: tuple[Parameter, ...] = ()
    primary: bool = False
    delegate: str | None = None
    body: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Function:
    """A member function; ``body`` is ``None`` for abstract functions."""

    name: str
    parameters: tuple[Parameter, ...] = ()
    returns: TypeRef | None = None
    modifiers: tuple[str, ...] = ()
    body: tuple[str, ...] | None = ()
    type_variables: tuple[tuple[str, TypeRef], ...] = ()


@dataclass(frozen=True, slots=True)
class TypeDescription:
    kind: TypeKind
    name: str
    package: str
    modifiers: tuple[str, ...] = ()
    super_type: TypeRef | None = None
    contracts: tuple[TypeRef, ...] = ()
    constructors: tuple[Constructor, ...] = ()
    properties: tuple[Property, ...] = ()
    functions: tuple[Function, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    kdoc: str | None = None

    @property
    def type_ref(self) -> TypeRef:
        return TypeRef(self.package, (self.name,))

    @property
    def primary_constructor(self) -> Constructor | None:
        return next((ctor for ctor in self.constructors if ctor.primary), None)

    @property
    def secondary_constructors(self) -> tuple[Constructor, ...]:
        return tuple(ctor for ctor in self.constructors if not ctor.primary)

    def function(self, name: str) -> Function | None:
        return next((fn for fn in self.functions if fn.name == name), None)

    def functions_named(self, prefix: str) -> list[Function]:
        return [fn for fn in self.functions if fn.name.startswith(prefix)]
