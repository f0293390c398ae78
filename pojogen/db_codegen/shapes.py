"""Type synthesis: turns a table into data-holder and contract descriptions.

The data holder's structure depends on the table's shape:

* ``COMPACT`` tables (up to ``MAX_ARITY`` columns) get one constructor with a
  defaulted parameter per column.
* ``OVERSIZED`` tables cannot be seeded through a single constructor, so they
  are built either from a contract instance (immutable) or through a
  no-argument constructor followed by assignments (mutable).

Each shape's emission only depends on the columns, the options and the
contract type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Sequence

from ..shared.errors import ConfigurationError
from ..shared.metadata import ColumnFact, TableFact
from ..shared.naming import (
    Mode,
    NamingStrategy,
    capitalize,
    collapse_boolean_accessor,
    escape_identifier,
)
from ..shared.options import GenerationOptions
from .annotations import AnnotationPlanner
from .model import (
    Annotation,
    Constructor,
    Function,
    Parameter,
    Property,
    TypeDescription,
    TypeKind,
)
from .types import TypeNameResolver, TypeRef, type_variable

MAX_ARITY: Final[int] = 255
COPY_CHUNK_SIZE: Final[int] = 200
MAX_DESTRUCTURED_COLUMNS: Final[int] = 5

ANY: Final = TypeRef("kotlin", ("Any",), nullable=True)
BOOLEAN: Final = TypeRef("kotlin", ("Boolean",))
INT: Final = TypeRef("kotlin", ("Int",))
STRING: Final = TypeRef("kotlin", ("String",))


class TableShape(Enum):
    COMPACT = "compact"
    OVERSIZED = "oversized"

    @classmethod
    def of(cls, column_count: int) -> TableShape:
        return cls.OVERSIZED if column_count > MAX_ARITY else cls.COMPACT


@dataclass(frozen=True, slots=True)
class Member:
    """A column as it appears in generated code."""

    column: ColumnFact
    name: str
    label: str
    type: TypeRef
    kdoc: str
    annotations: tuple[Annotation, ...]

    @property
    def is_array(self) -> bool:
        return self.type.is_array or self.column.is_array


def pojo_package(options: GenerationOptions) -> str:
    return f"{options.package_name}.tables.pojos"


def contract_package(options: GenerationOptions) -> str:
    return f"{options.package_name}.tables.interfaces"


def chunked(items: Sequence[Member], size: int) -> list[Sequence[Member]]:
    return [items[i:i + size] for i in range(0, len(items), size)]


def _unique_name(candidate: str, taken: set[str]) -> str:
    name = candidate
    counter = 2
    while name in taken:
        name = f"{candidate}{counter}"
        counter += 1
    return name


def _string_literal_text(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")


def _kdoc_path(qualified_name: str) -> str:
    # KDoc links need backticks around parts with "$" or a leading digit
    return ".".join(
        f"`{part}`" if "$" in part or part[:1].isdigit() else part
        for part in qualified_name.split(".")
    )


class ShapeSynthesizer:
    """Builds ``TypeDescription``s for tables."""

    def __init__(
        self,
        strategy: NamingStrategy,
        resolver: TypeNameResolver,
        planner: AnnotationPlanner,
        options: GenerationOptions,
    ) -> None:
        self.strategy = strategy
        self.resolver = resolver
        self.planner = planner
        self.options = options

    # -- shared pieces -------------------------------------------------

    def contract_type(self, table: TableFact) -> TypeRef:
        return TypeRef(
            contract_package(self.options),
            (self.strategy.class_name(table, Mode.INTERFACE),),
        )

    def super_type(self) -> TypeRef | None:
        if not self.options.pojo_extends.strip():
            return None
        return self.resolver.resolve(self.options.pojo_extends).as_non_nullable()

    def members(self, table: TableFact) -> list[Member]:
        """Resolve names, types and annotations for every column, in order."""
        members: list[Member] = []
        taken: set[str] = set()
        for column in table.columns:
            label = _unique_name(self.strategy.member_name(column), taken)
            taken.add(label)
            prop_type = self.resolver.resolve(column.type_name)
            kdoc = f"Field for [{_kdoc_path(table.qualified_name(column))}]. {column.comment or ''}"
            members.append(
                Member(
                    column=column,
                    name=escape_identifier(label),
                    label=label,
                    type=prop_type,
                    kdoc=kdoc.rstrip(),
                    annotations=tuple(self.planner.property_annotations(column, prop_type)),
                )
            )
        self._check_accessors(table, members)
        return members

    def _check_accessors(self, table: TableFact, members: Sequence[Member]) -> None:
        """Reject members whose JVM accessors clash.

        Kotlin names accessors after the property, so ``isActive`` and
        ``active`` both compile to ``setActive``.

        Raises:
            ConfigurationError: If two members share an accessor name.
        """
        mutable = not self.options.immutable_pojos or self.options.emit_mutable_contracts
        owners: dict[str, str] = {}
        for m in members:
            accessors = [collapse_boolean_accessor(f"get{capitalize(m.label)}")]
            if mutable:
                accessors.append(collapse_boolean_accessor(f"set{capitalize(m.label)}"))
            for accessor in accessors:
                owner = owners.setdefault(accessor, m.column.name)
                if owner != m.column.name:
                    raise ConfigurationError(
                        f"Columns '{owner}' and '{m.column.name}' both compile to "
                        f"accessor '{accessor}'",
                        table=table.name,
                    )

    # -- data holder ---------------------------------------------------

    def data_holder(
        self,
        table: TableFact,
        contract_type: TypeRef | None = None,
        super_type: TypeRef | None = None,
    ) -> TypeDescription:
        """Synthesize the data-holder type for ``table``.

        Raises:
            ConfigurationError: If an immutable data holder is requested for
                an oversized table without a contract type, or against a
                mutable contract.
        """
        options = self.options
        shape = TableShape.of(len(table.columns))
        if shape is TableShape.OVERSIZED and options.immutable_pojos and contract_type is None:
            raise ConfigurationError(
                f"Immutable data holder generated with more than {MAX_ARITY} columns "
                "must have a contract type",
                table=table.name,
            )
        if options.immutable_pojos and contract_type is not None and not options.immutable_contracts:
            raise ConfigurationError(
                "Immutable data holder cannot implement a mutable contract; "
                "set immutable_interfaces as well",
                table=table.name,
            )

        name = self.strategy.class_name(table, Mode.POJO)
        self_type = TypeRef(pojo_package(options), (name,))
        members = self.members(table)
        # Kotlin data classes need at least one constructor parameter
        data_shape = options.emit_data_shape and shape is TableShape.COMPACT and bool(members)

        if shape is TableShape.OVERSIZED:
            modifiers: tuple[str, ...] = ("open",)
            constructors = self.oversized_constructors(members, contract_type)
        else:
            modifiers = ("data",) if data_shape else ("open",)
            constructors = self.compact_constructors(members, contract_type)

        properties = tuple(
            self.data_property(member, shape, contract_type) for member in members
        )

        functions: list[Function] = []
        if options.emit_mutable_contracts and contract_type is not None:
            functions.extend(self.bridging_functions(members, contract_type, override=True))
        if not data_shape:
            if options.emit_equals_and_hash_code:
                functions.append(self.hash_code_function(members))
                functions.append(self.equals_function(name, members))
            if options.emit_to_string:
                functions.append(self.to_string_function(name, members))
            if options.emit_copy_helpers:
                functions.extend(self.copy_functions(name, members, shape, contract_type))
            if options.emit_destructuring:
                functions.extend(self.destructuring_functions(members))

        contracts: list[TypeRef] = [contract_type] if contract_type is not None else []
        contracts.extend(self.resolver.resolve_all(options.pojo_implements))

        return TypeDescription(
            kind=TypeKind.DATA_HOLDER,
            name=name,
            package=self_type.package,
            modifiers=modifiers,
            super_type=super_type,
            contracts=tuple(contracts),
            constructors=tuple(constructors),
            properties=properties,
            functions=tuple(functions),
            annotations=tuple(self.planner.class_annotations(table)),
            kdoc=table.comment,
        )

    def data_property(
        self,
        member: Member,
        shape: TableShape,
        contract_type: TypeRef | None,
    ) -> Property:
        if shape is TableShape.COMPACT:
            initializer = member.name
        elif self.options.immutable_pojos and contract_type is not None:
            initializer = f"value.{member.name}"
        else:
            initializer = "null"
        return Property(
            name=member.name,
            type=member.type,
            mutable=not self.options.immutable_pojos,
            modifiers=("override",) if contract_type is not None else (),
            initializer=initializer,
            kdoc=member.kdoc,
            annotations=member.annotations,
        )

    @staticmethod
    def compact_constructors(
        members: Sequence[Member],
        contract_type: TypeRef | None,
    ) -> list[Constructor]:
        constructors = [
            Constructor(
                parameters=tuple(Parameter(m.name, m.type, "null") for m in members),
                primary=True,
            )
        ]
        if contract_type is not None:
            args = ", ".join(f"value.{m.name}" for m in members)
            constructors.append(
                Constructor(
                    parameters=(Parameter("value", contract_type),),
                    delegate=f"this({args})",
                )
            )
        return constructors

    def oversized_constructors(
        self,
        members: Sequence[Member],
        contract_type: TypeRef | None,
    ) -> list[Constructor]:
        if self.options.immutable_pojos:
            return [Constructor(parameters=(Parameter("value", contract_type),), primary=True)]

        constructors = [Constructor(primary=True)]
        if contract_type is not None:
            constructors.append(
                Constructor(
                    parameters=(Parameter("value", contract_type),),
                    delegate="this()",
                    body=tuple(f"this.{m.name} = value.{m.name}" for m in members),
                )
            )
        return constructors

    # -- shape-independent members ------------------------------------

    @staticmethod
    def bridging_functions(
        members: Sequence[Member],
        contract_type: TypeRef,
        override: bool,
    ) -> list[Function]:
        """``from``/``into`` for mutable contracts; abstract unless ``override``."""
        modifiers = ("override",) if override else ()
        element = type_variable("E")
        from_fn = Function(
            name="from",
            parameters=(Parameter("from", contract_type),),
            modifiers=modifiers,
            body=tuple(f"this.{m.name} = from.{m.name}" for m in members) if override else None,
        )
        into_fn = Function(
            name="into",
            parameters=(Parameter("into", element),),
            returns=element,
            modifiers=modifiers,
            body=("into.from(this)", "return into") if override else None,
            type_variables=(("E", contract_type),),
        )
        return [from_fn, into_fn]

    @staticmethod
    def hash_code_function(members: Sequence[Member]) -> Function:
        body = ["val prime = 31", "var result = 1"]
        for m in members:
            if m.is_array:
                body.append(f"result = prime * result + this.{m.name}.contentHashCode()")
            else:
                body.append(f"result = prime * result + (this.{m.name}?.hashCode() ?: 0)")
        body.append("return result")
        return Function("hashCode", returns=INT, modifiers=("override",), body=tuple(body))

    @staticmethod
    def equals_function(type_name: str, members: Sequence[Member]) -> Function:
        body = [
            "return when {",
            "    this === other -> true",
            "    other == null -> false",
            f"    other is {escape_identifier(type_name)} -> when {{",
        ]
        for m in members:
            if m.is_array:
                body.append(f"        !(this.{m.name} contentEquals other.{m.name}) -> false")
            else:
                body.append(f"        this.{m.name} != other.{m.name} -> false")
        body.extend([
            "        else -> true",
            "    }",
            "    else -> false",
            "}",
        ])
        return Function(
            "equals",
            parameters=(Parameter("other", ANY),),
            returns=BOOLEAN,
            modifiers=("override",),
            body=tuple(body),
        )

    @staticmethod
    def to_string_function(type_name: str, members: Sequence[Member]) -> Function:
        receiver = f"this@{escape_identifier(type_name)}"
        body = ["return buildString {", f'    append("{_string_literal_text(type_name)}(")']
        for index, m in enumerate(members):
            if index:
                body.append('    append(", ")')
            body.append(f'    append("{_string_literal_text(m.label)}=")')
            body.append(f"    append({receiver}.{m.name})")
        body.extend(['    append(")")', "}"])
        return Function("toString", returns=STRING, modifiers=("override",), body=tuple(body))

    def copy_functions(
        self,
        type_name: str,
        members: Sequence[Member],
        shape: TableShape,
        contract_type: TypeRef | None,
    ) -> list[Function]:
        self_type = TypeRef(pojo_package(self.options), (type_name,))
        type_ident = escape_identifier(type_name)

        def parameters(chunk: Sequence[Member]) -> tuple[Parameter, ...]:
            return tuple(Parameter(m.name, m.type, f"this.{m.name}") for m in chunk)

        if shape is TableShape.COMPACT:
            args = ", ".join(m.name for m in members)
            return [
                Function(
                    "copy",
                    parameters=parameters(members),
                    returns=self_type,
                    modifiers=("open",),
                    body=(f"return {type_ident}({args})",),
                )
            ]

        functions: list[Function] = []
        for index, chunk in enumerate(chunked(members, COPY_CHUNK_SIZE), start=1):
            overridden = {m.name for m in chunk}
            if self.options.immutable_pojos:
                body = [f"return {type_ident}(object : {escape_identifier(contract_type.simple_name)} {{"]
                for m in members:
                    source = m.name if m.name in overridden else f"this@{type_ident}.{m.name}"
                    body.append(f"    override val {m.name} = {source}")
                body.append("})")
            else:
                local = _unique_name("copy", {m.label for m in members})
                body = [f"val {local} = {type_ident}()"]
                for m in members:
                    source = m.name if m.name in overridden else f"this.{m.name}"
                    body.append(f"{local}.{m.name} = {source}")
                body.append(f"return {local}")
            functions.append(
                Function(
                    f"copy{index}",
                    parameters=parameters(chunk),
                    returns=self_type,
                    modifiers=("open",),
                    body=tuple(body),
                )
            )
        return functions

    @staticmethod
    def destructuring_functions(members: Sequence[Member]) -> list[Function]:
        if len(members) > MAX_DESTRUCTURED_COLUMNS:
            return []
        return [
            Function(
                f"component{index}",
                returns=m.type,
                modifiers=("open", "operator"),
                body=(f"return this.{m.name}",),
            )
            for index, m in enumerate(members, start=1)
        ]

    # -- contract ------------------------------------------------------

    def contract(self, table: TableFact) -> TypeDescription:
        """Synthesize the contract (interface) type for ``table``."""
        contract_type = self.contract_type(table)
        members = self.members(table)
        properties = tuple(
            Property(
                name=m.name,
                type=m.type,
                mutable=not self.options.immutable_contracts,
                kdoc=m.kdoc,
                annotations=m.annotations,
            )
            for m in members
        )
        functions: list[Function] = []
        if not self.options.immutable_contracts:
            functions.extend(self.bridging_functions(members, contract_type, override=False))

        return TypeDescription(
            kind=TypeKind.CONTRACT,
            name=contract_type.simple_name,
            package=contract_type.package,
            contracts=tuple(self.resolver.resolve_all(self.options.interface_implements)),
            properties=properties,
            functions=tuple(functions),
            annotations=tuple(self.planner.contract_annotations(table)),
            kdoc=table.comment,
        )

    def synthesize(self, table: TableFact) -> list[TypeDescription]:
        """All types generated for ``table``: the contract first, if any."""
        descriptions: list[TypeDescription] = []
        contract_type: TypeRef | None = None
        if self.options.emit_contract_types:
            contract_type = self.contract_type(table)
        data_holder = self.data_holder(table, contract_type, self.super_type())
        if contract_type is not None:
            descriptions.append(self.contract(table))
        descriptions.append(data_holder)
        return descriptions
