"""Naming strategies for generated Kotlin code.

Schema identifiers arrive in whatever shape the database uses
(``ORDER_ID``, ``order-lines``, ``1099_FORM``). The strategies here turn them
into Kotlin class, member and accessor names.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from enum import Enum
from functools import lru_cache

from .metadata import CatalogFact, Definition, ForeignKeyFact, SchemaFact, TableFact

KOTLIN_KEYWORDS: frozenset[str] = frozenset({
    "as",
    "break",
    "class",
    "continue",
    "do",
    "else",
    "false",
    "for",
    "fun",
    "if",
    "in",
    "interface",
    "is",
    "null",
    "object",
    "package",
    "return",
    "super",
    "this",
    "throw",
    "true",
    "try",
    "typealias",
    "typeof",
    "val",
    "var",
    "when",
    "while",
})

_WORD_SEPARATORS = re.compile(r"[ \-._]")
_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Mode(Enum):
    """The kind of artifact a name is generated for."""

    DEFAULT = "default"
    RECORD = "record"
    DAO = "dao"
    INTERFACE = "interface"
    POJO = "pojo"


def capitalize(value: str) -> str:
    """Upper-case the first character only, leaving the rest untouched."""
    return value[:1].upper() + value[1:]


def decapitalize(value: str) -> str:
    """Lower-case the first character only, leaving the rest untouched."""
    return value[:1].lower() + value[1:]


def _is_shouting(word: str) -> bool:
    return word == word.upper()


@lru_cache(maxsize=1024)
def normalize(raw_name: str, mode: Mode = Mode.DEFAULT, plain_record_suffix: str = "") -> str:
    """Convert a schema identifier into a PascalCase Kotlin identifier.

    Uses caching for repeated calls with the same input.

    Examples:
        >>> normalize("order_lines")
        'OrderLines'
        >>> normalize("ORDER_ID")
        'OrderId'
        >>> normalize("1099_FORM")
        '_1099Form'
        >>> normalize("customer", Mode.INTERFACE)
        'ICustomer'
    """
    words = [capitalize(word) for word in _WORD_SEPARATORS.split(raw_name)]
    if all(_is_shouting(word) for word in words):
        words = [capitalize(word.lower()) for word in words]

    name = "".join(words)
    if name[:1].isdigit():
        name = f"_{name}"

    if mode is Mode.RECORD:
        name = f"{name}Record"
    elif mode is Mode.DAO:
        name = f"{name}Dao"
    elif mode is Mode.INTERFACE:
        name = f"I{name}"
    elif mode is Mode.POJO and plain_record_suffix.strip():
        name = f"{name}{plain_record_suffix}"
    return name


@lru_cache(maxsize=1024)
def escape_identifier(name: str) -> str:
    """Backtick-quote a name Kotlin would not accept bare."""
    if name in KOTLIN_KEYWORDS or not _PLAIN_IDENTIFIER.match(name):
        return f"`{name}`"
    return name


def collapse_boolean_accessor(name: str) -> str:
    """Collapse ``getIsX``/``setIsX`` into the names Kotlin compiles ``isX`` to.

    Examples:
        >>> collapse_boolean_accessor("getIsActive")
        'isActive'
        >>> collapse_boolean_accessor("setIsActive")
        'setActive'
        >>> collapse_boolean_accessor("getIsland")
        'getIsland'
    """
    if len(name) > 6 and name[3] == "I" and name[4] == "s" and name[5].isupper():
        if name.startswith("g"):
            return decapitalize(name[3:])
        return name[:3] + name[5:]
    return name


class NamingStrategy(ABC):
    """Interface for turning schema definitions into Kotlin names."""

    @abstractmethod
    def class_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        """Return the type name generated for ``definition``."""

    @abstractmethod
    def member_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        """Return the property/field name generated for ``definition``."""

    @abstractmethod
    def getter_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        """Return the JVM getter name for ``definition``."""

    @abstractmethod
    def setter_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        """Return the JVM setter name for ``definition``."""

    @abstractmethod
    def method_name(
        self,
        definition: Definition,
        mode: Mode = Mode.DEFAULT,
        owner: TableFact | None = None,
    ) -> str:
        """Return the method name for ``definition``.

        ``owner`` is the table declaring ``definition`` when it is a foreign key.
        """


class DefaultNamingStrategy(NamingStrategy):
    """Word-splitting strategy with shouting-case and digit handling."""

    def __init__(self, plain_record_suffix: str = "", bean_accessor_style: bool = False) -> None:
        self.plain_record_suffix = plain_record_suffix
        self.bean_accessor_style = bean_accessor_style

    def fixed_class_name(self, definition: Definition) -> str | None:
        if isinstance(definition, CatalogFact) and definition.default:
            return "DefaultCatalog"
        if isinstance(definition, SchemaFact) and definition.default:
            return "DefaultSchema"
        return None

    def class_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        fixed = self.fixed_class_name(definition)
        if fixed is not None:
            return fixed
        return normalize(definition.name, mode, self.plain_record_suffix)

    def member_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        return decapitalize(normalize(definition.name, Mode.DEFAULT))

    def getter_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        return f"get{self._accessor_suffix(definition)}"

    def setter_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        return f"set{self._accessor_suffix(definition)}"

    def method_name(
        self,
        definition: Definition,
        mode: Mode = Mode.DEFAULT,
        owner: TableFact | None = None,
    ) -> str:
        if isinstance(definition, ForeignKeyFact):
            if definition.method_name:
                return definition.method_name
            if owner is not None and len(owner.foreign_keys_to(definition.referenced_table)) == 1:
                return decapitalize(normalize(definition.referenced_table, Mode.DEFAULT))
        return decapitalize(normalize(definition.name, Mode.DEFAULT))

    def _accessor_suffix(self, definition: Definition) -> str:
        if not self.bean_accessor_style:
            return normalize(definition.name, Mode.DEFAULT)
        # JavaBeans: "xCoord" keeps its case, "name" becomes "Name"
        name = self.member_name(definition)
        if name[:1].isupper() or name[1:2].isupper():
            return name
        return capitalize(name)


class BooleanAccessorStrategy(NamingStrategy):
    """Wraps another strategy and collapses ``getIs``/``setIs`` accessors.

    Kotlin compiles a property ``isActive`` to ``isActive()``/``setActive()``,
    so the delegate's ``getIsActive``/``setIsActive`` would not resolve.
    """

    def __init__(self, delegate: NamingStrategy) -> None:
        self.delegate = delegate

    def class_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        return self.delegate.class_name(definition, mode)

    def member_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        return self.delegate.member_name(definition, mode)

    def getter_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        return collapse_boolean_accessor(self.delegate.getter_name(definition, mode))

    def setter_name(self, definition: Definition, mode: Mode = Mode.DEFAULT) -> str:
        return collapse_boolean_accessor(self.delegate.setter_name(definition, mode))

    def method_name(
        self,
        definition: Definition,
        mode: Mode = Mode.DEFAULT,
        owner: TableFact | None = None,
    ) -> str:
        return self.delegate.method_name(definition, mode, owner)


def create_naming_strategy(plain_record_suffix: str = "", bean_accessor_style: bool = False) -> NamingStrategy:
    """Create the strategy used for a generation run."""
    return BooleanAccessorStrategy(
        DefaultNamingStrategy(plain_record_suffix, bean_accessor_style)
    )
