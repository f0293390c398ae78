"""Type references and JVM-to-Kotlin type resolution."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Final

# java.lang types that have a Kotlin built-in counterpart
KOTLIN_BUILTINS: Final[dict[str, str]] = {
    "java.lang.String": "kotlin.String",
    "java.lang.CharSequence": "kotlin.CharSequence",
    "java.lang.Integer": "kotlin.Int",
    "java.lang.Long": "kotlin.Long",
    "java.lang.Short": "kotlin.Short",
    "java.lang.Byte": "kotlin.Byte",
    "java.lang.Boolean": "kotlin.Boolean",
    "java.lang.Double": "kotlin.Double",
    "java.lang.Float": "kotlin.Float",
    "java.lang.Character": "kotlin.Char",
    "java.lang.Number": "kotlin.Number",
    "java.lang.Object": "kotlin.Any",
}

PRIMITIVE_ARRAYS: Final[dict[str, str]] = {
    "boolean[]": "kotlin.BooleanArray",
    "byte[]": "kotlin.ByteArray",
    "short[]": "kotlin.ShortArray",
    "int[]": "kotlin.IntArray",
    "long[]": "kotlin.LongArray",
    "float[]": "kotlin.FloatArray",
    "double[]": "kotlin.DoubleArray",
}

_SIMPLE_NAME = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


@dataclass(frozen=True, slots=True)
class TypeRef:
    """Reference to a Kotlin type.

    ``simple_names`` holds the enclosing chain for nested types, e.g.
    ``("GenerationType", "IDENTITY")``.
    """

    package: str
    simple_names: tuple[str, ...]
    nullable: bool = False

    @property
    def simple_name(self) -> str:
        return self.simple_names[-1]

    @property
    def top_level(self) -> str:
        return self.simple_names[0]

    @property
    def canonical_name(self) -> str:
        names = ".".join(self.simple_names)
        return f"{self.package}.{names}" if self.package else names

    @property
    def is_array(self) -> bool:
        return self.canonical_name in PRIMITIVE_ARRAYS.values()

    def as_nullable(self) -> TypeRef:
        return self if self.nullable else replace(self, nullable=True)

    def as_non_nullable(self) -> TypeRef:
        return replace(self, nullable=False) if self.nullable else self

    def __str__(self) -> str:
        return self.canonical_name + ("?" if self.nullable else "")


def type_variable(name: str) -> TypeRef:
    """A type variable such as ``E``; it never needs an import."""
    return TypeRef("", (name,))


@lru_cache(maxsize=512)
def best_guess(name: str) -> TypeRef:
    """Guess package and simple names from a dotted class name.

    The first segment starting with an upper-case letter begins the
    class name; everything before it is the package.

    Raises:
        ValueError: If no class name can be guessed.
    """
    segments = name.split(".")
    start = next((i for i, seg in enumerate(segments) if seg[:1].isupper()), None)
    if start is None:
        raise ValueError(f"couldn't make a guess for {name}")
    simple_names = tuple(segments[start:])
    if not all(_SIMPLE_NAME.match(part) for part in simple_names):
        raise ValueError(f"couldn't make a guess for {name}")
    package = ".".join(segments[:start])
    if any(not part for part in segments[:start]):
        raise ValueError(f"couldn't make a guess for {name}")
    return TypeRef(package, simple_names)


class TypeNameResolver:
    """Maps JVM type descriptors to Kotlin type references.

    Every reference it returns is nullable; callers strip nullability where
    the use site requires it.
    """

    def __init__(self) -> None:
        self._cache: dict[str, TypeRef] = {}

    def resolve(self, type_name: str) -> TypeRef:
        """Resolve ``type_name``; lookup failures propagate unchanged."""
        cached = self._cache.get(type_name)
        if cached is not None:
            return cached

        if type_name in KOTLIN_BUILTINS:
            resolved = best_guess(KOTLIN_BUILTINS[type_name])
        elif type_name in PRIMITIVE_ARRAYS:
            resolved = best_guess(PRIMITIVE_ARRAYS[type_name])
        else:
            resolved = best_guess(type_name)

        resolved = resolved.as_nullable()
        self._cache[type_name] = resolved
        return resolved

    def resolve_all(self, type_names: tuple[str, ...] | list[str]) -> list[TypeRef]:
        """Resolve a list of supertype names, dropping blanks, non-nullable."""
        return [self.resolve(name).as_non_nullable() for name in type_names if name.strip()]
