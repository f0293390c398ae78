"""
DB Code Generator - Generates Kotlin data holders and contracts from schema metadata.

A run loads every schema file, synthesizes all types and only then writes
files, so a fatal configuration error leaves no output behind.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from .. import __version__
from ..shared import (
    GenerationOptions,
    Mode,
    NamingStrategy,
    SchemaError,
    SchemaMetadata,
    create_naming_strategy,
    collect_schema_paths,
    load_metadata,
    merge_option_bags,
    parse_option_pairs,
    parse_options,
)
from .annotations import AnnotationPlanner
from .emitter import KotlinEmitter, write_source
from .model import TypeDescription
from .shapes import ShapeSynthesizer
from .types import TypeNameResolver


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass
class GenerationContext:
    """Everything one schema's generation needs, built once and passed down."""

    options: GenerationOptions
    generated_at: str = field(default_factory=_utc_timestamp)
    strategy: NamingStrategy = field(init=False)
    resolver: TypeNameResolver = field(init=False)
    planner: AnnotationPlanner = field(init=False)
    synthesizer: ShapeSynthesizer = field(init=False)

    def __post_init__(self) -> None:
        self.strategy = create_naming_strategy(
            self.options.plain_record_suffix,
            self.options.bean_accessor_style,
        )
        self.resolver = TypeNameResolver()
        self.planner = AnnotationPlanner(self.options, self.generated_at, __version__)
        self.synthesizer = ShapeSynthesizer(
            self.strategy, self.resolver, self.planner, self.options
        )

    @classmethod
    def for_schema(
        cls,
        metadata: SchemaMetadata,
        option_overrides: Mapping[str, Any] | None = None,
        generated_at: str | None = None,
    ) -> GenerationContext:
        """Context whose options are the schema's own, then ``option_overrides``."""
        options = parse_options(merge_option_bags(metadata.options, option_overrides))
        if generated_at is None:
            return cls(options)
        return cls(options, generated_at)


def output_path(description: TypeDescription, output_dir: Path) -> Path:
    """``<output>/<package path>/<Name>.kt``."""
    return output_dir.joinpath(*description.package.split("."), f"{description.name}.kt")


def synthesize(
    metadata: SchemaMetadata,
    option_overrides: Mapping[str, Any] | None = None,
    generated_at: str | None = None,
) -> list[TypeDescription]:
    """Synthesize every type for one schema, in table order.

    Raises:
        ConfigurationError: If a table's options cannot be honoured.
        ValueError: If a column type cannot be resolved.
    """
    ctx = GenerationContext.for_schema(metadata, option_overrides, generated_at)
    descriptions: list[TypeDescription] = []
    for table in metadata.tables:
        descriptions.extend(ctx.synthesizer.synthesize(table))
    return descriptions


def load_all(schema_paths: Sequence[Path]) -> list[SchemaMetadata]:
    return [load_metadata(path) for path in schema_paths]


def generate(
    schema_paths: Sequence[Path],
    output_dir: Path,
    option_overrides: Mapping[str, Any] | None = None,
) -> int:
    """Generate Kotlin sources from schema files.

    Args:
        schema_paths: Paths to schema YAML files.
        output_dir: Root directory for generated sources.
        option_overrides: Options applied on top of each schema's own.

    Returns:
        Number of types written.
    """
    descriptions: list[TypeDescription] = []
    for metadata in load_all(schema_paths):
        descriptions.extend(synthesize(metadata, option_overrides))

    emitter = KotlinEmitter()
    rendered = [(output_path(d, output_dir), emitter.render(d)) for d in descriptions]
    for path, source in rendered:
        write_source(path, source)
    return len(rendered)


def naming_report(
    schema_paths: Sequence[Path],
    option_overrides: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Names the generator would use, keyed by schema file then table."""
    report: dict[str, Any] = {}
    for metadata in load_all(schema_paths):
        ctx = GenerationContext.for_schema(metadata, option_overrides)
        strategy = ctx.strategy
        tables: dict[str, Any] = {}
        for table in metadata.tables:
            entry: dict[str, Any] = {
                "pojo": strategy.class_name(table, Mode.POJO),
                "interface": strategy.class_name(table, Mode.INTERFACE),
                "columns": {
                    column.name: {
                        "member": strategy.member_name(column),
                        "getter": strategy.getter_name(column),
                        "setter": strategy.setter_name(column),
                    }
                    for column in table.columns
                },
            }
            if table.foreign_keys:
                entry["foreign_keys"] = {
                    fk.name: strategy.method_name(fk, owner=table) for fk in table.foreign_keys
                }
            tables[table.name] = entry
        report[metadata.source or ""] = {
            "catalog": strategy.class_name(metadata.schema.catalog),
            "schema": strategy.class_name(metadata.schema),
            "tables": tables,
        }
    return report


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        type=Path,
        nargs="+",
        help="Schema file(s) or directories containing schema YAML files",
    )
    parser.add_argument(
        "-o",
        "--option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Generation option overriding the schema's own (repeatable)",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate Kotlin data holders from schema definitions",
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("build/generated/kotlin"),
        help="Root directory for generated sources",
    )

    args = parser.parse_args(argv)

    try:
        schema_paths = collect_schema_paths(args.paths)
        if not schema_paths:
            raise SystemExit("No schema files found")

        output_dir = args.output_dir.resolve()
        type_count = generate(schema_paths, output_dir, parse_option_pairs(args.option))

        print(
            f"Generated {type_count} type(s) from "
            f"{len(schema_paths)} schema file(s) into {output_dir}"
        )
    except (SchemaError, FileNotFoundError) as e:
        raise SystemExit(f"Error: {e}") from e


def names_main(argv: list[str] | None = None) -> None:
    """CLI entry point for the naming report."""
    parser = argparse.ArgumentParser(
        description="Show the names generated for schema definitions",
    )
    _add_common_arguments(parser)
    args = parser.parse_args(argv)

    try:
        schema_paths = collect_schema_paths(args.paths)
        if not schema_paths:
            raise SystemExit("No schema files found")
        report = naming_report(schema_paths, parse_option_pairs(args.option))
    except (SchemaError, FileNotFoundError) as e:
        raise SystemExit(f"Error: {e}") from e

    print(yaml.safe_dump(report, sort_keys=False), end="")


if __name__ == "__main__":
    main()
