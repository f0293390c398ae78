#!/usr/bin/env python3
"""
pojogen command line.

Usage:
    python -m pojogen <command> [options]

Commands:
    generate    Generate Kotlin sources from schema files
    names       Print the names generated for schema definitions

Examples:
    python -m pojogen generate schemas/ --output-dir build/generated/kotlin
    python -m pojogen generate schema.yaml -o interfaces=true -o copy=true
    python -m pojogen names schema.yaml
"""

from __future__ import annotations

import sys


def _run(entry, args: list[str]) -> int:
    try:
        entry(args)
        return 0
    except SystemExit as e:
        if isinstance(e.code, str):
            print(e.code, file=sys.stderr)
            return 1
        return e.code if isinstance(e.code, int) else 0


def cmd_generate(args: list[str]) -> int:
    """Generate Kotlin sources."""
    from pojogen.db_codegen import main
    return _run(main, args)


def cmd_names(args: list[str]) -> int:
    """Print the naming report."""
    from pojogen.db_codegen import names_main
    return _run(names_main, args)


COMMANDS = {
    "generate": (cmd_generate, "Generate Kotlin sources from schema files"),
    "names": (cmd_names, "Print the names generated for schema definitions"),
}


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ("-h", "--help"):
        print(__doc__)
        print("Available commands:")
        for name, (_, desc) in COMMANDS.items():
            print(f"  {name:12} {desc}")
        print("\nUse '<command> --help' for command-specific options.")
        return 0

    command = argv[0]
    args = argv[1:]

    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS.keys())}")
        return 1

    handler, _ = COMMANDS[command]
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
