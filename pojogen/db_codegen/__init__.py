"""DB Code Generator - Generates Kotlin types from schema definitions."""

from .main import (
    GenerationContext,
    generate,
    main,
    names_main,
    naming_report,
    synthesize,
)

__all__ = [
    "GenerationContext",
    "generate",
    "main",
    "names_main",
    "naming_report",
    "synthesize",
]
