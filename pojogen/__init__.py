"""Kotlin data-holder generator driven by relational schema metadata."""

__version__ = "0.1.0"
