"""Layerlint: architecture layer rules for Kotlin codebases."""

__version__ = "0.1.0"
