"""Module system, typed flags, process supervision and helpers for a document conversion service."""

__version__ = "8.0.0"