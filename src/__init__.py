"""Multiverse Lens - semantic search and structured generation over a character knowledge graph."""

__version__ = "0.1.0"
