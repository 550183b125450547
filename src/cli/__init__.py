"""Multiverse Lens command-line interface."""
