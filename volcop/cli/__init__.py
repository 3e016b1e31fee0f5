"""Command line interface for Volcop."""
