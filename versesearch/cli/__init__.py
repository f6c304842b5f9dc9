"""Command line interface for verse search."""
