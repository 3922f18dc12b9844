"""Command line interface for wgdash."""
