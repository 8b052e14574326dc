"""Command-line interface for planviz."""
