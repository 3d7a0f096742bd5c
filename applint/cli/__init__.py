"""Command line interface for applint."""
