"""Command line interface for paramkit."""
