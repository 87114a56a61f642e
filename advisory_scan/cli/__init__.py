"""Command line interface for advisory-scan."""
