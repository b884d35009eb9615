"""Command line entry points for Dependency Inspector."""
