"""Command line entry point for Lunaria."""
