"""Command-line interface for nearrpc."""
