"""Command-line interface for ledgerwise."""
