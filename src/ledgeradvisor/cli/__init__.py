"""Command-line interface for ledger-advisor."""
