"""Deterministic aggregations over ledger data."""
