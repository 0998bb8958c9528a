"""Ledger ingest: loading and saving bookkeeping data."""

from .ledger_loader import load_ledger, parse_ledger, append_record

__all__ = ["load_ledger", "parse_ledger", "append_record"]
