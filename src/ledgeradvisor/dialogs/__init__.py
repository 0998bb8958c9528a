"""Advisor persona and dialog catalog."""

from .catalog import DialogCatalog, load_dialog_catalog, read_dialog_catalog, default_catalog

__all__ = ["DialogCatalog", "load_dialog_catalog", "read_dialog_catalog", "default_catalog"]
