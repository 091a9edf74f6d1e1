"""Data loading utilities."""

from .catalog_loader import load_catalog_json

__all__ = ["load_catalog_json"]
