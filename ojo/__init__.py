"""Graggle storage: files as graphs of lines, with deleted nodes and pseudo-edges."""

__version__ = "0.1.1"

__all__ = ["consistency", "edge", "file", "graggle", "multimap", "view"]