"""Utility helpers: asset paths and JSON asset I/O."""
