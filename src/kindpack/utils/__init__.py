"""Utility functions for kindpack.

This module provides size calculation, buffer inspection and trace logging.
"""

from __future__ import annotations

from .sizing import ObjectLayout, encoded_size, field_sizes, object_layout
from .trace import configure_tracing, tracing_from_env

__all__ = [
    # Sizing functions
    "encoded_size",
    "field_sizes",
    "object_layout",
    "ObjectLayout",
    # Tracing
    "configure_tracing",
    "tracing_from_env",
]
