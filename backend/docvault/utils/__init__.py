"""
Utility functions - Pure functions with no service dependencies.
These can be used across all layers.
"""
from .validators import get_file_type, sanitize_filename

__all__ = [
    "get_file_type",
    "sanitize_filename",
]
