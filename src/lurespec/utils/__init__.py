"""
Utility modules for lurespec.
"""
from .slugs import slugify
from .text_cleaning import (
    fold_width,
    normalize,
    normalize_whitespace,
    split_lines,
    strip_html_tags,
)

__all__ = [
    "fold_width",
    "normalize",
    "normalize_whitespace",
    "slugify",
    "split_lines",
    "strip_html_tags",
]
