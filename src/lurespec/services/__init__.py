"""
Business logic services for variant extraction.

Provides modular components for:
- Column role classification of spec tables
- Unit and price conversion
- Strategy-ordered variant extraction
- Variant deduplication
- Mapping variants onto stored rows
"""

from .column_roles import classify, classify_label
from .converters import (
    clean_color_name,
    find_grams,
    to_grams,
    to_millimeters,
    to_minor_currency_unit,
)
from .variant_extractor import VariantExtractor, extract_variants, next_state
from .variant_merge import dedupe

__all__ = [
    'classify',
    'classify_label',
    'clean_color_name',
    'find_grams',
    'to_grams',
    'to_millimeters',
    'to_minor_currency_unit',
    'VariantExtractor',
    'extract_variants',
    'next_state',
    'dedupe',
]
