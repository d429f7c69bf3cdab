"""
lurespec - Variant extraction for fishing lure product pages.

Turns one vendor product page into the list of purchasable variants
(weight, length, tax-included price, color, sub-model) it describes.
"""

__version__ = "1.0.0"

from .models import (
    ColumnRole,
    ExtractionConfig,
    ExtractionResult,
    ExtractionState,
    TaxConvention,
    Variant,
)
from .services.variant_extractor import VariantExtractor, extract_variants

__all__ = [
    "ColumnRole",
    "ExtractionConfig",
    "ExtractionResult",
    "ExtractionState",
    "TaxConvention",
    "Variant",
    "VariantExtractor",
    "extract_variants",
]
