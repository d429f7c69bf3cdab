"""
Variant deduplication.

Variants are identical when their identity keys match: (weight, length,
color_name, model_label). Price is not part of the key, so the same variant
listed twice with differing prices keeps its first price.
"""
from __future__ import annotations

from typing import Iterable, List, Set

from ..logger import get_logger
from ..models import IdentityKey, Variant

logger = get_logger(__name__)


def dedupe(variants: Iterable[Variant]) -> List[Variant]:
    """
    Drop repeated variants, first occurrence wins.

    Order is preserved and the operation is idempotent:
    ``dedupe(dedupe(v)) == dedupe(v)``.

    Args:
        variants: Variants in document order

    Returns:
        Variants with unique identity keys
    """
    seen: Set[IdentityKey] = set()
    unique: List[Variant] = []
    dropped = 0

    for variant in variants:
        key = variant.identity_key()
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(variant)

    if dropped:
        logger.debug("DEDUPE Dropped %d repeated variants", dropped)

    return unique
