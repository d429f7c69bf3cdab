"""
Caller-side mapping of extracted variants onto stored rows.

The engine stops at a variant list. Scrapers that persist results share
these helpers for image pairing, row building, existence checks and the
tracking summary, so every caller keys and reports rows the same way.
"""
from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Set, Tuple

from ..logger import get_logger
from ..models import Variant
from ..schemas.records import LureRow, ProductInfo, TrackingSummary

logger = get_logger(__name__)

ExistenceKey = Tuple[str, Optional[str], Optional[float]]


def pair_color_images(variants: Iterable[Variant], images: Mapping[str, str]) -> List[Tuple[str, str]]:
    """
    (color_name, image_url) pairs for the image pipeline.

    Only variants with a color and a known image contribute; each color is
    paired once, at its first occurrence.
    """
    pairs: List[Tuple[str, str]] = []
    seen: Set[str] = set()

    for variant in variants:
        color = variant.color_name
        if not color or color in seen:
            continue
        url = images.get(color)
        if not url:
            continue
        seen.add(color)
        pairs.append((color, url))

    return pairs


def build_rows(
    variants: Iterable[Variant],
    product: ProductInfo,
    image_urls: Optional[Mapping[str, str]] = None,
) -> List[LureRow]:
    """
    Map variants plus product metadata onto rows.

    Args:
        variants: Extracted variants
        product: Product-level metadata
        image_urls: Uploaded image URL per color name

    Returns:
        One row per variant; the product price fills in where a variant has none
    """
    image_urls = image_urls or {}
    rows: List[LureRow] = []

    for variant in variants:
        image = image_urls.get(variant.color_name) if variant.color_name else None
        rows.append(LureRow(
            name=product.name,
            slug=product.slug,
            manufacturer=product.manufacturer,
            manufacturer_slug=product.manufacturer_slug,
            type=product.type,
            price=variant.price if variant.price is not None else product.price,
            description=product.description,
            images=[image] if image else None,
            color_name=variant.color_name,
            weight=variant.weight,
            length=variant.length,
            source_url=product.source_url,
            is_limited=product.is_limited,
            is_discontinued=product.is_discontinued,
        ))

    return rows


def existence_key(row: LureRow) -> ExistenceKey:
    """Key the store checks before inserting: (slug, color_name, weight)."""
    return (row.slug, row.color_name, row.weight)


def unique_rows(rows: Iterable[LureRow]) -> List[LureRow]:
    """Drop rows whose existence key was already seen, first one wins."""
    seen: Set[ExistenceKey] = set()
    unique: List[LureRow] = []

    for row in rows:
        key = existence_key(row)
        if key in seen:
            logger.debug("RECORDS Skipping duplicate row: %s / %s / %s", *key)
            continue
        seen.add(key)
        unique.append(row)

    return unique


def tracking_summary(variants: Iterable[Variant], rows_inserted: int) -> TrackingSummary:
    """
    Summary reported to the tracking record after an insert run.

    Products without any weight still count as one weight per color, matching
    how their rows are inserted.
    """
    variants = list(variants)
    colors = {v.color_name for v in variants if v.color_name}
    weights = {v.weight for v in variants if v.weight is not None}

    weight_count = len(weights) or (1 if variants else 0)

    return TrackingSummary(
        colors=len(colors),
        weights=weight_count,
        rows_inserted=rows_inserted,
        message=f"{len(colors)}色 x {weight_count}ウェイト = {rows_inserted}行挿入",
    )
