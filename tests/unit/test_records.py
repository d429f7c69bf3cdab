"""
Unit tests for mapping variants onto stored rows.
"""
import pytest
from pydantic import ValidationError

from lurespec.models import Variant
from lurespec.schemas.records import LureRow, ProductInfo
from lurespec.services.records import (
    build_rows,
    existence_key,
    pair_color_images,
    tracking_summary,
    unique_rows,
)
from lurespec.utils.slugs import slugify


@pytest.fixture
def product():
    return ProductInfo(
        name="Salt Skimmer 125F",
        manufacturer="Example Lures",
        manufacturer_slug="example-lures",
        type="ミノー",
        price=1980,
        source_url="https://example.com/products/salt-skimmer",
    )


@pytest.fixture
def variants():
    return [
        Variant(weight=18.0, length=125, price=2090, color_name="パールアユ"),
        Variant(weight=18.0, length=125, color_name="チャート"),
        Variant(weight=22.0, length=125, color_name="パールアユ"),
    ]


class TestSlugs:
    """Tests for slug derivation."""

    def test_ascii_name(self):
        assert slugify("Salt Skimmer 125F") == "salt-skimmer-125f"
        assert slugify("  SE_75.2  ") == "se-75-2"

    def test_native_name_is_percent_encoded(self):
        assert slugify("ノーマル") == "%E3%83%8E%E3%83%BC%E3%83%9E%E3%83%AB"

    def test_product_slug_defaults_to_name(self, product):
        assert product.slug == "salt-skimmer-125f"


class TestPairColorImages:
    """Tests for image pairing."""

    def test_first_occurrence_per_color(self, variants):
        images = {"パールアユ": "https://cdn.example.com/01.jpg"}

        assert pair_color_images(variants, images) == [
            ("パールアユ", "https://cdn.example.com/01.jpg"),
        ]

    def test_variants_without_color_are_skipped(self):
        assert pair_color_images([Variant(weight=10.0)], {"": "x"}) == []


class TestBuildRows:
    """Tests for row building."""

    def test_one_row_per_variant(self, variants, product):
        rows = build_rows(variants, product, {"パールアユ": "https://r2.example.com/01.webp"})

        assert len(rows) == 3
        assert rows[0].price == 2090
        assert rows[0].images == ["https://r2.example.com/01.webp"]
        assert rows[0].slug == "salt-skimmer-125f"
        assert rows[0].manufacturer_slug == "example-lures"

    def test_product_price_fills_missing_variant_price(self, variants, product):
        rows = build_rows(variants, product)

        assert rows[1].price == 1980
        assert rows[1].images is None

    def test_rejects_negative_weight(self):
        with pytest.raises(ValidationError):
            LureRow(name="x", slug="x", manufacturer="m", manufacturer_slug="m", weight=-1)


class TestExistence:
    """Tests for existence keys."""

    def test_key(self, variants, product):
        row = build_rows(variants, product)[0]

        assert existence_key(row) == ("salt-skimmer-125f", "パールアユ", 18.0)

    def test_unique_rows(self, product):
        rows = build_rows([
            Variant(weight=18.0, color_name="レッド", price=1000),
            Variant(weight=18.0, length=130, color_name="レッド"),
        ], product)

        assert len(unique_rows(rows)) == 1


class TestTrackingSummary:
    """Tests for the tracking summary."""

    def test_counts_and_message(self, variants):
        summary = tracking_summary(variants, rows_inserted=3)

        assert summary.colors == 2
        assert summary.weights == 2
        assert summary.message == "2色 x 2ウェイト = 3行挿入"

    def test_colors_without_weights_count_one_weight(self):
        summary = tracking_summary([Variant(color_name="レッド"), Variant(color_name="ブルー")], 2)

        assert summary.message == "2色 x 1ウェイト = 2行挿入"

    def test_empty(self):
        assert tracking_summary([], 0).message == "0色 x 0ウェイト = 0行挿入"
