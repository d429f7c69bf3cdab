"""
Unit tests for variant deduplication.
"""
from lurespec.models import Variant
from lurespec.services.variant_merge import dedupe


class TestDedupe:
    """Tests for identity-key deduplication."""

    def test_first_occurrence_wins(self):
        variants = [
            Variant(weight=10.0, color_name="レッド", price=1000),
            Variant(weight=10.0, color_name="レッド", price=1200),
        ]

        assert dedupe(variants) == [Variant(weight=10.0, color_name="レッド", price=1000)]

    def test_keeps_distinct_variants_in_order(self):
        variants = [
            Variant(weight=14.0, color_name="ブルー"),
            Variant(weight=10.0, color_name="レッド"),
            Variant(weight=10.0, color_name="ブルー"),
        ]

        assert dedupe(variants) == variants

    def test_model_label_is_part_of_identity(self):
        variants = [
            Variant(weight=7.5, model_label="ノーマル"),
            Variant(weight=7.5, model_label="L-Quiet"),
        ]

        assert len(dedupe(variants)) == 2

    def test_idempotent(self):
        variants = [
            Variant(weight=10.0),
            Variant(weight=10.0),
            Variant(weight=12.0),
            Variant(weight=10.0),
        ]
        once = dedupe(variants)

        assert dedupe(once) == once
        assert [v.weight for v in once] == [10.0, 12.0]

    def test_empty(self):
        assert dedupe([]) == []
