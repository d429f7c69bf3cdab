"""
Unit tests for the multi-strategy variant extractor.

Tests:
- State transitions
- Strategy precedence
- Failure handling at the strategy boundary
- End-to-end scenarios
"""
import pytest

from lurespec import extract_variants
from lurespec.models import ExtractionConfig, ExtractionState, TaxConvention, Variant
from lurespec.services.variant_extractor import STRATEGY_ORDER, VariantExtractor, next_state


class TestNextState:
    """Tests for the transition function."""

    def test_yield_finishes(self):
        for state in STRATEGY_ORDER:
            assert next_state(state, True) is ExtractionState.DONE

    def test_no_yield_moves_on(self):
        assert next_state(ExtractionState.TRY_TABLE, False) is ExtractionState.TRY_LABEL_VALUE
        assert next_state(ExtractionState.TRY_LABEL_VALUE, False) is ExtractionState.TRY_PROSE
        assert next_state(ExtractionState.TRY_PROSE, False) is ExtractionState.TRY_NUMBERED_FALLBACK
        assert next_state(ExtractionState.TRY_NUMBERED_FALLBACK, False) is ExtractionState.DONE

    def test_done_is_terminal(self):
        assert next_state(ExtractionState.DONE, False) is ExtractionState.DONE


class TestStrategyPrecedence:
    """Tests for first-yield-wins behavior."""

    def test_table_wins_over_prose(self, extractor, spec_table_html, prose_html):
        table_only = extractor.extract(spec_table_html)
        both = extractor.extract(spec_table_html + prose_html)

        assert both.strategy is ExtractionState.TRY_TABLE
        assert both.variants == table_only.variants

    def test_prose_document(self, extractor, prose_html):
        result = extractor.extract(prose_html)

        assert result.strategy is ExtractionState.TRY_PROSE
        assert result.attempted == [
            ExtractionState.TRY_TABLE,
            ExtractionState.TRY_LABEL_VALUE,
            ExtractionState.TRY_PROSE,
        ]

    def test_fallback_is_reached_when_earlier_strategies_fail(self, extraction_config):
        def broken(document, config):
            raise RuntimeError("unexpected markup")

        extractor = VariantExtractor(extraction_config, strategies={
            ExtractionState.TRY_PROSE: broken,
        })
        result = extractor.extract("● 30g<br>● 40g")

        assert result.strategy is ExtractionState.TRY_NUMBERED_FALLBACK
        assert result.variants == [Variant(weight=30.0), Variant(weight=40.0)]
        assert result.errors == ["prose: unexpected markup"]

    def test_non_meaningful_variants_do_not_count(self, extraction_config):
        def prices_only(document, config):
            return [Variant(price=1000)]

        extractor = VariantExtractor(extraction_config, strategies={
            ExtractionState.TRY_TABLE: prices_only,
        })
        result = extractor.extract("●SE75／195mm／約75g")

        assert result.strategy is ExtractionState.TRY_PROSE


class TestExtract:
    """Tests for the public entry points."""

    def test_empty_input(self, extractor):
        for raw in ("", "   ", None):
            result = extractor.extract(raw)
            assert result.is_empty()
            assert result.strategy is None

    def test_irrelevant_document(self, extractor):
        result = extractor.extract("<html><body><p>お問い合わせはこちら</p></body></html>")

        assert result.variants == []
        assert result.attempted == STRATEGY_ORDER[:-1]

    def test_duplicates_are_removed(self, extractor):
        result = extractor.extract("●SE75／195mm／約75g<br>●SE75／195mm／約75g")

        assert len(result.variants) == 1

    def test_convention_override(self, extractor):
        html = """
        <table>
          <tr><th>カラー</th><th>価格</th></tr>
          <tr><td>レッド</td><td>¥1,000</td></tr>
        </table>
        """
        assert extractor.extract(html).variants[0].price == 1000
        assert extractor.extract(html, tax_convention=TaxConvention.EXCLUSIVE).variants[0].price == 1100

    def test_result_to_dict(self, extractor):
        data = extractor.extract("●SE75／195mm／約75g").to_dict()

        assert data["strategy"] == "prose"
        assert data["variants"][0]["model_label"] == "SE75"

    def test_table_scenario(self, extraction_config):
        html = """
        <table>
          <tr><th>SIZE</th><th>WEIGHT</th><th>PRICE</th></tr>
          <tr><td>A</td><td>20g</td><td>¥1,000(税別)</td></tr>
        </table>
        """
        variants = extract_variants(html, config=extraction_config)

        assert variants == [Variant(weight=20.0, length=None, price=1100, color_name=None)]

    def test_prose_scenario(self, extraction_config):
        variants = extract_variants(
            "●SE75／195mm／約75g",
            tax_convention=TaxConvention.INCLUSIVE,
            config=extraction_config,
        )

        assert variants == [
            Variant(weight=75.0, length=195, price=None, color_name=None, model_label="SE75"),
        ]

    def test_english_prose_scenario(self, extraction_config):
        variants = extract_variants("model / 125mm / approx.95g / ¥1,950", config=extraction_config)

        assert variants == [Variant(weight=95.0, length=125, price=1950, model_label="model")]

    def test_plus_tax_prose_scenario(self, extractor):
        result = extractor.extract("<p>● 115mm 約38g ¥1,400+税</p>")

        assert result.strategy is ExtractionState.TRY_PROSE
        assert result.variants == [Variant(weight=38.0, length=115, price=1540)]

    def test_extraction_is_idempotent(self, extractor, spec_table_html):
        assert extractor.extract(spec_table_html).variants == extractor.extract(spec_table_html).variants


class TestExtractionConfig:
    """Tests for configuration validation."""

    def test_rejects_non_positive_rate(self):
        with pytest.raises(ValueError):
            ExtractionConfig(tax_rate=0)

    def test_rejects_inverted_bounds(self):
        with pytest.raises(ValueError):
            ExtractionConfig(price_min=500, price_max=100)

    def test_rejects_unknown_convention(self):
        with pytest.raises(ValueError):
            ExtractionConfig(tax_convention="sometimes")

    def test_accepts_convention_string(self):
        assert ExtractionConfig(tax_convention="exclusive").tax_convention is TaxConvention.EXCLUSIVE
