"""
Unit tests for environment-backed configuration.
"""
from lurespec.config import Config
from lurespec.models import ExtractionConfig, TaxConvention


class TestConfig:
    """Tests for Config validation."""

    def test_defaults_are_valid(self):
        assert Config.is_valid()
        assert Config.validate() == []

    def test_invalid_convention(self, monkeypatch):
        monkeypatch.setattr(Config, "TAX_CONVENTION", "sometimes")

        assert any("TAX_CONVENTION" in e for e in Config.validate())

    def test_inverted_price_bounds(self, monkeypatch):
        monkeypatch.setattr(Config, "PRICE_MIN", 5000)
        monkeypatch.setattr(Config, "PRICE_MAX", 100)

        assert not Config.is_valid()

    def test_default_tax_convention(self, monkeypatch):
        monkeypatch.setattr(Config, "TAX_CONVENTION", "exclusive")

        assert Config.default_tax_convention() is TaxConvention.EXCLUSIVE
        assert ExtractionConfig.default().tax_convention is TaxConvention.EXCLUSIVE

    def test_summary(self):
        summary = Config.get_summary()

        assert "tax_rate" in summary
        assert "max_grid_columns" in summary
