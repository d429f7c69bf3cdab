"""
Pytest configuration and fixtures for lurespec tests.
"""
import sys
from pathlib import Path

# Add src to path for imports
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

import pytest
from lurespec.models import ExtractionConfig, TaxConvention
from lurespec.services.variant_extractor import VariantExtractor


@pytest.fixture
def extraction_config():
    """Tax-inclusive configuration with the standard bounds."""
    return ExtractionConfig(
        tax_convention=TaxConvention.INCLUSIVE,
        tax_rate=1.10,
        max_columns=20,
        price_min=100,
        price_max=1_000_000,
    )


@pytest.fixture
def exclusive_config(extraction_config):
    """Same configuration for vendors quoting prices before tax."""
    return extraction_config.with_convention(TaxConvention.EXCLUSIVE)


@pytest.fixture
def extractor(extraction_config):
    """Create an extractor for testing."""
    return VariantExtractor(extraction_config)


@pytest.fixture
def spec_table_html():
    """Spec table sharing weight and price across color rows via rowspan."""
    return """
    <table class="spec">
      <tr><th>品名</th><th>カラー</th><th>全長</th><th>自重</th><th>価格(税別)</th></tr>
      <tr><td rowspan="2">SE75</td><td>#01 パールアユ</td><td rowspan="2">75mm</td><td rowspan="2">7.5g</td><td rowspan="2">¥1,600</td></tr>
      <tr><td>#02 チャート</td></tr>
      <tr><td>SE95</td><td>#01 パールアユ</td><td>95mm</td><td>12g</td><td>¥1,800</td></tr>
    </table>
    """


@pytest.fixture
def prose_html():
    """Inline prose with prices on the following line."""
    return """
    <div class="spec">
      <p>● 115mm 約38g<br>¥1,400(税別)</p>
      <p>● 130mm 約52g<br>¥1,500(税別)</p>
    </div>
    """
