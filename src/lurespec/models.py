"""
Data models for lurespec variant extraction.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Tuple

from .config import Config


class ColumnRole(str, Enum):
    """Semantic role of a spec table column."""

    MODEL = "model"
    WEIGHT = "weight"
    LENGTH = "length"
    PRICE = "price"
    COLOR = "color"
    CODE = "code"
    UNKNOWN = "unknown"


class TaxConvention(str, Enum):
    """How a source quotes its prices."""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class ExtractionState(str, Enum):
    """States of the multi-strategy extractor, in transition order."""

    TRY_TABLE = "table"
    TRY_LABEL_VALUE = "label_value"
    TRY_PROSE = "prose"
    TRY_NUMBERED_FALLBACK = "numbered_fallback"
    DONE = "done"


# Resolved table: grid[row][col], rectangular
Grid = List[List[str]]

IdentityKey = Tuple[Optional[float], Optional[int], Optional[str], Optional[str]]


@dataclass(slots=True)
class Cell:
    """
    A single table cell as declared in markup.

    Attributes:
        text: Normalized text content
        rowspan: Number of rows the cell covers (>= 1)
        colspan: Number of columns the cell covers (>= 1)
    """

    text: str = ""
    rowspan: int = 1
    colspan: int = 1

    def __post_init__(self) -> None:
        self.rowspan = max(1, self.rowspan)
        self.colspan = max(1, self.colspan)


@dataclass(frozen=True, slots=True)
class Variant:
    """
    One purchasable configuration of a product.

    Attributes:
        weight: Weight in grams
        length: Length in millimeters
        price: Tax-included price in the minor currency unit (yen)
        color_name: Display color name
        model_label: Named sub-model, distinct from color (e.g. "SE75")
    """

    weight: Optional[float] = None
    length: Optional[int] = None
    price: Optional[int] = None
    color_name: Optional[str] = None
    model_label: Optional[str] = None

    def identity_key(self) -> IdentityKey:
        """Deduplication key. Price is excluded on purpose."""
        return (self.weight, self.length, self.color_name, self.model_label)

    def is_meaningful(self) -> bool:
        """A variant needs at least a weight or a color name."""
        return self.weight is not None or bool(self.color_name)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "weight": self.weight,
            "length": self.length,
            "price": self.price,
            "color_name": self.color_name,
            "model_label": self.model_label,
        }


@dataclass
class ExtractionConfig:
    """
    Per-call configuration for variant extraction.

    Attributes:
        tax_convention: Convention for prices that carry no tax marker
        tax_rate: Multiplier applied to tax-exclusive prices
        max_columns: Column ceiling for resolved tables
        price_min: Smallest plausible price
        price_max: Largest plausible price
    """

    tax_convention: TaxConvention = TaxConvention.INCLUSIVE
    tax_rate: float = 1.10
    max_columns: int = 20
    price_min: int = 100
    price_max: int = 1_000_000

    def __post_init__(self) -> None:
        self.tax_convention = TaxConvention(self.tax_convention)
        if self.tax_rate <= 0:
            raise ValueError(f"tax_rate must be positive, got {self.tax_rate}")
        if self.max_columns < 1:
            raise ValueError(f"max_columns must be at least 1, got {self.max_columns}")
        if self.price_min > self.price_max:
            raise ValueError(
                f"price_min ({self.price_min}) is greater than price_max ({self.price_max})"
            )

    @classmethod
    def default(cls) -> ExtractionConfig:
        """Create configuration from the environment-backed Config."""
        return cls(
            tax_convention=Config.default_tax_convention(),
            tax_rate=Config.TAX_RATE or 1.10,
            max_columns=Config.MAX_GRID_COLUMNS or 20,
            price_min=Config.PRICE_MIN if Config.PRICE_MIN is not None else 100,
            price_max=Config.PRICE_MAX if Config.PRICE_MAX is not None else 1_000_000,
        )

    def with_convention(self, tax_convention: TaxConvention) -> ExtractionConfig:
        """Copy of this configuration using another tax convention."""
        return ExtractionConfig(
            tax_convention=tax_convention,
            tax_rate=self.tax_rate,
            max_columns=self.max_columns,
            price_min=self.price_min,
            price_max=self.price_max,
        )


@dataclass
class ExtractionResult:
    """
    Result of running the extractor over one document.

    Attributes:
        variants: Deduplicated variants in document order
        strategy: State that produced the variants (None when nothing was found)
        attempted: States tried, in order
        errors: Strategy failures that were swallowed
    """

    variants: List[Variant] = field(default_factory=list)
    strategy: Optional[ExtractionState] = None
    attempted: List[ExtractionState] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "variants": [v.to_dict() for v in self.variants],
            "strategy": self.strategy.value if self.strategy else None,
            "attempted": [s.value for s in self.attempted],
            "errors": list(self.errors),
        }

    def is_empty(self) -> bool:
        """Check if no variant data was found."""
        return len(self.variants) == 0
