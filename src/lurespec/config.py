"""
Configuration management for lurespec.
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: str) -> Optional[float]:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return None


def _env_int(name: str, default: str) -> Optional[int]:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return None


class Config:
    """Application configuration."""

    # Pricing
    # Multiplier applied to tax-exclusive prices (10% consumption tax)
    TAX_RATE: Optional[float] = _env_float("TAX_RATE", "1.10")
    # Options: "inclusive" (prices are quoted with tax) or "exclusive"
    TAX_CONVENTION: str = os.getenv("TAX_CONVENTION", "inclusive").lower()
    PRICE_MIN: Optional[int] = _env_int("PRICE_MIN", "100")
    PRICE_MAX: Optional[int] = _env_int("PRICE_MAX", "1000000")

    # Table resolution
    MAX_GRID_COLUMNS: Optional[int] = _env_int("MAX_GRID_COLUMNS", "20")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def validate(cls) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if cls.TAX_RATE is None:
            errors.append("TAX_RATE must be a number")
        elif cls.TAX_RATE <= 0:
            errors.append(f"Invalid TAX_RATE: {cls.TAX_RATE}. Must be greater than 0")

        if cls.TAX_CONVENTION not in ("inclusive", "exclusive"):
            errors.append(
                f"Invalid TAX_CONVENTION: {cls.TAX_CONVENTION}. Must be 'inclusive' or 'exclusive'"
            )

        if cls.PRICE_MIN is None or cls.PRICE_MAX is None:
            errors.append("PRICE_MIN and PRICE_MAX must be integers")
        elif cls.PRICE_MIN > cls.PRICE_MAX:
            errors.append(f"PRICE_MIN ({cls.PRICE_MIN}) is greater than PRICE_MAX ({cls.PRICE_MAX})")

        if cls.MAX_GRID_COLUMNS is None or cls.MAX_GRID_COLUMNS < 1:
            errors.append("MAX_GRID_COLUMNS must be a positive integer")

        return errors

    @classmethod
    def is_valid(cls) -> bool:
        """Check if configuration is valid."""
        return len(cls.validate()) == 0

    @classmethod
    def default_tax_convention(cls):
        """Tax convention applied when a call does not pass one."""
        from .models import TaxConvention

        if cls.TAX_CONVENTION == "exclusive":
            return TaxConvention.EXCLUSIVE
        return TaxConvention.INCLUSIVE

    @classmethod
    def get_summary(cls) -> dict:
        """Get configuration summary (safe for logging)."""
        return {
            "tax_rate": cls.TAX_RATE,
            "tax_convention": cls.TAX_CONVENTION,
            "price_min": cls.PRICE_MIN,
            "price_max": cls.PRICE_MAX,
            "max_grid_columns": cls.MAX_GRID_COLUMNS,
            "log_level": cls.LOG_LEVEL,
        }
