"""
Pydantic schemas for the persistence boundary.
"""

from .records import (
    ProductInfo,
    LureRow,
    TrackingSummary,
)

__all__ = [
    'ProductInfo',
    'LureRow',
    'TrackingSummary',
]
