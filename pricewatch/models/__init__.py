"""Models package initialization."""
from pricewatch.models.product import (
    ExtractionSource,
    ChangeType,
    NotificationType,
    PartialExtraction,
    ScrapedProduct,
    PricePolicy,
    PriceRefreshResult,
)

__all__ = [
    "ExtractionSource",
    "ChangeType",
    "NotificationType",
    "PartialExtraction",
    "ScrapedProduct",
    "PricePolicy",
    "PriceRefreshResult",
]
