"""Layers package initialization."""
from pricewatch.layers.retailer_detection import (
    RetailerDetectionLayer,
    RetailerInfo,
    classify_retailer,
    to_absolute_url,
)
from pricewatch.layers.extraction import ExtractionLayer, merge_extractions
from pricewatch.layers.price_refresh import PriceRefreshLayer, compute_price_change

__all__ = [
    "RetailerDetectionLayer",
    "RetailerInfo",
    "classify_retailer",
    "to_absolute_url",
    "ExtractionLayer",
    "merge_extractions",
    "PriceRefreshLayer",
    "compute_price_change",
]
