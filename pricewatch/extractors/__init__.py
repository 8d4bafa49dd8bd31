"""Extractors package initialization."""
from pricewatch.extractors.structured_data import extract_json_ld
from pricewatch.extractors.meta_tags import extract_meta_tags, clean_title
from pricewatch.extractors.retailers import (
    RETAILER_STRATEGIES,
    extract_retailer_specific,
    selector_cascade,
)
from pricewatch.extractors.generic import (
    extract_generic,
    extract_generic_price,
    extract_generic_image,
)

__all__ = [
    "extract_json_ld",
    "extract_meta_tags",
    "clean_title",
    "RETAILER_STRATEGIES",
    "extract_retailer_specific",
    "selector_cascade",
    "extract_generic",
    "extract_generic_price",
    "extract_generic_image",
]
