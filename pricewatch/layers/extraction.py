"""
Extraction Layer - the orchestrator.

Fetches a product page, parses it once, runs every extractor against the
same document and folds their partial results into one ScrapedProduct
with first-non-null-wins precedence:

    retailer-specific > JSON-LD > meta tags > generic fallback
"""
from typing import Dict, Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup

from pricewatch.adapters.html_fetcher import HTMLFetcher
from pricewatch.extractors.generic import extract_generic
from pricewatch.extractors.meta_tags import extract_meta_tags
from pricewatch.extractors.retailers import extract_retailer_specific
from pricewatch.extractors.structured_data import extract_json_ld
from pricewatch.layers.retailer_detection import GENERIC_TYPE, RetailerDetectionLayer, to_absolute_url
from pricewatch.models.product import (
    PRODUCT_FIELDS,
    PartialExtraction,
    PricePolicy,
    ScrapedProduct,
)
from pricewatch.utils.logger import LayerLogger


def _first_non_null(partials: List[PartialExtraction], field: str) -> Tuple[Optional[object], Optional[str]]:
    for partial in partials:
        value = getattr(partial, field)
        if value is not None:
            return value, partial.source.value if partial.source else None
    return None, None


def merge_extractions(partials: Iterable[PartialExtraction]) -> PartialExtraction:
    """
    Fold partial extractions (highest priority first) into one.
    
    Each field takes the first non-null value encountered; later sources
    never overwrite earlier ones.
    """
    partials = list(partials)
    merged = PartialExtraction()
    for field in PRODUCT_FIELDS:
        value, _ = _first_non_null(partials, field)
        setattr(merged, field, value)
    return merged


def merge_sources(partials: Iterable[PartialExtraction]) -> Dict[str, str]:
    """Which source supplied each merged field (absent fields omitted)."""
    partials = list(partials)
    sources = {}
    for field in PRODUCT_FIELDS:
        _, source = _first_non_null(partials, field)
        if source is not None:
            sources[field] = source
    return sources


class ExtractionLayer:
    """
    Extraction Layer - URL in, ScrapedProduct out.
    
    Holds no per-call state: every call parses its own document and
    builds its own result, so one instance can serve concurrent callers.
    Retailer knowledge lives in the extractors; this layer only
    dispatches on the type tag from retailer detection.
    """
    
    def __init__(self, fetcher: Optional[HTMLFetcher] = None, timeout: Optional[float] = None):
        self.fetcher = fetcher or HTMLFetcher(timeout=timeout)
        self.retailer_detection = RetailerDetectionLayer()
        self.logger = LayerLogger("extraction_layer")
    
    async def extract(self, url: str, policy: Optional[PricePolicy] = None) -> ScrapedProduct:
        """
        Fetch and extract a product page.
        
        Args:
            url: Product page URL
            policy: Optional caller price-acceptance policy
        
        Returns:
            ScrapedProduct (fields may be null when not found)
        
        Raises:
            FetchError: the page could not be retrieved
        """
        self.logger.log_action("extraction", "started", url=url)
        page = await self.fetcher.fetch(url)
        return self.extract_from_html(url, page.html, policy=policy, base_url=page.final_url)
    
    def extract_from_html(
        self,
        url: str,
        html: str,
        policy: Optional[PricePolicy] = None,
        base_url: Optional[str] = None,
    ) -> ScrapedProduct:
        """
        Extract a product from already-fetched HTML.
        
        Deterministic: identical input yields an identical result.
        """
        retailer = self.retailer_detection.detect(url)
        soup = BeautifulSoup(html, "lxml")
        
        partials = self.collect(soup, retailer.type_tag)
        if retailer.type_tag != GENERIC_TYPE and partials[0].is_empty():
            self.logger.log_fallback(
                from_source="retailer",
                to_source="json_ld",
                reason="Retailer markup not found",
                url=url,
                type_tag=retailer.type_tag,
            )
        
        if policy is not None:
            partials = [self._apply_policy(partial, policy, url) for partial in partials]
        
        merged = merge_extractions(partials)
        product = ScrapedProduct(
            title=merged.title,
            price=merged.price,
            image_url=to_absolute_url(merged.image_url, base_url or url),
            retailer=retailer.display_name,
        )
        
        self.logger.log_extraction(
            fields_present=product.get_present_fields(),
            fields_missing=product.get_missing_fields(),
            sources=merge_sources(partials),
            url=url,
            retailer=product.retailer,
        )
        return product
    
    def collect(self, soup: BeautifulSoup, type_tag: str) -> List[PartialExtraction]:
        """Run every extractor on the parsed document, in priority order."""
        return [
            extract_retailer_specific(soup, type_tag),
            extract_json_ld(soup),
            extract_meta_tags(soup),
            extract_generic(soup),
        ]
    
    def _apply_policy(
        self,
        partial: PartialExtraction,
        policy: PricePolicy,
        url: str,
    ) -> PartialExtraction:
        """Drop a source's price when the caller's policy rejects it."""
        if partial.price is None or policy.accepts(partial.price, partial.source):
            return partial
        
        self.logger.log_decision(
            decision="price_rejected",
            reason="Outside caller price policy",
            url=url,
            source=partial.source.value if partial.source else None,
            price=partial.price,
        )
        return partial.model_copy(update={"price": None})
