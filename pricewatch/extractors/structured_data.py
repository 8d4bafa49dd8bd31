"""
Structured-data (JSON-LD) extractor.

Reads every <script type="application/ld+json"> block on the page and
takes title, image and price from the first Product node that provides
each field.
"""
import json
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from pricewatch.models.product import ExtractionSource, PartialExtraction
from pricewatch.utils.logger import LayerLogger
from pricewatch.utils.price import parse_price

logger = LayerLogger("json_ld_extractor")


def extract_json_ld(soup: BeautifulSoup) -> PartialExtraction:
    """
    Extract product fields from JSON-LD blocks.
    
    Each block is parsed independently; a block that fails to parse is
    skipped without affecting the others. Fields are first-found-wins
    across Product nodes in document order.
    """
    result = PartialExtraction(source=ExtractionSource.JSON_LD)
    products_seen = 0
    
    for index, script in enumerate(soup.find_all("script", type="application/ld+json")):
        content = script.string or script.get_text()
        if not content or not content.strip():
            continue
        
        try:
            data = json.loads(content)
        except ValueError as e:
            logger.log_skip("parse_json_ld_block", reason=str(e), block_index=index)
            continue
        
        for item in _collect_items(data):
            if not _is_product(item):
                continue
            products_seen += 1
            
            if result.title is None:
                name = item.get("name")
                if isinstance(name, str) and name.strip():
                    result.title = " ".join(name.split())
            
            if result.image_url is None:
                result.image_url = _first_image(item.get("image"))
            
            if result.price is None:
                result.price = _offer_price(item.get("offers"))
    
    logger.log_action(
        "json_ld_extraction",
        "completed" if products_seen else "no_product_found",
        products_seen=products_seen,
        fields_found=result.get_present_fields(),
    )
    return result


def _collect_items(data: Any) -> List[Dict[str, Any]]:
    """
    Top-level nodes of a block plus the members of any ``@graph`` they
    carry (one level deep).
    """
    top = data if isinstance(data, list) else [data]
    items = [item for item in top if isinstance(item, dict)]
    
    graph_members = []
    for item in items:
        graph = item.get("@graph")
        if isinstance(graph, list):
            graph_members.extend(member for member in graph if isinstance(member, dict))
    
    return items + graph_members


def _is_product(item: Dict[str, Any]) -> bool:
    item_type = item.get("@type")
    if isinstance(item_type, list):
        return "Product" in item_type
    return item_type == "Product"


def _first_image(image: Any) -> Optional[str]:
    """Image may be a URL, an ImageObject, or a list of either."""
    if isinstance(image, list):
        image = image[0] if image else None
    
    if isinstance(image, str):
        return image.strip() or None
    
    if isinstance(image, dict):
        for key in ("url", "contentUrl"):
            value = image.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    
    return None


def _offer_price(offers: Any) -> Optional[float]:
    """Price from an Offer / AggregateOffer (first one if a list)."""
    if isinstance(offers, list):
        offers = offers[0] if offers else None
    if not isinstance(offers, dict):
        return None
    
    for key in ("price", "lowPrice", "highPrice"):
        value = offers.get(key)
        if isinstance(value, (dict, list)):
            continue
        price = parse_price(value)
        if price is not None:
            return price
    
    return None
