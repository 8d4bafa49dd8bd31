"""
Generic fallback extractor.

Last-resort heuristics for pages with no retailer strategy, no JSON-LD
and no usable meta tags: common price/image selector conventions, then
raw-text and <img> scans.
"""
import re
from typing import Iterator, Optional

from bs4 import BeautifulSoup, Comment

from pricewatch.extractors.dom import dimension, element_price, first_attribute, srcset_first
from pricewatch.models.product import ExtractionSource, PartialExtraction
from pricewatch.utils.logger import LayerLogger
from pricewatch.utils.price import parse_price

logger = LayerLogger("generic_extractor")

PRICE_SELECTORS = (
    '[itemprop="price"]',
    "[data-price]",
    "[data-product-price]",
    ".product-price",
    ".price-current",
    ".price-value",
    ".current-price",
    ".sale-price",
    ".special-price",
    ".offer-price",
    "#price",
    ".price",
    '[class*="price"]',
)

IMAGE_SELECTORS = (
    '[itemprop="image"]',
    ".product-image img",
    ".product-gallery img",
    ".product-photo img",
    "#product-image img",
    '[data-testid="product-image"] img',
    ".gallery-image img",
    ".main-image img",
    "picture source",
    "picture img",
)

PRODUCT_IMAGE_KEYWORDS = ("product", "media", "images", "catalog", "item", "goods")
REJECTED_IMAGE_MARKERS = ("placeholder", "spinner")
MIN_IMAGE_DIMENSION = 200

# Text price scan bounds (exclusive)
TEXT_PRICE_FLOOR = 0
TEXT_PRICE_CEILING = 100000

DOLLAR_PRICE = re.compile(r"\$\s*((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{2})?)")
NON_RENDERED = {"script", "style", "noscript", "template", "head"}


def extract_generic_price(soup: BeautifulSoup) -> Optional[float]:
    """Price from common price selectors, then from "$"-prefixed body text."""
    for selector in PRICE_SELECTORS:
        price = element_price(soup.select_one(selector))
        if price is not None:
            return price
    
    for match in DOLLAR_PRICE.finditer(rendered_text(soup)):
        price = parse_price(match.group(1))
        if price is not None and TEXT_PRICE_FLOOR < price < TEXT_PRICE_CEILING:
            return price
    
    return None


def extract_generic_image(soup: BeautifulSoup) -> Optional[str]:
    """
    Image from common product-image selectors, then the first <img> whose
    URL looks like a product asset and which is large or undimensioned.
    """
    for selector in IMAGE_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        src = (
            first_attribute(element, ("src",))
            or srcset_first(element.get("srcset"))
            or first_attribute(element, ("data-src", "content", "href"))
        )
        if _usable_image(src):
            return src
    
    for img in soup.find_all("img"):
        src = first_attribute(img, ("src", "data-src"))
        if not _usable_image(src):
            continue
        lowered = src.lower()
        if not any(keyword in lowered for keyword in PRODUCT_IMAGE_KEYWORDS):
            continue
        
        width = dimension(img, "width")
        height = dimension(img, "height")
        if width >= MIN_IMAGE_DIMENSION or height >= MIN_IMAGE_DIMENSION or (not width and not height):
            return src
    
    return None


def extract_generic(soup: BeautifulSoup) -> PartialExtraction:
    """Generic fallback: price and image only (titles come from meta/<title>)."""
    result = PartialExtraction(
        price=extract_generic_price(soup),
        image_url=extract_generic_image(soup),
        source=ExtractionSource.GENERIC,
    )
    logger.log_action(
        "generic_extraction",
        "completed",
        fields_found=result.get_present_fields(),
    )
    return result


def rendered_text(soup: BeautifulSoup) -> str:
    """Visible body text, skipping script/style contents and comments."""
    return " ".join(_visible_strings(soup))


def _visible_strings(soup: BeautifulSoup) -> Iterator[str]:
    root = soup.body or soup
    for string in root.find_all(string=True):
        if isinstance(string, Comment):
            continue
        if any(parent.name in NON_RENDERED for parent in string.parents):
            continue
        text = string.strip()
        if text:
            yield text


def _usable_image(src: Optional[str]) -> bool:
    if not src or src.startswith("data:"):
        return False
    lowered = src.lower()
    return not any(marker in lowered for marker in REJECTED_IMAGE_MARKERS)
