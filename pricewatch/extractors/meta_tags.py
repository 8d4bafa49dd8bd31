"""
Meta-tag extractor (Open Graph, Twitter Card, generic meta, <title>).

Social-share tags are present on most product pages but are written for
link previews, so they rank below retailer selectors and JSON-LD.
"""
import re
from typing import Optional

from bs4 import BeautifulSoup

from pricewatch.extractors.dom import clean_text
from pricewatch.models.product import ExtractionSource, PartialExtraction
from pricewatch.utils.logger import LayerLogger
from pricewatch.utils.price import parse_price

logger = LayerLogger("meta_tag_extractor")

TITLE_KEYS = ("og:title", "twitter:title", "title")
IMAGE_KEYS = ("og:image:secure_url", "og:image", "twitter:image", "twitter:image:src")
PRICE_KEYS = ("og:price:amount", "product:price:amount", "price:amount")

# " - Site", " | Site", " – Site", " : Site" at the end of a title
SITE_SUFFIX = re.compile(r"(?:\s+[-–—:]|\s*\|)\s*[^-|–—:]*$")
PIPE_SUFFIX = re.compile(r"\s*\|\s*[^|]*$")


def meta_content(soup: BeautifulSoup, key: str) -> Optional[str]:
    """Content of <meta property=key> or <meta name=key>, if non-empty."""
    for attr in ("property", "name"):
        tag = soup.find("meta", attrs={attr: key})
        if tag is not None:
            content = clean_text(tag.get("content"))
            if content:
                return content
    return None


def clean_title(title: Optional[str]) -> Optional[str]:
    """
    Strip a trailing site-name segment from a page title.
    
    "Air Max 90 | Men's Shoes - Nike" -> "Air Max 90". Hyphenated names
    survive because a dash only counts as a delimiter after whitespace.
    """
    title = clean_text(title)
    if not title:
        return None
    
    cleaned = SITE_SUFFIX.sub("", title, count=1)
    cleaned = PIPE_SUFFIX.sub("", cleaned, count=1).strip()
    return cleaned or title


def extract_meta_tags(soup: BeautifulSoup) -> PartialExtraction:
    """Extract title, image and price from meta tags."""
    result = PartialExtraction(source=ExtractionSource.META)
    
    title = None
    for key in TITLE_KEYS:
        title = meta_content(soup, key)
        if title:
            break
    if not title and soup.title is not None:
        title = clean_text(soup.title.get_text())
    result.title = clean_title(title)
    
    for key in IMAGE_KEYS:
        image = meta_content(soup, key)
        if image:
            result.image_url = image
            break
    
    for key in PRICE_KEYS:
        price = parse_price(meta_content(soup, key))
        if price is not None:
            result.price = price
            break
    
    if result.price is None:
        itemprop_price = soup.find("meta", attrs={"itemprop": "price"})
        if itemprop_price is not None:
            result.price = parse_price(itemprop_price.get("content"))
    
    logger.log_action(
        "meta_extraction",
        "completed",
        fields_found=result.get_present_fields(),
    )
    return result
