"""
Small read-only helpers over BeautifulSoup elements shared by extractors.

Extractors all run against one parsed document, so nothing here mutates
the tree.
"""
import re
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

from pricewatch.utils.price import parse_price

IMAGE_ATTRIBUTES = ("src", "data-src", "data-old-hires", "content", "href")
PRICE_ATTRIBUTES = ("content", "data-price", "data-product-price", "value")
LEADING_INT = re.compile(r"^\s*(\d+)")


def clean_text(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace; empty results become None."""
    if not text:
        return None
    collapsed = " ".join(text.split())
    return collapsed or None


def element_text(element: Optional[Tag]) -> Optional[str]:
    if element is None:
        return None
    return clean_text(element.get_text(" "))


def first_attribute(element: Optional[Tag], names: Iterable[str]) -> Optional[str]:
    """Return the first non-empty attribute value among ``names``."""
    if element is None:
        return None
    for name in names:
        value = element.get(name)
        if isinstance(value, list):
            value = " ".join(value)
        if value and value.strip():
            return value.strip()
    return None


def srcset_first(srcset: Optional[str]) -> Optional[str]:
    """First URL of a srcset attribute ("a.jpg 1x, b.jpg 2x" -> "a.jpg")."""
    if not srcset:
        return None
    first = srcset.strip().split(",")[0].strip()
    return first.split(" ")[0] or None


def image_source(element: Optional[Tag]) -> Optional[str]:
    """Best image URL an element declares (src, lazy-load attrs, srcset)."""
    if element is None:
        return None
    return (
        first_attribute(element, IMAGE_ATTRIBUTES)
        or srcset_first(element.get("srcset"))
        or srcset_first(element.get("data-srcset"))
    )


def element_price(element: Optional[Tag]) -> Optional[float]:
    """Price from a price-bearing attribute, falling back to the element text."""
    if element is None:
        return None
    price = parse_price(first_attribute(element, PRICE_ATTRIBUTES))
    if price is not None:
        return price
    return parse_price(element_text(element))


def dimension(element: Tag, name: str) -> int:
    """Integer value of a width/height attribute ("300px" -> 300, missing -> 0)."""
    match = LEADING_INT.match(str(element.get(name) or ""))
    return int(match.group(1)) if match else 0
