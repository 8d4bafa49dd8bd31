"""
Retailer Detection Layer.

Classifies a product URL by hostname into a display name (shown to the
user) and a retailer type tag (selects the extraction strategy), and
resolves relative image URLs against the page they were found on.
"""
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urljoin, urlparse

from pricewatch.utils.logger import LayerLogger


GENERIC_TYPE = "generic"
UNKNOWN_RETAILER = "Unknown"

# Normalized domain -> display name. Order matters for subdomain matching.
RETAILER_NAMES: Tuple[Tuple[str, str], ...] = (
    ("amazon.com", "Amazon"),
    ("amazon.co.uk", "Amazon UK"),
    ("amazon.ca", "Amazon Canada"),
    ("amazon.de", "Amazon DE"),
    ("ebay.com", "eBay"),
    ("walmart.com", "Walmart"),
    ("target.com", "Target"),
    ("bestbuy.com", "Best Buy"),
    ("nordstrom.com", "Nordstrom"),
    ("macys.com", "Macy's"),
    ("sephora.com", "Sephora"),
    ("ulta.com", "Ulta"),
    ("etsy.com", "Etsy"),
    ("zappos.com", "Zappos"),
    ("asos.com", "ASOS"),
    ("zara.com", "Zara"),
    ("hm.com", "H&M"),
    ("nike.com", "Nike"),
    ("adidas.com", "Adidas"),
    ("apple.com", "Apple"),
    ("costco.com", "Costco"),
    ("kohls.com", "Kohl's"),
    ("wayfair.com", "Wayfair"),
    ("homedepot.com", "Home Depot"),
    ("lowes.com", "Lowe's"),
    ("newegg.com", "Newegg"),
    ("bhphotovideo.com", "B&H Photo"),
    ("bloomingdales.com", "Bloomingdale's"),
    ("saksfifthavenue.com", "Saks Fifth Avenue"),
    ("neimanmarcus.com", "Neiman Marcus"),
    ("shopbop.com", "Shopbop"),
    ("net-a-porter.com", "Net-A-Porter"),
    ("ssense.com", "SSENSE"),
    ("farfetch.com", "Farfetch"),
)

# Hostname fragment -> retailer type tag. First match wins.
RETAILER_TYPES: Tuple[Tuple[str, str], ...] = (
    ("amazon", "amazon"),
    ("target", "target"),
    ("walmart", "walmart"),
    ("bestbuy", "bestbuy"),
    ("ebay", "ebay"),
    ("etsy", "etsy"),
    ("nordstrom", "nordstrom"),
    ("macys", "macys"),
    ("sephora", "sephora"),
    ("ulta.com", "ulta"),
    ("zara.com", "zara"),
    ("hm.com", "hm"),
    ("asos", "asos"),
    ("nike.com", "nike"),
    ("adidas", "adidas"),
    ("zappos", "zappos"),
    ("ssense", "ssense"),
    ("farfetch", "farfetch"),
    ("net-a-porter", "netaporter"),
    ("wayfair", "wayfair"),
    ("homedepot", "homedepot"),
    ("lowes", "lowes"),
    ("kohls", "kohls"),
    ("newegg", "newegg"),
    ("costco", "costco"),
)


@dataclass(frozen=True)
class RetailerInfo:
    """Result of classifying a product URL."""
    display_name: str
    type_tag: str


def normalize_hostname(url: str) -> Optional[str]:
    """
    Lowercased hostname with a leading ``www.`` removed.
    
    Returns None when the URL has no parsable hostname.
    """
    try:
        hostname = urlparse(url).hostname
    except (TypeError, ValueError):
        return None
    if not hostname:
        return None
    hostname = hostname.lower()
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


def _resolve_display_name(domain: str) -> str:
    for key, name in RETAILER_NAMES:
        if domain == key:
            return name
    
    for key, name in RETAILER_NAMES:
        if domain.endswith("." + key):
            return name
    
    main_label = domain.split(".")[0]
    return main_label[:1].upper() + main_label[1:] if main_label else UNKNOWN_RETAILER


def _resolve_type_tag(domain: str) -> str:
    for fragment, tag in RETAILER_TYPES:
        if fragment in domain:
            return tag
    return GENERIC_TYPE


def classify_retailer(url: str) -> RetailerInfo:
    """
    Classify a URL into a retailer display name and type tag.
    
    Never raises: URLs without a usable hostname classify as
    ("Unknown", "generic").
    """
    domain = normalize_hostname(url) if url else None
    if not domain:
        return RetailerInfo(display_name=UNKNOWN_RETAILER, type_tag=GENERIC_TYPE)
    
    return RetailerInfo(
        display_name=_resolve_display_name(domain),
        type_tag=_resolve_type_tag(domain),
    )


def get_retailer_name(url: str) -> str:
    return classify_retailer(url).display_name


def get_retailer_type(url: str) -> str:
    return classify_retailer(url).type_tag


def to_absolute_url(url: Optional[str], base_url: str) -> Optional[str]:
    """
    Make an image URL absolute.
    
    - ``//cdn/...`` gets ``https:`` prepended
    - absolute http(s) and data: URLs pass through
    - anything else is resolved against the origin of ``base_url``
    - input that cannot be resolved is returned unchanged
    """
    if not url:
        return None
    
    url = url.strip()
    if url.startswith("//"):
        return "https:" + url
    
    lowered = url.lower()
    if lowered.startswith(("http://", "https://", "data:")):
        return url
    
    try:
        base = urlparse(base_url)
        if not base.scheme or not base.netloc:
            return url
        return urljoin(f"{base.scheme}://{base.netloc}/", url)
    except (TypeError, ValueError):
        return url


class RetailerDetectionLayer:
    """
    Retailer Detection Layer - answers "which shop is this?" for a URL.
    
    Pure lookups over static tables; the layer only adds logging so the
    classification shows up alongside the rest of an extraction trace.
    """
    
    def __init__(self):
        self.logger = LayerLogger("retailer_detection")
    
    def detect(self, url: str) -> RetailerInfo:
        info = classify_retailer(url)
        
        if info.type_tag == GENERIC_TYPE:
            self.logger.log_decision(
                decision="generic_retailer",
                reason="No known hostname fragment matched",
                url=url,
                display_name=info.display_name,
            )
        else:
            self.logger.log_decision(
                decision="known_retailer",
                reason="Hostname fragment matched",
                url=url,
                display_name=info.display_name,
                type_tag=info.type_tag,
            )
        
        return info
