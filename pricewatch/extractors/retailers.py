"""
Retailer-specific extractors.

One plain function per supported retailer, each scanning that retailer's
known product-page markup. Strategies are registered by retailer type tag
in RETAILER_STRATEGIES; adding a retailer means writing one function and
adding one entry there (plus a hostname fragment in
``layers.retailer_detection.RETAILER_TYPES``).
"""
import json
from typing import Callable, Dict, Optional, Sequence

from bs4 import BeautifulSoup

from pricewatch.extractors.dom import element_price, element_text, image_source
from pricewatch.models.product import ExtractionSource, PartialExtraction
from pricewatch.utils.logger import LayerLogger

logger = LayerLogger("retailer_extractor")

RetailerStrategy = Callable[[BeautifulSoup], PartialExtraction]


# =========================================================================
# SELECTOR CASCADE
# =========================================================================

def _first_title(soup: BeautifulSoup, selectors: Sequence[str]) -> Optional[str]:
    for selector in selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = element_text(element) or element.get("content")
        if text and text.strip():
            return " ".join(text.split())
    return None


def _first_image(soup: BeautifulSoup, selectors: Sequence[str]) -> Optional[str]:
    for selector in selectors:
        src = image_source(soup.select_one(selector))
        if src and not src.startswith("data:"):
            return src
    return None


def _first_price(soup: BeautifulSoup, selectors: Sequence[str]) -> Optional[float]:
    for selector in selectors:
        price = element_price(soup.select_one(selector))
        if price is not None:
            return price
    return None


def selector_cascade(
    soup: BeautifulSoup,
    title: Sequence[str] = (),
    image: Sequence[str] = (),
    price: Sequence[str] = (),
) -> PartialExtraction:
    """
    Try each field's selectors in order; the first one yielding a usable
    value wins for that field.
    """
    return PartialExtraction(
        title=_first_title(soup, title),
        image_url=_first_image(soup, image),
        price=_first_price(soup, price),
        source=ExtractionSource.RETAILER,
    )


# =========================================================================
# MASS-MARKET RETAILERS
# =========================================================================

AMAZON_PRICE_SELECTORS = (
    ".a-price .a-offscreen",
    "#priceblock_ourprice",
    "#priceblock_dealprice",
    "#priceblock_saleprice",
    ".priceToPay .a-offscreen",
    "#corePrice_feature_div .a-offscreen",
    "#corePriceDisplay_desktop_feature_div .a-offscreen",
    ".a-price-whole",
    "#price_inside_buybox",
    "#newBuyBoxPrice",
)


def extract_amazon(soup: BeautifulSoup) -> PartialExtraction:
    """
    Amazon product pages.
    
    The landing image ``src`` is often a thumbnail (URL contains "._");
    in that case the largest entry of ``data-a-dynamic-image`` is used.
    """
    result = selector_cascade(
        soup,
        title=["#productTitle", "#title span"],
        image=["#landingImage", "#imgBlkFront", "#main-image", ".imgTagWrapper img"],
        price=AMAZON_PRICE_SELECTORS,
    )
    
    if not result.image_url or "._" in result.image_url:
        hi_res = _amazon_dynamic_image(soup)
        if hi_res:
            result.image_url = hi_res
    
    return result


def _amazon_dynamic_image(soup: BeautifulSoup) -> Optional[str]:
    """Last (largest) URL key of the landing image's resolution map."""
    landing = soup.select_one("#landingImage")
    if landing is None:
        return None
    raw = landing.get("data-a-dynamic-image")
    if not raw:
        return None
    
    try:
        resolutions = json.loads(raw)
    except ValueError as e:
        logger.log_skip("amazon_dynamic_image", reason=str(e))
        return None
    
    if not isinstance(resolutions, dict) or not resolutions:
        return None
    return list(resolutions.keys())[-1]


def extract_target(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[data-test="product-title"]', "h1"],
        image=['[data-test="product-image"] img', "picture img"],
        price=['[data-test="product-price"]', '[data-test="current-price"]'],
    )


def extract_walmart(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[itemprop="name"]', "h1"],
        image=['[data-testid="hero-image"] img', ".hover-zoom-hero-image img"],
        price=['[itemprop="price"]', '[data-automation="buybox-product-price"]'],
    )


def extract_bestbuy(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=[".sku-title h1", "h1"],
        image=["img.primary-image", ".shop-media-gallery img", "picture img"],
        price=[
            ".priceView-customer-price span",
            '[data-testid="customer-price"] span',
            ".pricing-price__regular-price",
        ],
    )


def extract_ebay(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=["h1.x-item-title__mainTitle span", "#itemTitle", "h1"],
        image=[".ux-image-carousel-item.active img", ".ux-image-carousel-item img", "#icImg"],
        price=[".x-price-primary span", "#prcIsum", "#mm-saleDscPrc", '[itemprop="price"]'],
    )


def extract_etsy(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=["h1[data-buy-box-listing-title]", "h1"],
        image=[".listing-page-image-carousel-component img", 'img[data-index="0"]'],
        price=[
            '[data-buy-box-region="price"] p.wt-text-title-larger',
            '[data-selector="price-only"] p',
            '[data-buy-box-region="price"] p',
        ],
    )


def extract_kohls(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=[".product-title h1", "h1.pdp-product-title", "h1"],
        image=["#PDP_colorPrimaryImage img", ".pdp-large-hero-image img", "picture img"],
        price=[".pdpprice-row2-main-text", ".prod_price_amount", "[data-price]"],
    )


def extract_newegg(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=["h1.product-title", "h1"],
        image=[".product-view-img-original", ".swiper-slide-active img", "picture img"],
        price=[".product-price .price-current", ".price-current", '[itemprop="price"]'],
    )


# =========================================================================
# DEPARTMENT STORES AND HOME
# =========================================================================

def extract_nordstrom(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['h1[itemprop="name"]', '[data-element="product-title"]', "h1"],
        image=['[data-element="hero-image"] img', "#pdp-hero img", "picture img"],
        price=['[data-element="current-price"]', 'span[itemprop="price"]', '[class*="currentPrice"]'],
    )


def extract_macys(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['h1[data-auto="product-title"]', ".product-title h1", "h1"],
        image=['[data-auto="main-image"] img', ".main-image img", "picture img"],
        price=[".lowest-sale-price .price", '[data-auto="main-price"]', ".price-wrapper .price"],
    )


def extract_wayfair(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[data-enzyme-id="ProductTitle"]', '[data-hb-id="Heading"]', "h1"],
        image=['[data-enzyme-id="InitialImage"] img', ".ProductDetailImageCarousel img", "picture img"],
        price=['[data-test-id="PriceDisplay"]', ".SFPrice span", '[class*="PriceBlock"] span'],
    )


def extract_homedepot(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=["h1.product-details__title", '[data-component*="ProductDetailsTitle"] h1', "h1"],
        image=[".mediagallery__mainimage img", '[data-testid="media-gallery"] img', "picture img"],
        price=['[data-testid="price-simple"]', ".price-format__main-price", ".price-detailed__wrapper"],
    )


def extract_lowes(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[data-testid="product-title"]', "h1"],
        image=['[data-testid="main-image"] img', ".mediaGallery img", "picture img"],
        price=['[data-testid="product-price"]', ".item-price-dollar", ".aPrice"],
    )


# =========================================================================
# BEAUTY
# =========================================================================

def extract_sephora(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[data-at="product_name"]', "h1"],
        image=['[data-comp="ProductImage"] img', "picture img"],
        price=['[data-comp="Price"] b', '[data-at="price"]'],
    )


def extract_ulta(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[data-testid="product-name"]', "h1"],
        image=[".ProductHero__MediaGallery img", ".MediaWrapper img", "picture img"],
        price=['[data-testid="product-price"]', ".ProductPricing span"],
    )


# =========================================================================
# FAST FASHION AND FOOTWEAR
# =========================================================================

def extract_zara(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=["h1.product-detail-info__header-name", ".product-detail-info__name", "h1"],
        image=["img.media-image__image", "picture.media-image img", ".product-detail-images img"],
        price=[".money-amount__main", ".price-current__amount", ".price__amount"],
    )


def extract_hm(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=["h1.product-item-headline", '[data-testid="product-name"]', "h1"],
        image=[".product-detail-main-image-container img", '[data-testid="grid-gallery"] img', "picture img"],
        price=["#product-price .price-value", '[data-testid="white-price"]', "#product-price"],
    )


def extract_asos(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[data-testid="product-title"]', ".product-hero h1", "h1"],
        image=['[data-testid="primary-image"]', ".gallery-image img", "img.gallery-image"],
        price=['[data-testid="current-price"]', '[data-id="current-price"]', ".current-price"],
    )


def extract_nike(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=["#pdp_product_title", '[data-testid="product_title"]', "h1"],
        image=['[data-testid="HeroImg"]', "#pdp_6up-hero", "picture img"],
        price=[
            '[data-testid="currentPrice-container"]',
            ".product-price.is--current-price",
            '[data-test="product-price"]',
        ],
    )


def extract_adidas(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[data-auto-id="product-title"]', "h1"],
        image=['[data-auto-id="image-viewer"] img', "#pdp-gallery-desktop-grid-container img", "picture img"],
        price=['[data-auto-id="gl-price-item"]', ".gl-price-item--sale", ".gl-price-item"],
    )


def extract_zappos(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[itemprop="name"]', "h1"],
        image=['[data-track-value="Product-Image"] img', "#productImages img", "picture img"],
        price=['[itemprop="price"]', '[data-track-value="Price"]'],
    )


# =========================================================================
# LUXURY
# =========================================================================

def extract_ssense(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=["h2.pdp-product-title__name", '[data-test="productName"]', "h1"],
        image=[".pdp-images__desktop img", '[data-test="pdpImage"] img', "picture img"],
        price=['[data-testid="price"]', ".pdp-product-title__price", "#pdpProductPrice"],
    )


def extract_farfetch(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[data-testid="product-short-description"]', '[data-tstid="cardInfo-description"]', "h1"],
        image=['[data-testid="image"]', '[data-tstid="slideshow"] img', "picture img"],
        price=['[data-component="PriceFinalLarge"]', '[data-component="PriceLarge"]', '[data-tstid="priceInfo-original"]'],
    )


def extract_netaporter(soup: BeautifulSoup) -> PartialExtraction:
    return selector_cascade(
        soup,
        title=['[itemprop="name"]', "h1"],
        image=[".ImageCarousel img", "picture img"],
        price=['[itemprop="price"]', 'span[class*="PriceWithSchema"]'],
    )


# Retailer type tag -> strategy. Tags from RETAILER_TYPES without an entry
# here (e.g. "costco") fall through to an empty extraction.
RETAILER_STRATEGIES: Dict[str, RetailerStrategy] = {
    "amazon": extract_amazon,
    "target": extract_target,
    "walmart": extract_walmart,
    "bestbuy": extract_bestbuy,
    "ebay": extract_ebay,
    "etsy": extract_etsy,
    "kohls": extract_kohls,
    "newegg": extract_newegg,
    "nordstrom": extract_nordstrom,
    "macys": extract_macys,
    "wayfair": extract_wayfair,
    "homedepot": extract_homedepot,
    "lowes": extract_lowes,
    "sephora": extract_sephora,
    "ulta": extract_ulta,
    "zara": extract_zara,
    "hm": extract_hm,
    "asos": extract_asos,
    "nike": extract_nike,
    "adidas": extract_adidas,
    "zappos": extract_zappos,
    "ssense": extract_ssense,
    "farfetch": extract_farfetch,
    "netaporter": extract_netaporter,
}


def extract_retailer_specific(soup: BeautifulSoup, type_tag: str) -> PartialExtraction:
    """
    Run the strategy registered for ``type_tag``.
    
    Unknown tags (including "generic") return an empty extraction.
    """
    strategy = RETAILER_STRATEGIES.get(type_tag)
    if strategy is None:
        logger.log_action("retailer_extraction", "skipped", type_tag=type_tag, reason="no_strategy")
        return PartialExtraction(source=ExtractionSource.RETAILER)
    
    result = strategy(soup)
    logger.log_action(
        "retailer_extraction",
        "completed",
        type_tag=type_tag,
        fields_found=result.get_present_fields(),
    )
    return result
