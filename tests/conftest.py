"""Shared fixtures: HTML pages and a network-free fetcher."""
from typing import Callable, Dict, Tuple

import httpx
import pytest

from pricewatch.adapters.html_fetcher import HTMLFetcher


def _serve_pages(pages: Dict[str, Tuple[int, str]]) -> Callable[[httpx.Request], httpx.Response]:
    """Handler serving fixed (status, html) pairs by URL; unknown URLs 404."""
    def handler(request: httpx.Request) -> httpx.Response:
        status, html = pages.get(str(request.url), (404, "<html><body>Not found</body></html>"))
        return httpx.Response(status, text=html, headers={"Content-Type": "text/html; charset=utf-8"})
    return handler


@pytest.fixture
def serve_pages():
    """Factory for a handler serving fixed pages by URL."""
    return _serve_pages


@pytest.fixture
def make_fetcher():
    """Build an HTMLFetcher whose requests go to an in-process handler."""
    def _make(handler, timeout: float = 5) -> HTMLFetcher:
        return HTMLFetcher(timeout=timeout, transport=httpx.MockTransport(handler))
    return _make


@pytest.fixture
def amazon_html() -> str:
    return """
    <html>
    <head>
      <title>Amazon.com: Echo Dot (5th Gen) : Everything Else</title>
      <meta property="og:title" content="Meta Echo Title" />
      <script type="application/ld+json">
        {"@type": "Product", "name": "JSON-LD Echo", "offers": {"price": "39.99"}}
      </script>
    </head>
    <body>
      <span id="productTitle">
          Echo Dot (5th Gen) Smart Speaker
      </span>
      <div class="imgTagWrapper">
        <img id="landingImage"
             src="https://m.media-amazon.com/images/I/echo._AC_SX300_.jpg"
             data-a-dynamic-image='{"https://m.media-amazon.com/images/I/echo._AC_SX300_.jpg": [300, 300], "https://m.media-amazon.com/images/I/echo._AC_SL1500_.jpg": [1500, 1500]}' />
      </div>
      <div id="corePrice_feature_div">
        <span class="a-price"><span class="a-offscreen">$49.99</span><span aria-hidden="true">$49<sup>99</sup></span></span>
      </div>
    </body>
    </html>
    """


@pytest.fixture
def json_ld_html() -> str:
    return """
    <html>
    <head>
      <title>Walnut Desk Lamp | Lumen Home</title>
      <meta property="og:title" content="Walnut Desk Lamp - Lumen Home" />
      <meta property="og:image" content="/images/og-lamp.jpg" />
      <meta property="product:price:amount" content="89.00" />
      <script type="application/ld+json">
        {
          "@context": "https://schema.org",
          "@graph": [
            {"@type": "WebPage", "name": "Lamp page"},
            {
              "@type": "Product",
              "name": "Walnut Desk Lamp",
              "image": ["//cdn.lumenhome.com/lamp-large.jpg", "//cdn.lumenhome.com/lamp-small.jpg"],
              "offers": {"@type": "Offer", "price": "79.50", "priceCurrency": "USD"}
            }
          ]
        }
      </script>
    </head>
    <body><h1>Walnut Desk Lamp</h1><span class="price">$79.50</span></body>
    </html>
    """


@pytest.fixture
def special_offer_html() -> str:
    return """
    <html>
    <head><title>Deals</title></head>
    <body>
      <script>window.analytics = {"price": "$3.00"};</script>
      <p>Special Offer: $49.99 today</p>
    </body>
    </html>
    """
