"""Tests for retailer-specific strategies."""
import pytest
from bs4 import BeautifulSoup

from pricewatch.extractors.retailers import (
    RETAILER_STRATEGIES,
    extract_amazon,
    extract_retailer_specific,
    selector_cascade,
)
from pricewatch.models.product import ExtractionSource


def soup_of(body: str) -> BeautifulSoup:
    return BeautifulSoup(f"<html><body>{body}</body></html>", "lxml")


class TestAmazon:
    
    def test_full_page(self, amazon_html):
        result = extract_amazon(BeautifulSoup(amazon_html, "lxml"))
        
        assert result.source == ExtractionSource.RETAILER
        assert result.title == "Echo Dot (5th Gen) Smart Speaker"
        assert result.price == pytest.approx(49.99)
        assert result.image_url == "https://m.media-amazon.com/images/I/echo._AC_SL1500_.jpg"
    
    def test_hi_res_src_kept(self):
        soup = soup_of(
            '<span id="productTitle">Kindle</span>'
            '<img id="landingImage" src="https://m.media-amazon.com/images/I/kindle.jpg" '
            'data-a-dynamic-image=\'{"https://m.media-amazon.com/images/I/kindle._SL500_.jpg": [500, 500]}\' />'
        )
        
        assert extract_amazon(soup).image_url == "https://m.media-amazon.com/images/I/kindle.jpg"
    
    def test_malformed_dynamic_image_keeps_src(self):
        soup = soup_of(
            '<img id="landingImage" src="https://m.media-amazon.com/images/I/a._SX300_.jpg" '
            'data-a-dynamic-image="{not json" />'
        )
        
        assert extract_amazon(soup).image_url == "https://m.media-amazon.com/images/I/a._SX300_.jpg"
    
    def test_legacy_price_block(self):
        soup = soup_of('<span id="priceblock_ourprice">$1,099.00</span>')
        
        assert extract_amazon(soup).price == pytest.approx(1099.0)


class TestOtherStrategies:
    
    def test_target(self):
        soup = soup_of(
            '<h1 data-test="product-title">Stoneware Dinner Plate</h1>'
            '<div data-test="product-price">$19.99</div>'
        )
        
        result = extract_retailer_specific(soup, "target")
        
        assert result.title == "Stoneware Dinner Plate"
        assert result.price == pytest.approx(19.99)
    
    def test_walmart_price_from_content_attribute(self):
        soup = soup_of('<h1 itemprop="name">Box Fan</h1><span itemprop="price" content="24.88">Now $24.88</span>')
        
        result = extract_retailer_specific(soup, "walmart")
        
        assert result.title == "Box Fan"
        assert result.price == pytest.approx(24.88)
    
    def test_markup_missing_yields_empty(self):
        result = extract_retailer_specific(soup_of("<p>Nothing known here</p>"), "bestbuy")
        
        assert result.source == ExtractionSource.RETAILER
        assert result.is_empty()
    
    @pytest.mark.parametrize("tag", ["generic", "costco", "not-a-retailer"])
    def test_unregistered_tag_yields_empty(self, tag):
        soup = soup_of("<h1>Some Product</h1>")
        
        assert extract_retailer_specific(soup, tag).is_empty()
    
    def test_every_strategy_runs_on_empty_page(self):
        soup = soup_of("")
        for tag, strategy in RETAILER_STRATEGIES.items():
            assert strategy(soup).source == ExtractionSource.RETAILER, tag


class TestSelectorCascade:
    
    def test_skips_empty_candidates(self):
        soup = soup_of('<h1 class="title"> </h1><h2 class="name">Second Choice</h2>')
        
        result = selector_cascade(soup, title=["h1.title", "h2.name"])
        
        assert result.title == "Second Choice"
    
    def test_skips_data_uri_images(self):
        soup = soup_of(
            '<img class="hero" src="data:image/gif;base64,R0lGOD" />'
            '<img class="fallback" src="https://cdn.example.com/real.jpg" />'
        )
        
        result = selector_cascade(soup, image=["img.hero", "img.fallback"])
        
        assert result.image_url == "https://cdn.example.com/real.jpg"
    
    def test_lazy_loaded_image(self):
        soup = soup_of('<img class="hero" data-src="https://cdn.example.com/lazy.jpg" />')
        
        assert selector_cascade(soup, image=["img.hero"]).image_url == "https://cdn.example.com/lazy.jpg"
