"""Tests for the HTTP surface."""
import json

import pytest
from fastapi.testclient import TestClient

from pricewatch import main
from pricewatch.layers.extraction import ExtractionLayer
from pricewatch.layers.price_refresh import PriceRefreshLayer

URL = "https://www.lumenhome.com/products/walnut-lamp"


@pytest.fixture
def client():
    return TestClient(main.app)


@pytest.fixture
def serve(monkeypatch, make_fetcher, serve_pages):
    """Point both endpoint layers at an in-process page server."""
    def _serve(pages):
        extraction_layer = ExtractionLayer(fetcher=make_fetcher(serve_pages(pages)))
        monkeypatch.setattr(main, "extraction_layer", extraction_layer)
        monkeypatch.setattr(main, "price_refresh_layer", PriceRefreshLayer(extraction_layer=extraction_layer))
    return _serve


def test_health(client):
    response = client.get("/api/health")
    
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_classify(client):
    response = client.get("/api/retailers/classify", params={"url": "https://www.macys.com/shop/product/1"})
    
    assert response.json() == {
        "url": "https://www.macys.com/shop/product/1",
        "display_name": "Macy's",
        "type_tag": "macys",
    }


class TestScrape:
    
    def test_success(self, client, serve, json_ld_html):
        serve({URL: (200, json_ld_html)})
        
        response = client.post("/api/products/scrape", json={"url": URL})
        
        assert response.status_code == 200
        assert response.json() == {
            "title": "Walnut Desk Lamp",
            "price": 79.5,
            "image_url": "https://cdn.lumenhome.com/lamp-large.jpg",
            "retailer": "Lumenhome",
        }
    
    def test_partial_result_is_not_an_error(self, client, serve):
        serve({URL: (200, "<html><head><title>Lamp</title></head><body></body></html>")})
        
        response = client.post("/api/products/scrape", json={"url": URL})
        
        assert response.status_code == 200
        assert response.json()["price"] is None
        assert response.json()["title"] == "Lamp"
    
    def test_missing_url(self, client):
        response = client.post("/api/products/scrape", json={})
        
        assert response.status_code == 400
        assert response.json()["detail"] == "URL is required"
    
    @pytest.mark.parametrize("url", ["lamp", "ftp://files.example.com/lamp", "https://", "http://[::1"])
    def test_invalid_url(self, client, url):
        response = client.post("/api/products/scrape", json={"url": url})
        
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid URL"
    
    def test_fetch_failure(self, client, serve):
        serve({})
        
        response = client.post("/api/products/scrape", json={"url": URL})
        
        assert response.status_code == 400
        assert response.json()["detail"] == "Failed to fetch URL: 404"


class TestRefreshPrice:
    
    def page(self, price):
        block = json.dumps({"@type": "Product", "name": "Walnut Desk Lamp", "offers": {"price": price}})
        return f'<html><head><script type="application/ld+json">{block}</script></head></html>'
    
    def test_price_drop(self, client, serve):
        serve({URL: (200, self.page("79.99"))})
        
        response = client.post(
            "/api/products/refresh-price",
            json={"url": URL, "old_price": 99.99, "target_price": 80},
        )
        
        body = response.json()
        assert response.status_code == 200
        assert body["change_type"] == "dropped"
        assert body["change_percent"] == 20
        assert body["notification"] == "target_reached"
    
    def test_no_price(self, client, serve):
        serve({URL: (200, "<html><body>Sold out</body></html>")})
        
        response = client.post("/api/products/refresh-price", json={"url": URL, "old_price": 99.99})
        
        assert response.status_code == 200
        assert response.json()["message"] == "Could not fetch price from website"
        assert response.json()["new_price"] is None
    
    def test_fetch_failure(self, client, serve):
        serve({})
        
        response = client.post("/api/products/refresh-price", json={"url": URL})
        
        assert response.status_code == 400
