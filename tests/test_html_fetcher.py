"""Tests for the HTML fetcher adapter."""
import httpx
import pytest

from pricewatch.errors import FetchError

URL = "https://shop.example.com/p/1"


@pytest.mark.asyncio
async def test_fetch_success(make_fetcher, serve_pages):
    fetcher = make_fetcher(serve_pages({URL: (200, "<html><body>ok</body></html>")}))
    
    page = await fetcher.fetch(URL)
    
    assert page.status_code == 200
    assert page.final_url == URL
    assert "ok" in page.html


@pytest.mark.asyncio
async def test_sends_browser_headers(make_fetcher):
    seen = {}
    
    def handler(request):
        seen.update(request.headers)
        return httpx.Response(200, text="<html></html>")
    
    await make_fetcher(handler).fetch(URL)
    
    assert "Mozilla/5.0" in seen["user-agent"]
    assert seen["accept-language"].startswith("en-US")
    assert "text/html" in seen["accept"]


@pytest.mark.asyncio
async def test_follows_redirects(make_fetcher):
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(302, headers={"Location": URL})
        return httpx.Response(200, text="<html>moved</html>")
    
    page = await make_fetcher(handler).fetch("https://shop.example.com/old")
    
    assert page.url == "https://shop.example.com/old"
    assert page.final_url == URL


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [403, 404, 500, 503])
async def test_error_status(make_fetcher, status):
    fetcher = make_fetcher(lambda request: httpx.Response(status, text="nope"))
    
    with pytest.raises(FetchError) as exc_info:
        await fetcher.fetch(URL)
    
    assert exc_info.value.status_code == status
    assert exc_info.value.message == f"Failed to fetch URL: {status}"
    assert not exc_info.value.is_timeout


@pytest.mark.asyncio
async def test_timeout(make_fetcher):
    def handler(request):
        raise httpx.ConnectTimeout("connect timed out", request=request)
    
    with pytest.raises(FetchError) as exc_info:
        await make_fetcher(handler, timeout=15).fetch(URL)
    
    error = exc_info.value
    assert error.is_timeout
    assert error.status_code is None
    assert error.message == "Timed out fetching URL after 15s"
    assert error.to_dict()["timed_out"] is True


@pytest.mark.asyncio
async def test_network_error(make_fetcher):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)
    
    with pytest.raises(FetchError) as exc_info:
        await make_fetcher(handler).fetch(URL)
    
    assert not exc_info.value.is_timeout
    assert exc_info.value.url == URL


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["http://[::1", "http://shop.example.com:port/p/1"])
async def test_unrequestable_url(make_fetcher, serve_pages, url):
    with pytest.raises(FetchError) as exc_info:
        await make_fetcher(serve_pages({})).fetch(url)
    
    assert exc_info.value.message == f"Invalid URL: {url}"
    assert exc_info.value.url == url
    assert exc_info.value.status_code is None
