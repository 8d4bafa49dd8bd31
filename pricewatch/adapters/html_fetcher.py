"""
HTML Fetcher Adapter.
Retrieves product pages with a browser-like header set so retailers serve
the same markup a shopper would see.
"""
from dataclasses import dataclass
from typing import Optional

import httpx

from pricewatch.config import config
from pricewatch.errors import FetchError
from pricewatch.utils.logger import LayerLogger


@dataclass
class FetchedPage:
    """A successfully retrieved page."""
    url: str
    final_url: str
    status_code: int
    html: str


class HTMLFetcher:
    """
    HTTP adapter for product pages.
    
    Follows redirects, enforces a timeout and converts every failure
    (network error, timeout, non-2xx status) into FetchError so callers
    can tell "could not reach the page" apart from "found nothing".
    """
    
    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.transport = transport
        self.logger = LayerLogger("html_fetcher")
    
    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a page and return its HTML.
        
        Args:
            url: The product page URL
        
        Returns:
            FetchedPage with the response body
        
        Raises:
            FetchError: on timeout, network failure, non-2xx status or
                a URL that cannot be requested
        """
        self.logger.log_action("fetch_html", "started", url=url, timeout=self.timeout)
        
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(url, headers=self._get_headers())
        except httpx.TimeoutException as e:
            self.logger.log_error(
                f"Timed out after {self.timeout}s: {str(e)}",
                error_type="timeout",
                url=url
            )
            raise FetchError(
                f"Timed out fetching URL after {self.timeout:g}s",
                url=url,
                timed_out=True,
            ) from e
        except httpx.HTTPError as e:
            self.logger.log_error(
                f"Failed to fetch URL: {str(e)}",
                error_type="http_error",
                url=url
            )
            raise FetchError(f"Failed to fetch URL: {str(e)}", url=url) from e
        except (httpx.InvalidURL, ValueError) as e:
            self.logger.log_error(
                f"Invalid URL: {str(e)}",
                error_type="invalid_url",
                url=url
            )
            raise FetchError(f"Invalid URL: {url}", url=url) from e
        
        if not response.is_success:
            self.logger.log_fetch(url, response.status_code, "http_status_error")
            raise FetchError(
                f"Failed to fetch URL: {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        
        html = response.text
        self.logger.log_fetch(
            url,
            response.status_code,
            "success",
            final_url=str(response.url),
            content_length=len(html),
        )
        
        return FetchedPage(
            url=url,
            final_url=str(response.url),
            status_code=response.status_code,
            html=html,
        )
    
    def _get_headers(self) -> dict:
        """Get request headers mimicking a desktop Chrome browser."""
        return {
            "User-Agent": config.USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
            "Sec-Ch-Ua": '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
            "Sec-Ch-Ua-Mobile": "?0",
            "Sec-Ch-Ua-Platform": '"macOS"',
            "Sec-Fetch-Dest": "document",
            "Sec-Fetch-Mode": "navigate",
            "Sec-Fetch-Site": "none",
            "Sec-Fetch-User": "?1",
            "Upgrade-Insecure-Requests": "1",
        }
