"""Adapters package initialization."""
from pricewatch.adapters.html_fetcher import HTMLFetcher, FetchedPage

__all__ = ["HTMLFetcher", "FetchedPage"]
