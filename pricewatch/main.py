"""
Price Tracker Extraction Service - FastAPI Application
Thin HTTP surface over the extraction engine. Authentication, persistence
and notification delivery live in the calling application.
"""
from typing import Optional
from urllib.parse import urlparse

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from pricewatch import __version__
from pricewatch.config import config
from pricewatch.errors import FetchError
from pricewatch.layers.extraction import ExtractionLayer
from pricewatch.layers.price_refresh import PriceRefreshLayer
from pricewatch.layers.retailer_detection import classify_retailer
from pricewatch.models.product import PricePolicy, PriceRefreshResult, ScrapedProduct
from pricewatch.utils.logger import get_logger, set_trace_id


# Initialize FastAPI app
app = FastAPI(
    title="Price Tracker Extraction Service",
    description="Extracts product title, price and image from retailer product pages",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize layers
extraction_layer = ExtractionLayer()
price_refresh_layer = PriceRefreshLayer()

logger = get_logger("main")


# Request/Response models
class ScrapeRequest(BaseModel):
    """Request model for the add-product pre-fill."""
    url: Optional[str] = None


class RefreshPriceRequest(BaseModel):
    """Request model for a background price refresh."""
    url: Optional[str] = None
    old_price: Optional[float] = None
    target_price: Optional[float] = None
    notify_on_price_drop: bool = True


class RetailerResponse(BaseModel):
    """Response model for retailer classification."""
    url: str
    display_name: str
    type_tag: str


def _require_product_url(url: Optional[str]) -> str:
    """Validate a product URL, raising 400 for missing or malformed input."""
    if not url or not url.strip():
        raise HTTPException(status_code=400, detail="URL is required")
    
    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid URL")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise HTTPException(status_code=400, detail="Invalid URL")
    return url


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/api/retailers/classify", response_model=RetailerResponse)
async def classify(url: str = Query(..., description="Product URL to classify")):
    """Classify a URL into a retailer display name and extraction type tag."""
    info = classify_retailer(url)
    return RetailerResponse(url=url, display_name=info.display_name, type_tag=info.type_tag)


@app.post("/api/products/scrape", response_model=ScrapedProduct)
async def scrape_product(request: ScrapeRequest):
    """
    Extract title, price and image for a product URL.
    
    Best-effort pre-fill: any field may be null. A page that cannot be
    fetched is reported as a 400, never as an empty product.
    """
    trace_id = set_trace_id()
    url = _require_product_url(request.url)
    
    logger.info("scrape_request", url=url, trace_id=trace_id)
    
    try:
        return await extraction_layer.extract(url, policy=PricePolicy.permissive())
    except FetchError as e:
        logger.warning("scrape_fetch_failed", **e.to_dict())
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error("scrape_error", error=str(e), url=url)
        raise HTTPException(status_code=500, detail="Failed to scrape product data")


@app.post("/api/products/refresh-price", response_model=PriceRefreshResult)
async def refresh_price(request: RefreshPriceRequest):
    """
    Re-check a product's price against its stored price and target.
    
    The caller persists the new price and sends any notification named
    in the response.
    """
    trace_id = set_trace_id()
    url = _require_product_url(request.url)
    
    logger.info(
        "refresh_price_request",
        url=url,
        old_price=request.old_price,
        target_price=request.target_price,
        trace_id=trace_id
    )
    
    try:
        return await price_refresh_layer.refresh(
            url,
            old_price=request.old_price,
            target_price=request.target_price,
            notify_on_price_drop=request.notify_on_price_drop,
        )
    except FetchError as e:
        logger.warning("refresh_fetch_failed", **e.to_dict())
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error("refresh_price_error", error=str(e), url=url)
        raise HTTPException(status_code=500, detail="Failed to refresh price")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
