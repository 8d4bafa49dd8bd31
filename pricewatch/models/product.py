"""
Product extraction models.

These records are ephemeral: every extraction call builds its own
instances and hands the final ScrapedProduct to the caller, which owns
persistence and price history.
"""
from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field

from pricewatch.config import config
from pricewatch.utils.price import is_valid_price


PRODUCT_FIELDS = ("title", "price", "image_url")


class ExtractionSource(str, Enum):
    """Where a partial extraction came from, in decreasing order of trust."""
    RETAILER = "retailer"
    JSON_LD = "json_ld"
    META = "meta"
    GENERIC = "generic"


class ChangeType(str, Enum):
    """Direction of a price change between two checks."""
    DROPPED = "dropped"
    INCREASED = "increased"
    SAME = "same"


class NotificationType(str, Enum):
    """Kind of price notification a refresh should raise."""
    PRICE_DROP = "price_drop"
    TARGET_REACHED = "target_reached"


class PartialExtraction(BaseModel):
    """
    Output of a single extractor.
    
    Every field is independently present or absent; the orchestrator
    tolerates any subset being populated.
    """
    title: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None
    source: Optional[ExtractionSource] = None
    
    def get_present_fields(self) -> List[str]:
        """Return list of product fields that have values."""
        return [name for name in PRODUCT_FIELDS if getattr(self, name) is not None]
    
    def is_empty(self) -> bool:
        return not self.get_present_fields()


class ScrapedProduct(BaseModel):
    """Consolidated extraction result for one product page."""
    title: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None
    retailer: str
    
    def get_present_fields(self) -> List[str]:
        """Return list of product fields that have values."""
        return [name for name in PRODUCT_FIELDS if getattr(self, name) is not None]
    
    def get_missing_fields(self) -> List[str]:
        """Return list of product fields that could not be recovered."""
        return [name for name in PRODUCT_FIELDS if getattr(self, name) is None]


class PricePolicy(BaseModel):
    """
    Caller-owned acceptance rules for extracted prices.
    
    Bounds are inclusive; None disables a bound. The generic minimum only
    applies to prices found by the generic fallback heuristics, which are
    the most likely to pick up unrelated numbers on a page.
    """
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_generic_price: Optional[float] = None
    
    @classmethod
    def permissive(cls) -> "PricePolicy":
        """Interactive add-product flow: take whatever the page offers."""
        return cls(min_generic_price=config.INTERACTIVE_MIN_GENERIC_PRICE)
    
    @classmethod
    def strict(cls) -> "PricePolicy":
        """Background refresh flow: bounded prices, stricter generic floor."""
        return cls(
            min_price=config.REFRESH_MIN_PRICE,
            max_price=config.REFRESH_MAX_PRICE,
            min_generic_price=config.REFRESH_MIN_GENERIC_PRICE,
        )
    
    def accepts(self, price: Optional[float], source: Optional[ExtractionSource] = None) -> bool:
        if not is_valid_price(price, self.min_price, self.max_price):
            return False
        if source == ExtractionSource.GENERIC and self.min_generic_price is not None:
            return price >= self.min_generic_price
        return True


class PriceRefreshResult(BaseModel):
    """Outcome of re-checking the price of a saved product."""
    url: str
    old_price: Optional[float] = None
    new_price: Optional[float] = None
    changed: bool = False
    change_type: ChangeType = ChangeType.SAME
    change_amount: float = Field(default=0.0, ge=0.0)
    change_percent: int = Field(default=0, ge=0)
    target_price: Optional[float] = None
    is_below_target: bool = False
    notification: Optional[NotificationType] = None
    message: Optional[str] = None
