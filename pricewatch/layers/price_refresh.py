"""
Price Refresh Layer.

Background re-check of a saved product's price: extracts with the strict
price policy and classifies the change against the previously stored
price and the user's target. Persisting the new price and delivering
notifications belong to the caller.
"""
import math
from typing import Optional

from pricewatch.config import config
from pricewatch.layers.extraction import ExtractionLayer
from pricewatch.models.product import (
    ChangeType,
    NotificationType,
    PricePolicy,
    PriceRefreshResult,
)
from pricewatch.utils.logger import LayerLogger

NO_PRICE_MESSAGE = "Could not fetch price from website"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_price_change(
    url: str,
    old_price: Optional[float],
    new_price: float,
    target_price: Optional[float] = None,
    notify_on_price_drop: bool = True,
) -> PriceRefreshResult:
    """
    Classify a freshly extracted price against the stored one.
    
    Change amount and percent are only reported when there was a previous
    price to compare with. A notification is decided only for drops.
    """
    changed = old_price != new_price
    change_type = ChangeType.SAME
    change_amount = 0.0
    change_percent = 0
    
    if old_price and changed:
        change_amount = round(abs(new_price - old_price), 2)
        change_percent = _round_half_up(abs(new_price - old_price) / old_price * 100)
        change_type = ChangeType.DROPPED if new_price < old_price else ChangeType.INCREASED
    
    is_below_target = target_price is not None and new_price < target_price
    
    notification = None
    if change_type == ChangeType.DROPPED and notify_on_price_drop and old_price:
        notification = NotificationType.TARGET_REACHED if is_below_target else NotificationType.PRICE_DROP
    
    return PriceRefreshResult(
        url=url,
        old_price=old_price,
        new_price=new_price,
        changed=changed,
        change_type=change_type,
        change_amount=change_amount,
        change_percent=change_percent,
        target_price=target_price,
        is_below_target=is_below_target,
        notification=notification,
    )


class PriceRefreshLayer:
    """
    Price Refresh Layer - re-checks one product URL.
    
    Uses a shorter fetch timeout and the strict price policy: bounded
    prices overall and a higher floor for generic-fallback prices, so an
    unrelated number on the page is not recorded as a price change.
    FetchError propagates to the caller unchanged.
    """
    
    def __init__(
        self,
        extraction_layer: Optional[ExtractionLayer] = None,
        policy: Optional[PricePolicy] = None,
    ):
        self.extraction_layer = extraction_layer or ExtractionLayer(timeout=config.REFRESH_TIMEOUT)
        self.policy = policy or PricePolicy.strict()
        self.logger = LayerLogger("price_refresh")
    
    async def refresh(
        self,
        url: str,
        old_price: Optional[float] = None,
        target_price: Optional[float] = None,
        notify_on_price_drop: bool = True,
    ) -> PriceRefreshResult:
        """
        Re-extract the price for ``url`` and compare it with ``old_price``.
        
        Raises:
            FetchError: the page could not be retrieved
        """
        self.logger.log_action(
            "price_refresh",
            "started",
            url=url,
            old_price=old_price,
            **self.policy.model_dump(),
        )
        
        product = await self.extraction_layer.extract(url, policy=self.policy)
        
        if product.price is None:
            self.logger.log_decision(
                decision="no_price",
                reason="No source produced a price accepted by the refresh policy",
                url=url,
            )
            return PriceRefreshResult(
                url=url,
                old_price=old_price,
                target_price=target_price,
                message=NO_PRICE_MESSAGE,
            )
        
        result = compute_price_change(
            url,
            old_price,
            product.price,
            target_price=target_price,
            notify_on_price_drop=notify_on_price_drop,
        )
        
        self.logger.log_action(
            "price_refresh",
            "completed",
            url=url,
            new_price=result.new_price,
            change_type=result.change_type.value,
            notification=result.notification.value if result.notification else None,
        )
        return result
