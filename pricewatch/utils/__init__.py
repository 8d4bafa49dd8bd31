"""Utils package initialization."""
from pricewatch.utils.logger import get_logger, LayerLogger, set_trace_id, get_trace_id
from pricewatch.utils.price import parse_price, is_valid_price

__all__ = [
    "get_logger",
    "LayerLogger",
    "set_trace_id",
    "get_trace_id",
    "parse_price",
    "is_valid_price",
]
