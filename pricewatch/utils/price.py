"""
Price normalization.

Turns free-form price strings scraped from product pages ("$1,234.56",
"1.234,56 €", "- £12.00", "Now only $24.99 (was $39.99)") into a plain
positive float, or None when no usable price is present.
"""
import math
import re
from typing import Any, Optional

CURRENCY_SYMBOLS = re.compile(r"[£€¥₹$]")
CURRENCY_CODES = re.compile(r"USD|EUR|GBP|CAD|AUD", re.IGNORECASE)
LEADING_DASH = re.compile(r"^\s*-\s*")

# First run of digits and separators, e.g. "1.234,56" or "24.99"
NUMBER_RUN = re.compile(r"\d[\d,.]*")


def parse_price(value: Any) -> Optional[float]:
    """
    Parse a price string into a float.
    
    Numbers are validated as-is. Strings have currency symbols and ISO
    codes stripped, the first numeric run is taken, and comma/period are
    disambiguated between decimal and thousands separators.
    
    Args:
        value: Raw price (string, number or None)
    
    Returns:
        Positive finite price, or None
    """
    if value is None or isinstance(value, bool):
        return None
    
    if isinstance(value, (int, float)):
        return _positive_or_none(float(value))
    
    cleaned = str(value).strip()
    if not cleaned:
        return None
    
    cleaned = CURRENCY_SYMBOLS.sub("", cleaned)
    cleaned = CURRENCY_CODES.sub("", cleaned)
    cleaned = LEADING_DASH.sub("", cleaned)
    
    match = NUMBER_RUN.search(cleaned)
    if not match:
        return None
    
    run = match.group().rstrip(".,")
    
    try:
        price = float(_normalize_separators(run))
    except ValueError:
        return None
    
    return _positive_or_none(price)


def _normalize_separators(run: str) -> str:
    """Rewrite a numeric run so that '.' is the only (decimal) separator."""
    has_comma = "," in run
    has_period = "." in run
    
    if has_comma and has_period:
        # Whichever separator comes last is the decimal point
        if run.rfind(",") > run.rfind("."):
            decimal = ","
        else:
            decimal = "."
        integer, _, fraction = run.rpartition(decimal)
        integer = integer.replace(",", "").replace(".", "")
        return f"{integer}.{fraction}"
    
    if has_comma:
        parts = run.split(",")
        if len(parts) == 2 and len(parts[1]) <= 2:
            return run.replace(",", ".")
        return run.replace(",", "")
    
    if run.count(".") > 1:
        # "1.234.567" - periods can only be grouping here
        return run.replace(".", "")
    
    return run


def _positive_or_none(price: float) -> Optional[float]:
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def is_valid_price(
    price: Optional[float],
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> bool:
    """Check a parsed price against inclusive bounds (None = unbounded)."""
    if price is None:
        return False
    if minimum is not None and price < minimum:
        return False
    if maximum is not None and price > maximum:
        return False
    return True
