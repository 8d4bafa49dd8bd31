"""
Configuration management for the price-tracking extraction engine.
Handles environment variables and application settings.
"""
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _get_optional_float(name: str) -> Optional[float]:
    """Read a numeric setting that may be left unset (empty counts as unset)."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


class Config:
    """Application configuration loaded from environment variables."""
    
    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console
    
    # Request settings
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "30"))
    REFRESH_TIMEOUT: float = float(os.getenv("REFRESH_TIMEOUT", "15"))
    USER_AGENT: str = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    )
    
    # Price acceptance policy for the background refresh flow
    REFRESH_MIN_PRICE: float = float(os.getenv("REFRESH_MIN_PRICE", "5"))
    REFRESH_MAX_PRICE: float = float(os.getenv("REFRESH_MAX_PRICE", "10000"))
    REFRESH_MIN_GENERIC_PRICE: float = float(os.getenv("REFRESH_MIN_GENERIC_PRICE", "15"))
    
    # Interactive add-product flow stays permissive unless configured
    INTERACTIVE_MIN_GENERIC_PRICE: Optional[float] = _get_optional_float("INTERACTIVE_MIN_GENERIC_PRICE")


config = Config()
