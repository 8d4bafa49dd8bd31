"""
Error types surfaced by the extraction engine.

Only fetch-level failures are raised to callers. Missing fields are
reported as nulls on the result record, never as exceptions.
"""
from typing import Optional


class FetchError(Exception):
    """The product page could not be retrieved (network, timeout or non-2xx)."""
    
    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        timed_out: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code
        self.timed_out = timed_out
    
    @property
    def is_timeout(self) -> bool:
        return self.timed_out
    
    def to_dict(self) -> dict:
        """Return error details for logging and API responses."""
        return {
            "error": self.message,
            "url": self.url,
            "status_code": self.status_code,
            "timed_out": self.timed_out,
        }
