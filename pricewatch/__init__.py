"""Product-data extraction engine for the wishlist price tracker."""

__version__ = "1.0.0"
