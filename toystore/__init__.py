"""Toy store catalog, shopping cart and order persistence core."""

__version__ = "1.0.0"
