"""MediStock: medical-supply movements and the stock levels derived from them."""

__version__ = "1.0.0"
