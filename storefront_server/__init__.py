"""Storefront server for buying pre-priced store offers through a Saleor backend."""

__version__ = "0.1.0"
