"""Storefront service: admin authentication, session cart and static uploads."""

__version__ = "1.0.0"
