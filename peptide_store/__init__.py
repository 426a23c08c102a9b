"""Peptide storefront and admin console API."""

__version__ = "1.0.0"
