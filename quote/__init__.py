"""
Solar Quote Package
Sizing, financial projection and PDF assembly for solar installation quotes.
"""

__version__ = "1.0.0"
__author__ = "Solar Model Team"

from .fields import compute_fields

__all__ = ["compute_fields"]
