"""
External integrations module for DealDesk.

Currently includes:
- alpha_vantage: Alpha Vantage company overview and real-time quote
"""

from .alpha_vantage import AlphaVantageClient

__all__ = ['AlphaVantageClient']
