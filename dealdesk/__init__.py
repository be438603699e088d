"""
DealDesk - AI-assisted company research and deal screening.

Combines a Gemini company profile with Alpha Vantage financials into a
heuristic deal score, six pre-LOI risk ratings and a persisted pipeline.
"""

__version__ = "0.1.0"
