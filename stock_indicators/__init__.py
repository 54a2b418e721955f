"""
Stock Indicators - Technical Indicator Computation Pipeline

Computes moving averages, oscillators, bands and volatility measures from
aligned OHLCV series and classifies every bar into a categorical signal.
"""

__version__ = "1.0.0"
__author__ = "StockIndicators"
