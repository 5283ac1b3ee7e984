# -*- coding: utf-8 -*-
"""
Models module

Pydantic models for data validation.

Includes:
- OHLCVRecord: daily bar validation
- QuoteRecord: quote payload validation
- BacktestRequest: backtest request payload validation
"""

from .validators import OHLCVRecord, QuoteRecord, BacktestRequest

__all__ = ['OHLCVRecord', 'QuoteRecord', 'BacktestRequest']
