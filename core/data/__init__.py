"""
시세 데이터 모듈

백테스트 엔진이 사용하는 시세 제공자 인터페이스와 구현체
"""

from .feed import (
    PricePoint,
    Quote,
    MarketDataProvider,
    InMemoryMarketData,
    CsvMarketData,
    frame_to_price_points,
)
from .retry import RetryPolicy, NO_WAIT_POLICY, fetch_with_retry
from .http_client import HttpMarketDataClient

__all__ = [
    'PricePoint',
    'Quote',
    'MarketDataProvider',
    'InMemoryMarketData',
    'CsvMarketData',
    'frame_to_price_points',
    'RetryPolicy',
    'NO_WAIT_POLICY',
    'fetch_with_retry',
    'HttpMarketDataClient',
]
