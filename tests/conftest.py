"""
Pytest configuration file.
"""

import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

# 프로젝트 루트 디렉토리를 Python 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.data.feed import PricePoint, InMemoryMarketData  # noqa: E402


def make_points(closes, start=date(2024, 1, 1), step=1):
    """종가 리스트로 일봉 생성 (날짜 간격 step일)"""
    return [
        PricePoint(
            date=start + timedelta(days=i * step),
            open=close,
            high=close * 1.01,
            low=close * 0.99,
            close=close,
            volume=1000,
        )
        for i, close in enumerate(closes)
    ]


def v_shape_closes():
    """30일 하락 후 30일 상승 (100 -> 71 -> 101)"""
    return [100.0 - i for i in range(30)] + [72.0 + i for i in range(30)]


@pytest.fixture
def rising_points():
    return make_points([100.0 + i for i in range(40)])


@pytest.fixture
def falling_points():
    return make_points([100.0 - i for i in range(40)])


@pytest.fixture
def v_shape_points():
    return make_points(v_shape_closes())


@pytest.fixture
def provider(v_shape_points, rising_points):
    """메모리 시세 제공자 (V자 종목, 상승 종목)"""
    return InMemoryMarketData({'VSHAPE': v_shape_points, 'RISING': rising_points})
