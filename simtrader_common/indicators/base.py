"""
Base helpers for technical indicators.
"""

import pandas as pd
from typing import Sequence

# 표시용 반올림 자릿수
DISPLAY_DECIMALS = 2


def to_series(values: Sequence[float]) -> pd.Series:
    """시퀀스를 0부터 시작하는 float Series로 변환

    Args:
        values: 숫자 시퀀스 (list, tuple, ndarray, pd.Series)

    Returns:
        pd.Series: float Series (기존 인덱스는 버림)

    Raises:
        ValueError: 빈 시퀀스
    """
    series = pd.Series(list(values), dtype=float)
    if series.empty:
        raise ValueError("가격 데이터가 비어 있습니다")
    return series


def align(*columns: pd.Series) -> list:
    """길이가 다른 OHLC 시퀀스를 최근 값 기준으로 같은 길이로 맞춤"""
    length = min(len(c) for c in columns)
    return [c.tail(length).reset_index(drop=True) for c in columns]


def seeded_ewm(values: pd.Series, period: int, alpha: float) -> pd.Series:
    """첫 period개의 단순평균으로 시작하는 지수평활 시계열

    seed = mean(values[:period]), 이후 y = (1 - alpha) * y + alpha * x.
    반환 Series의 인덱스는 values[period-1:] 의 인덱스와 같습니다.
    """
    seed = pd.Series([values.iloc[:period].mean()], index=[values.index[period - 1]])
    seeded = pd.concat([seed, values.iloc[period:]])
    return seeded.ewm(alpha=alpha, adjust=False).mean()


def round_value(value: float) -> float:
    """표시 안정성을 위한 소수점 2자리 반올림"""
    return round(float(value), DISPLAY_DECIMALS)
