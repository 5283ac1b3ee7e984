"""
시세 데이터 피드 모듈

백테스트 엔진이 소비하는 좁은 인터페이스(과거 시세, 현재 시세)와
메모리/CSV 기반 구현을 제공합니다.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Sequence, Union, Optional

import pandas as pd
from pydantic import ValidationError

from core.exceptions import DataUnavailableError, DataValidationError
from core.models.validators import OHLCVRecord
from core.utils.log_utils import get_logger

logger = get_logger(__name__)

SUPPORTED_INTERVALS = ("day",)


@dataclass(frozen=True)
class PricePoint:
    """일봉 한 개 (날짜 오름차순으로 정렬되어 제공됨)"""
    date: date
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def from_record(cls, record: OHLCVRecord) -> 'PricePoint':
        return cls(
            date=record.date,
            open=record.open,
            high=record.high,
            low=record.low,
            close=record.close,
            volume=record.volume,
        )


@dataclass(frozen=True)
class Quote:
    """현재 시세"""
    symbol: str
    last_price: float
    volume: float
    change: float
    change_percent: float
    timestamp: datetime


class MarketDataProvider(ABC):
    """시세 데이터 제공자 인터페이스

    구현체는 데이터가 없으면 DataUnavailableError를,
    일시적인 전송 오류는 TransientDataError를 발생시켜야 합니다.
    """

    name: str = "provider"

    @abstractmethod
    def get_historical_data(
        self,
        symbol: str,
        interval: str,
        from_date: date,
        to_date: date
    ) -> List[PricePoint]:
        """과거 시세 조회 (날짜 오름차순)"""

    @abstractmethod
    def get_quotes(self, symbols: Sequence[str]) -> Dict[str, Quote]:
        """현재 시세 조회 {symbol: Quote}"""


def frame_to_price_points(df: pd.DataFrame, symbol: str = "") -> List[PricePoint]:
    """OHLCV DataFrame을 검증하여 PricePoint 리스트로 변환

    날짜는 'date' 컬럼 또는 인덱스에서 읽습니다.

    Raises:
        DataValidationError: 필수 컬럼 누락 또는 잘못된 행
    """
    frame = df.copy()
    frame.columns = [str(c).strip().lower() for c in frame.columns]
    if 'date' not in frame.columns:
        frame = frame.reset_index()
        frame = frame.rename(columns={frame.columns[0]: 'date'})

    required = ['date', 'open', 'high', 'low', 'close']
    missing = [c for c in required if c not in frame.columns]
    if missing:
        raise DataValidationError(
            f"필수 컬럼이 없습니다: {missing}", field=",".join(missing), symbol=symbol or None
        )
    if 'volume' not in frame.columns:
        frame['volume'] = 0

    points = []
    for row_number, row in enumerate(frame[required + ['volume']].to_dict('records'), start=1):
        values = {k: (v if k == 'date' else float(v)) for k, v in row.items()}
        try:
            record = OHLCVRecord(**values)
        except ValidationError as e:
            raise DataValidationError(
                f"{row_number}행 검증 실패: {e.errors()[0].get('msg', e)}",
                symbol=symbol or None,
                original_error=e,
            ) from e
        points.append(PricePoint.from_record(record))

    points.sort(key=lambda p: p.date)
    return points


def _filter_range(points: List[PricePoint], from_date: date, to_date: date) -> List[PricePoint]:
    return [p for p in points if from_date <= p.date <= to_date]


def _quote_from_points(symbol: str, points: List[PricePoint]) -> Quote:
    """마지막 두 봉으로 현재 시세 구성"""
    last = points[-1]
    prev_close = points[-2].close if len(points) > 1 else last.open
    change = last.close - prev_close
    change_percent = change / prev_close * 100 if prev_close else 0.0
    return Quote(
        symbol=symbol,
        last_price=last.close,
        volume=last.volume,
        change=change,
        change_percent=change_percent,
        timestamp=datetime.combine(last.date, datetime.min.time()),
    )


class InMemoryMarketData(MarketDataProvider):
    """메모리 기반 시세 제공자

    {symbol: PricePoint 리스트 또는 OHLCV DataFrame} 을 받아 제공합니다.
    """

    name = "memory"

    def __init__(self, data: Dict[str, Union[Sequence[PricePoint], pd.DataFrame]]):
        self._data: Dict[str, List[PricePoint]] = {}
        for symbol, series in data.items():
            if isinstance(series, pd.DataFrame):
                points = frame_to_price_points(series, symbol)
            else:
                points = sorted(series, key=lambda p: p.date)
            self._data[symbol] = points

    @property
    def symbols(self) -> List[str]:
        return list(self._data.keys())

    def get_historical_data(
        self,
        symbol: str,
        interval: str,
        from_date: date,
        to_date: date
    ) -> List[PricePoint]:
        if interval not in SUPPORTED_INTERVALS:
            raise DataUnavailableError(
                f"지원하지 않는 주기입니다: {interval}", symbol=symbol, data_source=self.name
            )
        if symbol not in self._data:
            raise DataUnavailableError(
                f"데이터가 없는 심볼입니다: {symbol}", symbol=symbol, data_source=self.name
            )
        return _filter_range(self._data[symbol], from_date, to_date)

    def get_quotes(self, symbols: Sequence[str]) -> Dict[str, Quote]:
        quotes = {}
        for symbol in symbols:
            points = self._data.get(symbol)
            if not points:
                logger.warning(f"시세 없음: {symbol}")
                continue
            quotes[symbol] = _quote_from_points(symbol, points)
        return quotes


class CsvMarketData(InMemoryMarketData):
    """CSV 디렉토리 기반 시세 제공자

    <data_dir>/<SYMBOL>.csv 파일을 읽습니다.
    컬럼: date, open, high, low, close, volume
    """

    name = "csv"

    def __init__(self, data_dir: Union[str, Path], symbols: Optional[Sequence[str]] = None):
        self.data_dir = Path(data_dir)
        if not self.data_dir.is_dir():
            raise DataUnavailableError(
                f"데이터 디렉토리가 없습니다: {self.data_dir}", data_source=self.name
            )

        if symbols is None:
            files = sorted(self.data_dir.glob("*.csv"))
        else:
            files = [self.data_dir / f"{symbol}.csv" for symbol in symbols]

        data = {}
        for path in files:
            if not path.exists():
                # 조회 시점에 DataUnavailableError로 보고됨
                logger.warning(f"CSV 파일 없음: {path}")
                continue
            data[path.stem] = pd.read_csv(path)
            logger.debug(f"CSV 로드: {path.name} ({len(data[path.stem])}행)")

        super().__init__(data)
