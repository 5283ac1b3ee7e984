"""
HTTP market data client module.

JSON 시세 서버로부터 과거/현재 시세를 조회합니다.
재시도는 core.data.retry 정책이 담당하며, 이 클라이언트는
오류를 재시도 가능/불가로 구분하여 발생시키기만 합니다.
"""

from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

import pandas as pd
import requests
from pydantic import ValidationError

from core.config import settings
from core.data.feed import MarketDataProvider, PricePoint, Quote, frame_to_price_points
from core.exceptions import DataUnavailableError, TransientDataError, DataValidationError
from core.models.validators import QuoteRecord
from core.utils.log_utils import get_logger

logger = get_logger(__name__)


class HttpMarketDataClient(MarketDataProvider):
    """HTTP JSON 시세 클라이언트

    엔드포인트:
        GET {base_url}/historical?symbol=&interval=&from=&to=  -> {"data": [bar, ...]}
        GET {base_url}/quotes?symbols=A,B                       -> {"data": [quote, ...]}
    """

    name = "http"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.base_url = (base_url or settings.MARKET_DATA_URL).rstrip('/')
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def _get(self, path: str, params: Dict, symbol: Optional[str] = None) -> Dict:
        """GET 요청 실행

        Raises:
            TransientDataError: 타임아웃, 연결 오류, 5xx (재시도 가능)
            DataUnavailableError: 4xx (재시도 불가)
        """
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as e:
            raise TransientDataError(
                f"시세 요청 타임아웃: {url}", symbol=symbol, data_source=self.name, original_error=e
            ) from e
        except requests.ConnectionError as e:
            raise TransientDataError(
                f"시세 서버 연결 실패: {url}", symbol=symbol, data_source=self.name, original_error=e
            ) from e

        status_code = response.status_code

        # 5xx 서버 에러 → 재시도
        if 500 <= status_code < 600:
            logger.warning(f"시세 서버 에러 (재시도 예정): {status_code}, {response.text[:200]}")
            raise TransientDataError(
                f"HTTP {status_code}: {response.text[:200]}",
                status_code=status_code, symbol=symbol, data_source=self.name
            )

        # 4xx 클라이언트 에러 → 재시도 불가
        if 400 <= status_code < 500:
            raise DataUnavailableError(
                f"HTTP {status_code}: {response.text[:200]}",
                symbol=symbol, data_source=self.name
            ).with_context(status_code=status_code)

        try:
            return response.json()
        except ValueError as e:
            raise DataValidationError(
                f"JSON 파싱 실패: {url}", symbol=symbol, data_source=self.name, original_error=e
            ) from e

    def get_historical_data(
        self,
        symbol: str,
        interval: str,
        from_date: date,
        to_date: date
    ) -> List[PricePoint]:
        payload = self._get(
            "historical",
            {
                'symbol': symbol,
                'interval': interval,
                'from': from_date.isoformat(),
                'to': to_date.isoformat(),
            },
            symbol=symbol,
        )
        bars = payload.get('data') or []
        if not bars:
            raise DataUnavailableError(
                f"과거 시세가 비어 있습니다: {symbol}", symbol=symbol, data_source=self.name
            )
        return frame_to_price_points(pd.DataFrame(bars), symbol)

    def get_quotes(self, symbols: Sequence[str]) -> Dict[str, Quote]:
        payload = self._get("quotes", {'symbols': ",".join(symbols)})
        quotes = {}
        for item in payload.get('data') or []:
            try:
                record = QuoteRecord.model_validate(item)
            except ValidationError as e:
                logger.warning(f"시세 검증 실패, 건너뜀: {item} ({e.error_count()}건)")
                continue
            quotes[record.symbol] = Quote(
                symbol=record.symbol,
                last_price=record.last_price,
                volume=record.volume,
                change=record.change,
                change_percent=record.change_percent,
                timestamp=record.timestamp or datetime.now(),
            )
        return quotes
