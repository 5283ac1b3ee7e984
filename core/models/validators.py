# -*- coding: utf-8 -*-
"""
Pydantic 데이터 검증 모델

기능:
- OHLCV 봉 데이터 검증 (양수 가격, 고가/저가 관계)
- 시세(Quote) 응답 데이터 검증
- 백테스트 요청 페이로드 검증

외부 데이터 소스(CSV, HTTP)로부터 들어오는 값은 이 모델을 거쳐
엔진 내부 타입으로 변환됩니다.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date as Date, datetime

from core.utils.log_utils import get_logger

logger = get_logger(__name__)


def _parse_date(value) -> Date:
    """ISO 문자열/datetime/date 를 date로 변환"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, Date):
        return value
    text = str(value).strip()
    if len(text) == 8 and text.isdigit():
        # YYYYMMDD
        return Date(int(text[:4]), int(text[4:6]), int(text[6:]))
    return datetime.fromisoformat(text.replace('Z', '+00:00')).date()


class OHLCVRecord(BaseModel):
    """OHLCV 데이터 검증 모델

    일봉 한 개. 날짜는 YYYY-MM-DD, YYYYMMDD, ISO datetime 모두 허용
    """
    date: Date = Field(..., description="거래일")
    open: float = Field(..., gt=0, description="시가")
    high: float = Field(..., gt=0, description="고가")
    low: float = Field(..., gt=0, description="저가")
    close: float = Field(..., gt=0, description="종가")
    volume: float = Field(default=0, ge=0, description="거래량")

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v):
        return _parse_date(v)

    @model_validator(mode='after')
    def validate_ohlc(self):
        """OHLC 관계 검증: high >= open, close >= low"""
        if self.high < self.low:
            raise ValueError(f'고가({self.high})가 저가({self.low})보다 작을 수 없습니다')
        if self.high < max(self.open, self.close):
            raise ValueError(f'고가({self.high})는 시가({self.open})와 종가({self.close})보다 크거나 같아야 합니다')
        if self.low > min(self.open, self.close):
            raise ValueError(f'저가({self.low})는 시가({self.open})와 종가({self.close})보다 작거나 같아야 합니다')
        return self


class QuoteRecord(BaseModel):
    """현재 시세 검증 모델"""
    symbol: str = Field(..., min_length=1, description="종목 심볼")
    last_price: float = Field(..., gt=0, alias='lastPrice', description="현재가")
    volume: float = Field(default=0, ge=0, description="거래량")
    change: float = Field(default=0.0, description="전일 대비 변동")
    change_percent: float = Field(default=0.0, alias='changePercent', description="등락률 (%)")
    timestamp: Optional[datetime] = Field(None, description="시세 시각")

    model_config = {'populate_by_name': True}


class BacktestRequest(BaseModel):
    """백테스트 실행 요청 검증 모델

    외부 요청(JSON)의 camelCase 키를 허용합니다.
    """
    symbols: List[str] = Field(..., min_length=1, description="대상 심볼 목록")
    strategy: str = Field(default="both", description="전략 모드")
    start_date: Date = Field(..., alias='startDate', description="시작일")
    end_date: Date = Field(..., alias='endDate', description="종료일")
    initial_capital: float = Field(default=100000, gt=0, alias='initialCapital')
    position_size_percent: float = Field(default=10, gt=0, le=100, alias='positionSize')
    commission_percent: float = Field(default=0.1, ge=0, alias='commission')
    slippage_percent: float = Field(default=0.05, ge=0, alias='slippage')

    model_config = {'populate_by_name': True}

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_dates(cls, v):
        return _parse_date(v)

    @field_validator('symbols')
    @classmethod
    def normalize_symbols(cls, v: List[str]) -> List[str]:
        # 순서를 유지하며 중복 제거
        symbols = list(dict.fromkeys(s.strip().upper() for s in v if s and s.strip()))
        if not symbols:
            raise ValueError('심볼이 최소 1개 필요합니다')
        return symbols
