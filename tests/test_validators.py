"""
Pydantic 데이터 검증 모델 테스트

테스트 항목:
1. OHLCV 데이터 검증
2. 시세 데이터 검증
3. 백테스트 요청 검증
"""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from core.models.validators import OHLCVRecord, QuoteRecord, BacktestRequest


class TestOHLCVRecord:
    """OHLCVRecord 테스트"""

    def test_valid(self):
        record = OHLCVRecord(date='2024-01-02', open=100, high=105, low=98, close=103, volume=1000)
        assert record.date == date(2024, 1, 2)
        assert record.close == 103.0

    @pytest.mark.parametrize("value", ['20240102', '2024-01-02T09:15:00', datetime(2024, 1, 2, 9, 15)])
    def test_date_formats(self, value):
        record = OHLCVRecord(date=value, open=100, high=105, low=98, close=103)
        assert record.date == date(2024, 1, 2)

    def test_volume_defaults_to_zero(self):
        assert OHLCVRecord(date='2024-01-02', open=1, high=1, low=1, close=1).volume == 0

    def test_high_below_low(self):
        with pytest.raises(ValidationError):
            OHLCVRecord(date='2024-01-02', open=100, high=90, low=95, close=92)

    def test_close_above_high(self):
        with pytest.raises(ValidationError):
            OHLCVRecord(date='2024-01-02', open=100, high=105, low=98, close=106)

    def test_negative_price(self):
        with pytest.raises(ValidationError):
            OHLCVRecord(date='2024-01-02', open=-1, high=105, low=98, close=100)


class TestQuoteRecord:
    """QuoteRecord 테스트"""

    def test_camel_case_alias(self):
        record = QuoteRecord.model_validate({'symbol': 'TCS', 'lastPrice': 3500, 'changePercent': 1.5})
        assert record.last_price == 3500
        assert record.change_percent == 1.5

    def test_field_names_accepted(self):
        record = QuoteRecord(symbol='TCS', last_price=10)
        assert record.volume == 0

    def test_non_positive_price(self):
        with pytest.raises(ValidationError):
            QuoteRecord(symbol='TCS', last_price=0)


class TestBacktestRequest:
    """BacktestRequest 테스트"""

    def test_symbols_normalized(self):
        request = BacktestRequest.model_validate({
            'symbols': [' tcs ', 'infy', ''],
            'startDate': '2024-01-01',
            'endDate': '2024-02-01',
        })
        assert request.symbols == ['TCS', 'INFY']
        assert request.strategy == 'both'
        assert request.initial_capital == 100000

    def test_repeated_symbols_collapsed(self):
        request = BacktestRequest.model_validate({
            'symbols': ['tcs', 'INFY', ' TCS'],
            'startDate': '2024-01-01',
            'endDate': '2024-02-01',
        })
        assert request.symbols == ['TCS', 'INFY']

    def test_blank_symbols_rejected(self):
        with pytest.raises(ValidationError):
            BacktestRequest.model_validate({
                'symbols': [' '], 'startDate': '2024-01-01', 'endDate': '2024-02-01'
            })

    def test_position_size_bounds(self):
        with pytest.raises(ValidationError):
            BacktestRequest.model_validate({
                'symbols': ['TCS'], 'startDate': '2024-01-01', 'endDate': '2024-02-01',
                'positionSize': 120,
            })
