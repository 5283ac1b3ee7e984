"""
예외 체계 테스트

SimTraderException 기본 클래스, 도메인별 계층, error_code/context 필드를 검증합니다.
"""

import pytest

from core.exceptions import (
    SimTraderException,
    ErrorSeverity,
    ErrorCategory,
    ConfigException,
    InvalidConfigError,
    DataException,
    DataFetchError,
    DataUnavailableError,
    TransientDataError,
    DataValidationError,
    BacktestException,
    BacktestTimeoutError,
    BacktestStateError,
    wrap_exception,
    is_retryable,
)


class TestBaseException:
    """SimTraderException 테스트"""

    def test_defaults(self):
        error = SimTraderException("문제 발생")
        assert error.message == "문제 발생"
        assert error.severity == ErrorSeverity.ERROR
        assert error.category == ErrorCategory.UNKNOWN
        assert error.error_code == "UNKNOWN_SIMTRADEREXCEPTION"
        assert error.context == {}

    def test_with_context_and_trace(self):
        error = SimTraderException("x").with_context(symbol="TCS").with_trace_id("abcd1234")
        text = str(error)
        assert "symbol=TCS" in text
        assert "abcd1234" in text

    def test_to_dict(self):
        original = ValueError("bad")
        error = SimTraderException("wrapped", original_error=original)
        data = error.to_dict()
        assert data['message'] == "wrapped"
        assert data['original_error'] == "bad"
        assert data['category'] == "UNKNOWN"


class TestHierarchy:
    """도메인별 예외 계층"""

    @pytest.mark.parametrize("cls, parent, code", [
        (InvalidConfigError, ConfigException, "CONFIG_INVALID"),
        (DataFetchError, DataException, "DATA_FETCH_ERROR"),
        (DataUnavailableError, DataException, "DATA_UNAVAILABLE"),
        (TransientDataError, DataException, "DATA_TRANSIENT_ERROR"),
        (DataValidationError, DataException, "DATA_VALIDATION_ERROR"),
        (BacktestTimeoutError, BacktestException, "BACKTEST_TIMEOUT"),
        (BacktestStateError, BacktestException, "BACKTEST_STATE_ERROR"),
    ])
    def test_codes(self, cls, parent, code):
        error = cls()
        assert isinstance(error, parent)
        assert isinstance(error, SimTraderException)
        assert error.error_code == code

    def test_data_context(self):
        error = TransientDataError("503", status_code=503, symbol="TCS", data_source="http")
        assert error.symbol == "TCS"
        assert error.context == {'symbol': 'TCS', 'data_source': 'http', 'status_code': 503}

    def test_timeout_context(self):
        error = BacktestTimeoutError(timeout=60, state="simulating")
        assert error.context == {'state': 'simulating', 'timeout': 60}
        assert error.category == ErrorCategory.BACKTEST


class TestUtilities:
    """유틸리티 함수"""

    def test_wrap_exception(self):
        original = ConnectionError("reset")
        error = wrap_exception(original, DataFetchError, symbol="TCS")
        assert isinstance(error, DataFetchError)
        assert error.message == "reset"
        assert error.original_error is original
        assert error.symbol == "TCS"

    @pytest.mark.parametrize("error, expected", [
        (TransientDataError(), True),
        (ConnectionError(), True),
        (TimeoutError(), True),
        (DataUnavailableError(), False),
        (InvalidConfigError(), False),
        (ValueError(), False),
    ])
    def test_is_retryable(self, error, expected):
        assert is_retryable(error) is expected
