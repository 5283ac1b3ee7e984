"""
SimTrader 예외 계층

설정/데이터/백테스트 실행 오류를 도메인별로 구분합니다.
모든 예외는 SimTraderException을 상속하며 error_code와 context를 가집니다.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List, Type


class ErrorSeverity(Enum):
    """에러 심각도"""
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ErrorCategory(Enum):
    """에러 카테고리"""
    DATA = "DATA"
    NETWORK = "NETWORK"
    CONFIG = "CONFIG"
    BACKTEST = "BACKTEST"
    UNKNOWN = "UNKNOWN"


class SimTraderException(Exception):
    """
    SimTrader 기본 예외

    Attributes:
        error_code: 에러 식별 코드 (기본값: "<CATEGORY>_<CLASSNAME>")
        context: 종목, 상태 등 부가 정보
        severity / category: 분류
        original_error: 감싼 원본 예외
        trace_id: 백테스트 실행 ID
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        original_error: Optional[Exception] = None,
        trace_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.category = category
        self.error_code = error_code or f"{category.value}_{type(self).__name__.upper()}"
        self.context = dict(context or {})
        self.original_error = original_error
        self.trace_id = trace_id
        self.raised_at = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """JSON 직렬화용 딕셔너리"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.context,
            "trace_id": self.trace_id,
            "original_error": str(self.original_error) if self.original_error else None,
            "raised_at": self.raised_at.isoformat(),
        }

    def with_context(self, **kwargs) -> "SimTraderException":
        self.context.update(kwargs)
        return self

    def with_trace_id(self, trace_id: str) -> "SimTraderException":
        self.trace_id = trace_id
        return self

    def __str__(self) -> str:
        text = f"[{self.error_code}] {self.message}"
        if self.context:
            text += " (" + ", ".join(f"{k}={v}" for k, v in self.context.items()) + ")"
        if self.trace_id:
            text += f" [trace: {self.trace_id}]"
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, error_code={self.error_code!r})"


# ============================================================================
# 설정 관련 예외
# ============================================================================

class ConfigException(SimTraderException):
    """설정 관련 기본 예외"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        original_error: Optional[Exception] = None,
        config_key: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code or "CONFIG_ERROR",
            context=context,
            severity=severity,
            category=ErrorCategory.CONFIG,
            original_error=original_error,
        )
        if config_key:
            self.context["config_key"] = config_key


class InvalidConfigError(ConfigException):
    """백테스트 설정 유효성 검증 오류 (재시도 불가)"""

    def __init__(
        self,
        message: str = "백테스트 설정이 올바르지 않습니다",
        validation_errors: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, error_code="CONFIG_INVALID", **kwargs)
        self.validation_errors = validation_errors or []
        if validation_errors:
            self.context["validation_errors"] = validation_errors


# ============================================================================
# 데이터 관련 예외
# ============================================================================

class DataException(SimTraderException):
    """데이터 관련 기본 예외"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        original_error: Optional[Exception] = None,
        symbol: Optional[str] = None,
        data_source: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code or "DATA_ERROR",
            context=context,
            severity=severity,
            category=ErrorCategory.DATA,
            original_error=original_error,
        )
        self.symbol = symbol
        self.data_source = data_source
        if symbol:
            self.context["symbol"] = symbol
        if data_source:
            self.context["data_source"] = data_source


class DataFetchError(DataException):
    """과거 시세 조회 실패 (백테스트 전체 중단)"""

    def __init__(self, message: str = "데이터 조회 실패", **kwargs):
        super().__init__(message, error_code="DATA_FETCH_ERROR", **kwargs)


class DataUnavailableError(DataException):
    """요청한 데이터가 존재하지 않음 (4xx 계열, 재시도 불가)"""

    def __init__(self, message: str = "데이터를 찾을 수 없음", **kwargs):
        super().__init__(
            message,
            error_code="DATA_UNAVAILABLE",
            severity=ErrorSeverity.WARNING,
            **kwargs
        )


class TransientDataError(DataException):
    """일시적 전송 오류 (타임아웃, 연결 오류, 5xx - 재시도 가능)"""

    def __init__(
        self,
        message: str = "일시적 데이터 조회 오류",
        status_code: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, error_code="DATA_TRANSIENT_ERROR", **kwargs)
        self.status_code = status_code
        if status_code:
            self.context["status_code"] = status_code


class DataValidationError(DataException):
    """데이터 유효성 검증 오류"""

    def __init__(
        self,
        message: str = "데이터 유효성 검증 실패",
        field: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, error_code="DATA_VALIDATION_ERROR", **kwargs)
        if field:
            self.context["field"] = field


# ============================================================================
# 백테스트 실행 관련 예외
# ============================================================================

class BacktestException(SimTraderException):
    """백테스트 실행 관련 기본 예외"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        original_error: Optional[Exception] = None,
        state: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code or "BACKTEST_ERROR",
            context=context,
            severity=severity,
            category=ErrorCategory.BACKTEST,
            original_error=original_error,
        )
        if state:
            self.context["state"] = state


class BacktestTimeoutError(BacktestException):
    """실행 시간 초과 (부분 결과를 반환하지 않음)"""

    def __init__(
        self,
        message: str = "백테스트 실행 시간 초과",
        timeout: Optional[float] = None,
        **kwargs
    ):
        super().__init__(message, error_code="BACKTEST_TIMEOUT", **kwargs)
        if timeout is not None:
            self.context["timeout"] = timeout


class BacktestStateError(BacktestException):
    """허용되지 않은 상태 전이"""

    def __init__(self, message: str = "잘못된 백테스트 상태 전이", **kwargs):
        super().__init__(
            message,
            error_code="BACKTEST_STATE_ERROR",
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


# ============================================================================
# 유틸리티 함수
# ============================================================================

def wrap_exception(
    original: Exception,
    exception_class: Type[SimTraderException] = SimTraderException,
    message: Optional[str] = None,
    **kwargs
) -> SimTraderException:
    """
    표준 예외를 SimTraderException으로 래핑

    Args:
        original: 원본 예외
        exception_class: 래핑할 예외 클래스
        message: 추가 메시지 (없으면 원본 메시지 사용)
        **kwargs: 추가 인자

    Returns:
        SimTraderException: 래핑된 예외
    """
    msg = message or str(original)
    return exception_class(
        message=msg,
        original_error=original,
        **kwargs
    )


def is_retryable(error: Exception) -> bool:
    """재시도 가능한 에러인지 확인"""
    if isinstance(error, TransientDataError):
        return True
    if isinstance(error, SimTraderException):
        return False

    # 표준 예외 타입 체크
    return isinstance(error, (ConnectionError, TimeoutError))
