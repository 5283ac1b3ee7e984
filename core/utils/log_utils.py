"""
로깅 유틸리티 모듈

기능:
- 콘솔/파일 로깅 설정
- JSON 형식 구조화 로깅
- 백테스트 실행 추적용 trace_id
"""

import logging
import logging.handlers
import json
import uuid
from datetime import datetime
from typing import Optional
from contextvars import ContextVar

# trace_id를 위한 컨텍스트 변수 (스레드 안전)
_trace_id: ContextVar[str] = ContextVar('trace_id', default='')


def get_trace_id() -> str:
    """현재 trace_id 반환"""
    return _trace_id.get()


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """새 trace_id 설정 (없으면 자동 생성)"""
    if trace_id is None:
        trace_id = str(uuid.uuid4())[:8]
    _trace_id.set(trace_id)
    return trace_id


def clear_trace_id():
    """trace_id 초기화"""
    _trace_id.set('')


class TraceIdContext:
    """trace_id 컨텍스트 관리자

    with 블록 안에서 기록되는 모든 로그에 같은 trace_id가 붙습니다.
    """

    def __init__(self, trace_id: Optional[str] = None):
        self.trace_id = trace_id
        self.prev_trace_id = ''

    def __enter__(self):
        self.prev_trace_id = get_trace_id()
        set_trace_id(self.trace_id)
        return get_trace_id()

    def __exit__(self, exc_type, exc_val, exc_tb):
        _trace_id.set(self.prev_trace_id)


class TraceIdFilter(logging.Filter):
    """로그 레코드에 trace_id 속성을 주입하는 필터"""

    def filter(self, record):
        record.trace_id = get_trace_id() or '-'
        return True


class JSONFormatter(logging.Formatter):
    """JSON 형식 로그 포맷터

    로그 분석 및 모니터링 시스템 통합을 위한 구조화된 JSON 출력.
    """

    STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
        'message', 'asctime', 'taskName', 'trace_id'
    }

    def __init__(self, include_extras: bool = True, ensure_ascii: bool = False):
        """초기화

        Args:
            include_extras: 추가 필드 포함 여부
            ensure_ascii: ASCII만 출력 여부 (한글은 False)
        """
        super().__init__()
        self.include_extras = include_extras
        self.ensure_ascii = ensure_ascii

    def format(self, record: logging.LogRecord) -> str:
        """로그 레코드를 JSON 문자열로 변환"""
        log_data = {
            'timestamp': datetime.now().isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'message': record.getMessage(),
        }

        trace_id = get_trace_id()
        if trace_id:
            log_data['trace_id'] = trace_id

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # 추가 필드 (extra= 로 전달된 속성)
        if self.include_extras:
            extras = {
                k: v for k, v in record.__dict__.items()
                if k not in self.STANDARD_ATTRS and not k.startswith('_')
            }
            if extras:
                log_data['extra'] = extras

        return json.dumps(log_data, ensure_ascii=self.ensure_ascii, default=str)


def setup_logging(
    log_file: Optional[str] = None,
    level: int = logging.INFO,
    json_format: bool = False,
    backup_count: int = 30,
) -> logging.Logger:
    """로깅 설정

    Args:
        log_file: 로그 파일 경로 (콘솔만 사용 시 None)
        level: 로깅 레벨
        json_format: 파일 로그를 JSON 형식으로 기록할지 여부
        backup_count: 일별 로테이션 백업 파일 수

    Returns:
        설정된 루트 로거
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # 기존 핸들러 제거
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname)s] [%(trace_id)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.handlers.TimedRotatingFileHandler(
            log_file,
            when='midnight',
            interval=1,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        if json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - [%(trace_id)s] %(message)s'
            ))
        root_logger.addHandler(file_handler)

    trace_filter = TraceIdFilter()
    for handler in root_logger.handlers:
        handler.addFilter(trace_filter)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """로거 인스턴스 생성

    Args:
        name: 로거 이름 (보통 __name__ 사용)

    Returns:
        로거 인스턴스
    """
    return logging.getLogger(name)
