""" 로깅 설정을 관리하는 모듈 """
import logging
import sys
from config.environments import current_env

# 로거 중복 설정 방지를 위한 캐시
_loggers = {}

class ColoredFormatter(logging.Formatter):
    """색상이 있는 로그 포맷터"""

    def format(self, record):
        # 원본 레코드를 건드리지 않도록 복사본에 색상 적용
        colors = current_env['LOGGING']['COLORS']
        levelname = record.levelname
        if levelname in colors:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{colors[levelname]}{levelname}{colors['RESET']}"
        return super().format(record)

def _build_formatter() -> logging.Formatter:
    """터미널이 색상을 지원하는 경우에만 색상 포맷터 사용"""
    log_format = current_env['LOGGING']['FORMAT']
    date_format = current_env['LOGGING']['DATE_FORMAT']
    if sys.stdout.isatty():
        return ColoredFormatter(log_format, datefmt=date_format)
    return logging.Formatter(log_format, datefmt=date_format)

def setup_logger(name):
    """ 로거 설정 및 반환 """
    # 이미 설정된 로거가 있으면 재사용
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)

    # 이미 핸들러가 설정되어 있다면 중복 설정 방지
    if logger.handlers:
        _loggers[name] = logger
        return logger

    level = getattr(logging, current_env['LOGGING']['LEVEL'])
    logger.setLevel(level)

    # 프로파게이션 비활성화 (부모 로거로 전파 방지)
    logger.propagate = False

    # 콘솔 핸들러 설정
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(_build_formatter())
    logger.addHandler(console_handler)

    _loggers[name] = logger
    return logger

def configure_library_loggers():
    """외부 라이브러리 로거 레벨 조정 (너무 verbose한 로그 억제)"""
    logging.getLogger('PIL').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('google_genai').setLevel(logging.WARNING)
    logging.getLogger('uvicorn').setLevel(getattr(logging, current_env['LOGGING']['LEVEL']))
