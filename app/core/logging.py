import logging
import sys

# setup_logging이 붙인 핸들러 표시용
_HANDLER_NAME = "template-api-console"


def setup_logging(level: str = "INFO"):
    """애플리케이션 로깅 설정 (터미널에만 출력)"""

    # 포맷터 정의
    formatter = logging.Formatter(
        fmt='[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 루트 로거 설정
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # create_app이 여러 번 호출돼도 핸들러는 하나만 유지
    for handler in root_logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(getattr(logging, level.upper(), logging.INFO))
            return

    # 콘솔 핸들러만 추가
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # 써드파티 라이브러리 로그 레벨 조정
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """모듈별 로거 획득"""
    return logging.getLogger(name)
