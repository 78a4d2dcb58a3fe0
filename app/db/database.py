# app/db/database.py
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import get_settings

settings = get_settings()

# 모든 ORM 모델이 공유하는 Base
Base = declarative_base()


def create_database_connection(db_url: str):
    """데이터베이스 URL을 받아 엔진과 세션 팩토리를 생성합니다."""
    # pg8000 사용을 위해 URL 변환
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+pg8000://", 1)

    connect_args = {}
    # SQLite는 스레드풀에서 여러 스레드가 같은 커넥션을 쓸 수 있도록 허용
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(db_url, connect_args=connect_args)
    SessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )

    return engine, SessionLocal


# ===== 기본 DB (.env의 DATABASE_URL) =====
engine, SessionLocal = create_database_connection(settings.DATABASE_URL)


def init_db(bind: Engine = None) -> None:
    """모델 테이블이 없으면 생성합니다."""
    # 모델을 임포트해야 Base.metadata에 테이블이 등록됨
    from app.models import template  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
