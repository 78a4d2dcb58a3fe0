# app/core/config.py
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # 정의되지 않은 환경변수는 무시

    # =========================================================
    # 앱 메타 정보
    # =========================================================
    APP_TITLE: str = "Template CRUD API"
    APP_VERSION: str = "0.1.0"
    API_V1_PREFIX: str = "/api/v1"

    # [DB Settings] postgresql:// 로 주면 pg8000 드라이버로 변환됨
    DATABASE_URL: str = "sqlite:///./templates.db"

    # [Logging Settings]
    LOG_LEVEL: str = "INFO"

    # [CORS Settings]
    CORS_ALLOW_ORIGINS: List[str] = ["*"]


# 전역 설정 인스턴스 (초기에는 .env 값만 가짐)
_settings_instance = Settings()


def get_settings() -> Settings:
    """설정 인스턴스를 반환 (싱글톤)"""
    return _settings_instance
