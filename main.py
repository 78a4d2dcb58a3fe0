# FastAPI 임포트
from fastapi import Depends, FastAPI

# Lifespan 관리를 위한 asynccontextmanager 임포트
from contextlib import asynccontextmanager

# GZip 미들웨어 임포트
from starlette.middleware.gzip import GZipMiddleware

# CORS 미들웨어 임포트
from fastapi.middleware.cors import CORSMiddleware

# 라우터 임포트
from app.api.v1.endpoints import templates as templates_router

# 설정/의존성 임포트
from app.api.deps import get_app_settings
from app.core.config import Settings, get_settings

# 예외 핸들러 임포트
from app.core.exceptions import register_exception_handlers

# DB 임포트
from app.db import database

# 서비스 임포트
from app.services.template_service import TemplateService

# 로깅 임포트
from app.core.logging import setup_logging, get_logger

logger = get_logger(__name__)


def create_app(settings: Settings = None) -> FastAPI:
    """설정을 받아 FastAPI 앱을 구성한다. 설정이 없으면 .env 기반 기본 DB 사용"""
    resolved_settings = settings or get_settings()

    # 👈 가장 먼저 로깅 초기화
    setup_logging(resolved_settings.LOG_LEVEL)

    if settings is None:
        engine, session_factory = database.engine, database.SessionLocal
    else:
        engine, session_factory = database.create_database_connection(
            resolved_settings.DATABASE_URL
        )

    # 애플리케이션 수명주기(lifespan) 이벤트 핸들러 정의
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 스타트업
        logger.info("=" * 60)
        logger.info(f"{resolved_settings.APP_TITLE} 서버 시작")
        logger.info("=" * 60)
        # 서버 시작 시 테이블 생성
        database.init_db(engine)

        yield
        # 셧다운
        engine.dispose()
        logger.info("=" * 60)
        logger.info(f"{resolved_settings.APP_TITLE} 서버 종료")
        logger.info("=" * 60)

    # 애플리케이션 인스턴스 생성 (lifespan 등록)
    app = FastAPI(
        title=resolved_settings.APP_TITLE,
        version=resolved_settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = resolved_settings
    # 서비스는 앱당 하나만 생성해서 라우터와 공유
    app.state.template_service = TemplateService(session_factory)

    # GZip 미들웨어 추가
    app.add_middleware(GZipMiddleware, minimum_size=1024)

    # CORS 정책 설정(필요시 도메인 제한)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=resolved_settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 예외 → 응답 매핑 등록
    register_exception_handlers(app)

    # 헬스 체크 엔드포인트
    @app.get("/health")
    def health(app_settings: Settings = Depends(get_app_settings)):
        # 간단한 상태 반환
        return {"ok": True, "version": app_settings.APP_VERSION}

    # v1 라우터 등록 (prefix: /api/v1)
    app.include_router(templates_router.router, prefix=resolved_settings.API_V1_PREFIX)

    return app


app = create_app()

# (옵션) 이 파일을 직접 실행할 때만 uvicorn으로 기동
if __name__ == "__main__":
    # uvicorn 임포트
    import uvicorn

    # 개발용 실행 (reload는 모듈 재로드하므로, 프로덕션에선 비권장)
    uvicorn.run(
        "main:app", host="0.0.0.0", port=8000, reload=True, log_level="info"
    )
