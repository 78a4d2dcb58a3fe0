# app/core/exceptions.py
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette import status

from app.core.logging import get_logger
from app.schemas.template import ErrorDetail, ErrorResponse

logger = get_logger(__name__)


class TemplateAPIError(Exception):
    """템플릿 API 도메인 예외의 공통 부모"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class QueryValidationError(TemplateAPIError):
    """목록 조회 쿼리(필터/정렬/페이지) 변환 실패"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__("Validation Failed", errors)


class TemplateNotFoundError(TemplateAPIError):
    """대상 템플릿이 존재하지 않음"""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, template_id: str):
        super().__init__(
            "Template not found",
            [{"message": "Template not found", "code": "TEMPLATE_NOT_FOUND"}],
        )
        self.template_id = template_id


class OutputShapeError(TemplateAPIError):
    """DB에서 읽은 레코드가 응답 스키마와 맞지 않음 (내부 결함)"""

    def __init__(self, detail: str):
        super().__init__(
            "Internal server error",
            [{"message": "Stored record has an invalid shape", "code": "OUTPUT_SHAPE_INVALID"}],
        )
        self.detail = detail


def _error_response(
    status_code: int, message: str, errors: List[Dict[str, Any]]
) -> JSONResponse:
    body = ErrorResponse(
        message=message, errors=[ErrorDetail(**error) for error in errors]
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _request_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """pydantic 에러 목록을 {message, code, field} 형태로 변환"""
    errors = []
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if isinstance(part, str)]
        field = loc[-1] if len(loc) > 1 else None
        error_type = error.get("type", "")
        if error_type.isupper():
            # validators.py의 PydanticCustomError 코드
            code = error_type
        elif field is None:
            code = "INVALID_BODY"
        else:
            code = error_type.upper()
        message = error.get("msg", "Invalid value")
        errors.append({"message": message, "code": code, "field": field})
    return errors


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = _request_errors(exc)
    logger.warning(f"요청 검증 실패 {request.method} {request.url.path}: {errors}")
    return _error_response(status.HTTP_400_BAD_REQUEST, "Validation Failed", errors)


async def template_error_handler(request: Request, exc: TemplateAPIError):
    return _error_response(exc.status_code, exc.message, exc.errors)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"무결성 제약 위반 {request.method} {request.url.path}: {exc.orig}")
    return _error_response(
        status.HTTP_409_CONFLICT,
        "Conflict",
        [{"message": "Template conflicts with an existing record", "code": "TEMPLATE_CONFLICT"}],
    )


async def persistence_error_handler(request: Request, exc: SQLAlchemyError):
    # 원인은 서비스 로그에 이미 남았으므로 응답에는 일반 메시지만
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        [{"message": "Persistence layer failure", "code": "PERSISTENCE_FAILURE"}],
    )


def register_exception_handlers(app: FastAPI) -> None:
    """앱에 예외 → HTTP 응답 매핑을 등록"""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(TemplateAPIError, template_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, persistence_error_handler)
