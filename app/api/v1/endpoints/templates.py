# app/api/v1/endpoints/templates.py
# FastAPI 라우터 임포트
from fastapi import APIRouter, Depends, Request

# 상태 코드 상수 임포트
from starlette import status

# 의존성 임포트
from app.api.deps import get_template_id, get_template_service

# 서비스 임포트
from app.services.template_service import TemplateService

# 스키마 임포트
from app.schemas.template import (
    ErrorResponse,
    PaginatedTemplates,
    TemplateCount,
    TemplateCreate,
    TemplateRead,
    TemplateUpdate,
)

# /api/v1/templates 아래로 묶이는 라우터
router = APIRouter(
    prefix="/templates",
    tags=["templates"],
    responses={400: {"model": ErrorResponse}},
)

# 404를 돌려줄 수 있는 엔드포인트용
_NOT_FOUND = {404: {"model": ErrorResponse}}


# 목록 조회 (반복 키까지 보존한 쿼리스트링을 그대로 서비스에 전달)
@router.get("", response_model=PaginatedTemplates)
async def list_templates(
    request: Request, service: TemplateService = Depends(get_template_service)
):
    return await service.list_templates(request.query_params.multi_items())


# 전체 개수 (/{template_id}보다 먼저 등록해야 함)
@router.get("/count", response_model=TemplateCount)
async def count_templates(service: TemplateService = Depends(get_template_service)):
    return await service.count_templates()


# 단건 조회
@router.get("/{template_id}", response_model=TemplateRead, responses=_NOT_FOUND)
async def get_template(
    template_id: str = Depends(get_template_id),
    service: TemplateService = Depends(get_template_service),
):
    return await service.get_template(template_id)


# 생성
@router.post("", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
async def create_template(
    body: TemplateCreate, service: TemplateService = Depends(get_template_service)
):
    return await service.create_template(body)


# 부분 수정 (전달된 필드만 변경)
@router.put("/{template_id}", response_model=TemplateRead, responses=_NOT_FOUND)
async def update_template(
    body: TemplateUpdate,
    template_id: str = Depends(get_template_id),
    service: TemplateService = Depends(get_template_service),
):
    return await service.update_template(template_id, body)


# 삭제 (삭제 직전 레코드 반환)
@router.delete("/{template_id}", response_model=TemplateRead, responses=_NOT_FOUND)
async def delete_template(
    template_id: str = Depends(get_template_id),
    service: TemplateService = Depends(get_template_service),
):
    return await service.delete_template(template_id)
