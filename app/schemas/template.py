# app/schemas/template.py

from datetime import date, datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.utils.validators import (
    birth_date_check,
    email_check,
    name_check,
    validate_template_id,
)


class CamelModel(BaseModel):
    """JSON은 camelCase, 파이썬 속성은 snake_case"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TemplateCreate(CamelModel):
    """
    템플릿 생성 요청 바디
    - id/created_at/updated_at는 DB가 채움
    - 누락된 필드도 검증기를 거쳐 *_REQUIRED 코드로 보고됨
    """

    name: Annotated[Optional[str], BeforeValidator(name_check(required=True))] = (
        Field(default=None, validate_default=True)
    )
    email: Annotated[
        Optional[str], BeforeValidator(email_check(required=True))
    ] = Field(default=None, validate_default=True)
    birth_date: Annotated[
        Optional[date], BeforeValidator(birth_date_check(required=True))
    ] = Field(default=None, validate_default=True)


class TemplateUpdate(CamelModel):
    """
    부분 수정(PUT)용
    - 전달되지 않았거나 None이면 미변경
    """

    name: Annotated[Optional[str], BeforeValidator(name_check(required=False))] = (
        None
    )
    email: Annotated[
        Optional[str], BeforeValidator(email_check(required=False))
    ] = None
    birth_date: Annotated[
        Optional[date], BeforeValidator(birth_date_check(required=False))
    ] = None


class TemplateIdParams(CamelModel):
    """경로의 templateId 검증용"""

    template_id: Annotated[str, BeforeValidator(validate_template_id)]


class TemplateRead(CamelModel):
    """
    DB에서 읽어온 templates 레코드 응답용
    """

    id: UUID
    name: str
    # 저장된 값을 그대로 돌려줌 (정규화하지 않고 형식만 확인)
    email: Annotated[str, AfterValidator(email_check(required=True))]
    birth_date: date
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class TemplateCount(BaseModel):
    count: int


class PaginatedTemplates(CamelModel):
    """페이지네이션 응답 봉투"""

    data: List[TemplateRead]
    total: int
    page: int
    page_size: int
    total_pages: int


""" Errors """
class ErrorDetail(BaseModel):
    message: str
    code: str
    field: Optional[str] = None


class ErrorResponse(BaseModel):
    message: str
    errors: List[ErrorDetail] = []
