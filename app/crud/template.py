# app/crud/template.py
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query, Session

from app.models.template import Template
from app.utils.query_parser import QueryParams

# =========================================================
# 목록 조회 계약 (서비스가 쿼리 변환 시 사용)
# =========================================================
# 필터 가능 필드 → 값 타입
ALLOWED_FILTER_OPTIONS: Dict[str, str] = {
    "id": "string",
    "name": "string",
    "email": "string",
    "birthDate": "date",
    "createdAt": "datetime",
    "updatedAt": "datetime",
}
ALLOWED_SORT_OPTIONS: Tuple[str, ...] = (
    "name",
    "email",
    "birthDate",
    "createdAt",
    "updatedAt",
)
MAX_PAGE_SIZE = 100
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

# API 필드명 → 컬럼
_COLUMNS = {
    "id": Template.id,
    "name": Template.name,
    "email": Template.email,
    "birthDate": Template.birth_date,
    "createdAt": Template.created_at,
    "updatedAt": Template.updated_at,
}


def resolve_pagination(params: QueryParams) -> Tuple[int, int]:
    """요청에 없는 page/limit은 기본값으로 채운다."""
    pagination = params.pagination
    page = pagination.page if pagination and pagination.page else DEFAULT_PAGE
    limit = pagination.limit if pagination and pagination.limit else DEFAULT_PAGE_SIZE
    return page, limit


def _apply_filters(query: Query, params: QueryParams) -> Query:
    for option in params.filters:
        column = _COLUMNS[option.field]
        value = option.value
        if option.operator == "eq":
            query = query.filter(column == value)
        elif option.operator == "ne":
            query = query.filter(column != value)
        elif option.operator == "gt":
            query = query.filter(column > value)
        elif option.operator == "gte":
            query = query.filter(column >= value)
        elif option.operator == "lt":
            query = query.filter(column < value)
        elif option.operator == "lte":
            query = query.filter(column <= value)
        elif option.operator == "like":
            # 사용자 입력의 와일드카드는 문자 그대로 매칭
            escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            query = query.filter(column.ilike(f"%{escaped}%", escape="\\"))
        elif option.operator == "in":
            query = query.filter(column.in_(value))
    return query


def get_templates(db: Session, params: QueryParams) -> List[Template]:
    """필터/정렬/페이지가 적용된 템플릿 목록 (기본 정렬: 최신순)"""
    query = _apply_filters(db.query(Template), params)

    if params.sorts:
        for option in params.sorts:
            direction = desc if option.direction == "desc" else asc
            query = query.order_by(direction(_COLUMNS[option.field]))
    else:
        query = query.order_by(Template.created_at.desc())
    # 같은 값끼리 순서가 흔들리지 않도록
    query = query.order_by(Template.id)

    page, limit = resolve_pagination(params)
    return query.offset((page - 1) * limit).limit(limit).all()


def get_templates_count(db: Session, params: QueryParams) -> int:
    """get_templates와 같은 필터 조건의 전체 개수 (페이지 무시)"""
    return _apply_filters(db.query(Template), params).count()


def count_all_templates(db: Session) -> int:
    """필터 없이 전체 템플릿 개수"""
    return db.query(Template).count()


def get_template_by_id(db: Session, template_id: str) -> Optional[Template]:
    """템플릿 단건 조회"""
    return db.query(Template).filter(Template.id == template_id).first()


def create_template(
    db: Session, name: str, email: str, birth_date: date
) -> Template:
    """템플릿 생성 (created_at == updated_at)"""
    now = datetime.now(timezone.utc)
    db_template = Template(
        name=name,
        email=email,
        birth_date=birth_date,
        created_at=now,
        updated_at=now,
    )
    db.add(db_template)
    db.commit()
    db.refresh(db_template)
    return db_template


def update_template(
    db: Session, template_id: str, fields: Dict[str, Any]
) -> Optional[Template]:
    """전달된 필드만 수정. 대상이 없으면 None"""
    template = db.query(Template).filter(Template.id == template_id).first()
    if template is None:
        return None
    # 바뀌는 필드가 없으면 updated_at도 그대로 둠
    if not fields:
        return template

    for field, value in fields.items():
        setattr(template, field, value)
    template.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(template)
    return template


def delete_template(db: Session, template_id: str) -> Optional[Template]:
    """삭제 후 삭제 직전 상태를 반환. 대상이 없으면 None"""
    template = db.query(Template).filter(Template.id == template_id).first()
    if template is None:
        return None

    db.delete(template)
    db.commit()
    return template
