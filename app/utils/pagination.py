# utils/pagination.py
import math
from typing import List

from app.schemas.template import PaginatedTemplates, TemplateRead


def paginate(
    data: List[TemplateRead], total: int, page: int, page_size: int
) -> PaginatedTemplates:
    """한 페이지 분량의 데이터와 전체 개수로 페이지네이션 응답을 만든다."""
    total_pages = math.ceil(total / page_size) if page_size > 0 else 0
    return PaginatedTemplates(
        data=data,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
    )
