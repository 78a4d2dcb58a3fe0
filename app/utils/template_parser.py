# utils/template_parser.py
from typing import Any, Iterable, List

from pydantic import ValidationError

from app.core.exceptions import OutputShapeError
from app.core.logging import get_logger
from app.schemas.template import TemplateRead

logger = get_logger(__name__)


def parse_template(record: Any) -> TemplateRead:
    """
    DB에서 읽은 레코드(ORM 객체 또는 dict)를 TemplateRead로 검증한다.
    스키마와 맞지 않으면 OutputShapeError (호출자 입력 오류가 아닌 내부 결함).
    """
    try:
        return TemplateRead.model_validate(record)
    except ValidationError as e:
        logger.error(f"템플릿 레코드 형식 오류: {e}")
        raise OutputShapeError(str(e)) from e


def parse_template_list(records: Iterable[Any]) -> List[TemplateRead]:
    """레코드 목록 검증 (하나라도 잘못되면 전체 실패)"""
    return [parse_template(record) for record in records]
