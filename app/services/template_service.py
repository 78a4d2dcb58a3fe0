# app/services/template_service.py
import asyncio
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, Mapping, Tuple, Union

from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import QueryValidationError, TemplateNotFoundError
from app.core.logging import get_logger
from app.crud import template as template_crud
from app.schemas.template import (
    PaginatedTemplates,
    TemplateCount,
    TemplateCreate,
    TemplateRead,
    TemplateUpdate,
)
from app.utils.pagination import paginate
from app.utils.query_parser import build_query_params
from app.utils.template_parser import parse_template, parse_template_list

logger = get_logger(__name__)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class TemplateService:
    """
    템플릿 CRUD 서비스.
    라우터와 DAO(app.crud.template) 사이에서 쿼리 변환, not-found 처리,
    응답 형식 검증, 소요 시간 로깅을 담당한다.
    앱 기동 시 한 번 생성되어 app.state에 보관되고, 호출마다 세션을 새로 연다.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _run(self, crud_fn: Callable[..., Any], *args: Any) -> Any:
        with self._session_factory() as db:
            return crud_fn(db, *args)

    async def _call(self, crud_fn: Callable[..., Any], *args: Any) -> Any:
        # 동기 SQLAlchemy 호출은 스레드풀에서 실행
        return await run_in_threadpool(self._run, crud_fn, *args)

    @contextmanager
    def _timed(self, action: str) -> Iterator[float]:
        start = time.perf_counter()
        try:
            yield start
        except (TemplateNotFoundError, QueryValidationError):
            # not-found/잘못된 쿼리는 호출부에서 WARNING으로 이미 기록됨
            raise
        except Exception as e:
            logger.error(f"{action} 실패 ({_elapsed_ms(start)}ms): {e}", exc_info=True)
            raise

    async def list_templates(
        self, raw_query: Union[Mapping[str, str], Iterable[Tuple[str, str]]]
    ) -> PaginatedTemplates:
        """필터/정렬/페이지가 적용된 템플릿 목록"""
        logger.debug(f"템플릿 목록 조회 요청: {raw_query}")
        with self._timed("템플릿 목록 조회") as start:
            result = build_query_params(
                raw_query,
                template_crud.ALLOWED_FILTER_OPTIONS,
                template_crud.ALLOWED_SORT_OPTIONS,
                True,
                template_crud.MAX_PAGE_SIZE,
            )
            if not result.success:
                logger.warning(f"잘못된 쿼리 파라미터: {result.errors}")
                raise QueryValidationError(result.errors)

            params = result.params
            # 목록과 전체 개수는 서로 독립적이므로 동시에 조회
            templates, total = await asyncio.gather(
                self._call(template_crud.get_templates, params),
                self._call(template_crud.get_templates_count, params),
            )
            logger.info(
                f"템플릿 {len(templates)}건 조회 (전체 {total}건, {_elapsed_ms(start)}ms)"
            )

            page, page_size = template_crud.resolve_pagination(params)
            return paginate(parse_template_list(templates), total, page, page_size)

    async def count_templates(self) -> TemplateCount:
        """필터 없이 전체 템플릿 개수"""
        logger.debug("템플릿 개수 조회")
        with self._timed("템플릿 개수 조회") as start:
            count = await self._call(template_crud.count_all_templates)
            logger.info(f"템플릿 개수: {count} ({_elapsed_ms(start)}ms)")
            return TemplateCount(count=count)

    async def get_template(self, template_id: str) -> TemplateRead:
        logger.debug(f"템플릿 조회: {template_id}")
        with self._timed(f"템플릿 {template_id} 조회") as start:
            template = await self._call(template_crud.get_template_by_id, template_id)
            if template is None:
                logger.warning(f"템플릿을 찾을 수 없음: {template_id}")
                raise TemplateNotFoundError(template_id)

            logger.info(f"템플릿 {template_id} 조회 완료 ({_elapsed_ms(start)}ms)")
            return parse_template(template)

    async def create_template(self, data: TemplateCreate) -> TemplateRead:
        """템플릿 생성 (중복 이메일은 DB의 IntegrityError 그대로 전파)"""
        logger.debug(f"템플릿 생성 요청: {data.model_dump(mode='json')}")
        with self._timed("템플릿 생성") as start:
            template = await self._call(
                template_crud.create_template, data.name, data.email, data.birth_date
            )
            logger.info(f"템플릿 생성 완료 id={template.id} ({_elapsed_ms(start)}ms)")
            return parse_template(template)

    async def update_template(self, template_id: str, data: TemplateUpdate) -> TemplateRead:
        """전달된 필드만 수정"""
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        logger.debug(f"템플릿 {template_id} 수정 요청: {fields}")
        with self._timed(f"템플릿 {template_id} 수정") as start:
            template = await self._call(template_crud.update_template, template_id, fields)
            if template is None:
                logger.warning(f"수정할 템플릿을 찾을 수 없음: {template_id}")
                raise TemplateNotFoundError(template_id)

            logger.info(f"템플릿 {template_id} 수정 완료 ({_elapsed_ms(start)}ms)")
            return parse_template(template)

    async def delete_template(self, template_id: str) -> TemplateRead:
        """삭제 후 삭제 직전 레코드를 반환"""
        logger.debug(f"템플릿 삭제 요청: {template_id}")
        with self._timed(f"템플릿 {template_id} 삭제") as start:
            template = await self._call(template_crud.delete_template, template_id)
            if template is None:
                logger.warning(f"삭제할 템플릿을 찾을 수 없음: {template_id}")
                raise TemplateNotFoundError(template_id)

            logger.info(f"템플릿 {template_id} 삭제 완료 ({_elapsed_ms(start)}ms)")
            return parse_template(template)
