# utils/query_parser.py
"""
목록 조회용 쿼리스트링 → 구조화된 필터/정렬/페이지 파라미터 변환기.

지원 형식::

    ?page=2&pageSize=20
    ?sort=name:asc,createdAt:desc
    ?name=홍길동                  (eq)
    ?email[like]=example.com
    ?birthDate[gte]=1990-01-01
    ?name[in]=a,b,c

잘못된 값은 첫 번째에서 멈추지 않고 전부 모아서 ``errors``로 돌려준다.
같은 키가 반복되면 sort와 필터는 모두 적용하고, page/pageSize는 위반으로 본다.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from app.core.logging import get_logger

logger = get_logger(__name__)

PAGE_KEY = "page"
PAGE_SIZE_KEY = "pageSize"
SORT_KEY = "sort"

FILTER_OPERATORS = ("eq", "ne", "gt", "gte", "lt", "lte", "like", "in")
SORT_DIRECTIONS = ("asc", "desc")
# like는 문자열 필드에만 허용
STRING_ONLY_OPERATORS = ("like",)
MAX_INT_DIGITS = 9

# name[gte] 형태의 키 분해
_FILTER_KEY_PATTERN = re.compile(r"^(?P<field>[A-Za-z_][A-Za-z0-9_]*)(\[(?P<op>[^\]]*)\])?$")


@dataclass
class FilterOption:
    field: str
    operator: str
    value: Any


@dataclass
class SortOption:
    field: str
    direction: str = "asc"


@dataclass
class PaginationOption:
    # None이면 DAO 기본값 사용
    page: Optional[int] = None
    limit: Optional[int] = None


@dataclass
class QueryParams:
    filters: List[FilterOption] = field(default_factory=list)
    sorts: List[SortOption] = field(default_factory=list)
    pagination: Optional[PaginationOption] = None


@dataclass
class QueryParamsResult:
    success: bool
    params: Optional[QueryParams] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)


def _error(message: str, code: str, field_name: str) -> Dict[str, Any]:
    return {"message": message, "code": code, "field": field_name}


def _coerce_value(value: str, value_type: str) -> Any:
    """선언된 필드 타입에 맞게 문자열 값을 변환 (실패 시 ValueError)"""
    if value_type == "date":
        return date.fromisoformat(value)
    if value_type == "datetime":
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value


def _parse_positive_int(raw: str) -> Optional[int]:
    # 유니코드 숫자(²)나 지나치게 긴 값은 int() 이전에 거른다
    if not (raw.isascii() and raw.isdigit()) or len(raw) > MAX_INT_DIGITS:
        return None
    number = int(raw)
    return number if number > 0 else None


def _parse_sort(raw: str, allowed_sorts, errors: List[Dict[str, Any]]) -> List[SortOption]:
    sorts = []
    for item in [part.strip() for part in raw.split(",") if part.strip()]:
        sort_field, _, direction = item.partition(":")
        direction = (direction or "asc").lower()
        if sort_field not in allowed_sorts:
            errors.append(
                _error(f"Sorting by '{sort_field}' is not allowed", "INVALID_SORT_FIELD", SORT_KEY)
            )
            continue
        if direction not in SORT_DIRECTIONS:
            errors.append(
                _error(
                    f"Sort direction must be one of {', '.join(SORT_DIRECTIONS)}",
                    "INVALID_SORT_DIRECTION",
                    SORT_KEY,
                )
            )
            continue
        sorts.append(SortOption(field=sort_field, direction=direction))
    return sorts


def build_query_params(
    raw_query: Union[Mapping[str, str], Iterable[Tuple[str, str]]],
    allowed_filters: Mapping[str, str],
    allowed_sorts,
    enable_pagination: bool,
    max_page_size: int,
) -> QueryParamsResult:
    """
    쿼리스트링 딕셔너리를 QueryParams로 변환한다.

    Args:
        raw_query: 요청 쿼리스트링 (딕셔너리 또는 반복 키를 포함한 (키, 값) 쌍)
        allowed_filters: 필터 가능한 필드 → 값 타입 ("string" | "date" | "datetime")
        allowed_sorts: 정렬 가능한 필드 목록
        enable_pagination: False면 page/pageSize를 허용하지 않음
        max_page_size: pageSize 상한
    Returns:
        success가 False면 errors에 위반 목록 전체가 담김
    """
    errors: List[Dict[str, Any]] = []
    params = QueryParams()
    page: Optional[int] = None
    limit: Optional[int] = None
    seen_pagination_keys = set()

    items = raw_query.items() if isinstance(raw_query, Mapping) else raw_query
    for key, raw in items:
        if key in (PAGE_KEY, PAGE_SIZE_KEY):
            if key in seen_pagination_keys:
                errors.append(
                    _error(f"'{key}' must be given only once", "DUPLICATE_QUERY_PARAM", key)
                )
                continue
            seen_pagination_keys.add(key)
            if not enable_pagination:
                errors.append(
                    _error("Pagination is not supported", "PAGINATION_DISABLED", key)
                )
                continue
            number = _parse_positive_int(raw)
            if key == PAGE_KEY:
                if number is None:
                    errors.append(_error("Page must be a positive integer", "INVALID_PAGE", key))
                page = number
            elif number is None:
                errors.append(
                    _error("Page size must be a positive integer", "INVALID_PAGE_SIZE", key)
                )
            elif number > max_page_size:
                errors.append(
                    _error(
                        f"Page size cannot exceed {max_page_size}", "PAGE_SIZE_EXCEEDED", key
                    )
                )
            else:
                limit = number
            continue

        if key == SORT_KEY:
            params.sorts.extend(_parse_sort(raw, allowed_sorts, errors))
            continue

        match = _FILTER_KEY_PATTERN.match(key)
        filter_field = match.group("field") if match else key
        if not match or filter_field not in allowed_filters:
            errors.append(
                _error(f"Filtering by '{filter_field}' is not allowed", "INVALID_FILTER_FIELD", key)
            )
            continue

        operator = (match.group("op") or "eq").lower()
        if operator not in FILTER_OPERATORS:
            errors.append(
                _error(f"Unknown filter operator '{operator}'", "INVALID_FILTER_OPERATOR", key)
            )
            continue

        value_type = allowed_filters[filter_field]
        if operator in STRING_ONLY_OPERATORS and value_type != "string":
            errors.append(
                _error(
                    f"Operator '{operator}' is not supported for '{filter_field}'",
                    "INVALID_FILTER_OPERATOR",
                    key,
                )
            )
            continue
        try:
            if operator == "in":
                value = [_coerce_value(v.strip(), value_type) for v in raw.split(",") if v.strip()]
            elif operator == "like":
                value = raw
            else:
                value = _coerce_value(raw, value_type)
        except ValueError:
            errors.append(
                _error(f"Invalid value for '{filter_field}'", "INVALID_FILTER_VALUE", key)
            )
            continue
        params.filters.append(FilterOption(field=filter_field, operator=operator, value=value))

    if errors:
        return QueryParamsResult(success=False, errors=errors)

    if enable_pagination and (page is not None or limit is not None):
        params.pagination = PaginationOption(page=page, limit=limit)

    logger.debug(f"쿼리 변환 결과: {params}")
    return QueryParamsResult(success=True, params=params)
