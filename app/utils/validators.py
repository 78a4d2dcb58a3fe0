# utils/validators.py
"""
템플릿 요청 DTO 필드 검증기.

스키마에서 ``BeforeValidator``로 붙여 쓰며, 실패 시 ``PydanticCustomError``의
error type을 그대로 응답의 ``code``로 사용한다.
"""
import re
from datetime import date, datetime
from typing import Any, Callable

from email_validator import EmailNotValidError, validate_email
from pydantic_core import PydanticCustomError

MAX_TEXT_LENGTH = 255

# class-validator isUUID('4')와 동일한 형식 (대소문자 무시)
UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def _parse_iso_date(value: str) -> date:
    """ISO-8601 날짜 또는 일시 문자열을 달력 날짜로 변환한다."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    # '2020-01-01T10:00:00Z' 같은 일시 문자열은 날짜 부분만 사용
    return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def name_check(required: bool) -> Callable[[Any], Any]:
    def _validate(value: Any) -> Any:
        if value is None or value == "":
            if required:
                raise PydanticCustomError("NAME_REQUIRED", "Name is required")
            return value
        if not isinstance(value, str):
            raise PydanticCustomError("NAME_NOT_STRING", "Name must be a string")
        if len(value) > MAX_TEXT_LENGTH:
            raise PydanticCustomError(
                "NAME_TOO_LONG", "Name cannot exceed 255 characters"
            )
        return value

    return _validate


def email_check(required: bool) -> Callable[[Any], Any]:
    def _validate(value: Any) -> Any:
        if value is None or (required and value == ""):
            if required:
                raise PydanticCustomError("EMAIL_REQUIRED", "Email is required")
            return value
        if not isinstance(value, str):
            raise PydanticCustomError(
                "EMAIL_INVALID", "Email must be a valid email address"
            )
        if len(value) > MAX_TEXT_LENGTH:
            raise PydanticCustomError(
                "EMAIL_TOO_LONG", "Email cannot exceed 255 characters"
            )
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError(
                "EMAIL_INVALID", "Email must be a valid email address"
            )
        return value

    return _validate


def birth_date_check(required: bool) -> Callable[[Any], Any]:
    def _validate(value: Any) -> Any:
        if value is None or (required and value == ""):
            if required:
                raise PydanticCustomError(
                    "BIRTH_DATE_REQUIRED", "Birth date is required"
                )
            return value
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            raise PydanticCustomError(
                "BIRTH_DATE_INVALID", "Birth date must be a valid date string"
            )
        try:
            return _parse_iso_date(value)
        except ValueError:
            raise PydanticCustomError(
                "BIRTH_DATE_INVALID", "Birth date must be a valid date string"
            )

    return _validate


def validate_template_id(value: Any) -> str:
    """템플릿 ID가 UUID v4 형식인지 확인한다."""
    if not isinstance(value, str) or not UUID_V4_PATTERN.match(value):
        raise PydanticCustomError(
            "INVALID_TEMPLATE_ID", "Template ID must be a valid UUID v4 format"
        )
    return value
