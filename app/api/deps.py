# 의존성 주입을 위한 함수 임포트
from fastapi import Path, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.core.config import Settings
from app.schemas.template import TemplateIdParams
from app.services.template_service import TemplateService

# FastAPI Depends에서 사용할 팩토리
def get_app_settings(request: Request) -> Settings:
	# create_app에서 확정된 설정 인스턴스 반환
	return request.app.state.settings


# 앱 기동 시 만들어 둔 서비스 인스턴스 반환
def get_template_service(request: Request) -> TemplateService:
	return request.app.state.template_service


# 경로의 templateId 검증 (UUID v4가 아니면 서비스 호출 전에 400)
def get_template_id(template_id: str = Path(...)) -> str:
	try:
		return TemplateIdParams(template_id=template_id).template_id
	except ValidationError as e:
		errors = [{**error, "loc": ("path", "templateId")} for error in e.errors()]
		raise RequestValidationError(errors)
