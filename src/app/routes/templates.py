"""
Templates Routes: 템플릿 CRUD + 렌더.

API (prefix /api/v1/template):
- GET    ""                → 전체 목록
- POST   ""                → 생성
- GET    /{name}           → 조회
- GET    /{name}/rendered  → include 해석 후 렌더 결과
- PUT    /{name}           → content 교체
- DELETE /{name}           → 삭제 (204)
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response

from src.app.services.validate import (
    ValidationResult,
    validate_create_body,
    validate_update_body,
)
from src.domain.errors import (
    DirectiveParseError,
    ErrorCodes,
    RenderError,
    UpstreamNetworkError,
    UpstreamTimeoutError,
)
from src.render.engine import RenderEngine
from src.templates.manager import TemplateError, TemplateManager

logger = logging.getLogger(__name__)

api_router = APIRouter()

# 렌더 실패 → HTTP status
RENDER_ERROR_STATUS = {
    DirectiveParseError: 500,
    UpstreamNetworkError: 502,
    UpstreamTimeoutError: 504,
}

RENDER_RUN_ID_HEADER = "X-Render-Run-Id"


# =============================================================================
# Helpers
# =============================================================================

def _manager(request: Request) -> TemplateManager:
    manager: TemplateManager = request.app.state.template_manager
    return manager


def _engine(request: Request) -> RenderEngine:
    engine: RenderEngine = request.app.state.render_engine
    return engine


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={"code": ErrorCodes.TEMPLATE_NOT_FOUND, "message": "Not found"},
    )


def _template_error(e: TemplateError) -> HTTPException:
    if e.code == ErrorCodes.TEMPLATE_NOT_FOUND:
        return _not_found()
    status_code = 409 if e.code == ErrorCodes.TEMPLATE_EXISTS else 400
    return HTTPException(status_code=status_code, detail={"code": e.code, "message": e.message})


def _raise_if_invalid(validation: ValidationResult) -> None:
    if not validation.valid:
        raise HTTPException(
            status_code=422,
            detail={"code": ErrorCodes.VALIDATION_ERROR, "message": validation.message},
        )


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(
            status_code=422,
            detail={"code": ErrorCodes.VALIDATION_ERROR, "message": '"value" must be valid JSON'},
        ) from None


# =============================================================================
# API Routes
# =============================================================================

@api_router.get("")
async def list_templates(request: Request) -> list[dict[str, Any]]:
    """템플릿 목록."""
    return [t.to_dict() for t in _manager(request).list_templates()]


@api_router.post("")
async def create_template(request: Request) -> dict[str, Any]:
    """템플릿 생성."""
    body = await _read_json(request)
    _raise_if_invalid(validate_create_body(body))

    try:
        template = _manager(request).create(body["name"], body["content"])
    except TemplateError as e:
        raise _template_error(e) from e

    logger.info(f"Template '{template.name}' created")
    return template.to_dict()


@api_router.get("/{name}/rendered")
async def get_rendered_template(
    request: Request,
    response: Response,
    name: str,
) -> dict[str, Any]:
    """
    렌더된 템플릿.

    1. Template Store에서 snapshot 조회 (없으면 404)
    2. Render Engine으로 include 해석
    3. 실패 시 에러 종류별 status (500/502/504)
    """
    try:
        template = _manager(request).get(name)
    except TemplateError as e:
        raise _template_error(e) from e

    try:
        document = await _engine(request).render(template)
    except RenderError as e:
        status_code = RENDER_ERROR_STATUS.get(type(e), 502)
        raise HTTPException(
            status_code=status_code,
            detail={"code": e.code, "message": str(e)},
        ) from e

    if document.log is not None:
        response.headers[RENDER_RUN_ID_HEADER] = document.log.run_id
    return document.to_dict()


@api_router.get("/{name}")
async def get_template(request: Request, name: str) -> dict[str, Any]:
    """템플릿 조회."""
    try:
        return _manager(request).get(name).to_dict()
    except TemplateError as e:
        raise _template_error(e) from e


@api_router.put("/{name}")
async def update_template(request: Request, name: str) -> dict[str, Any]:
    """템플릿 content 교체 (name 변경 불가)."""
    manager = _manager(request)
    if not manager.exists(name):
        raise _not_found()

    body = await _read_json(request)
    _raise_if_invalid(validate_update_body(body))

    try:
        template = manager.update(name, body["content"])
    except TemplateError as e:
        raise _template_error(e) from e

    logger.info(f"Template '{name}' updated")
    return template.to_dict()


@api_router.delete("/{name}", status_code=204)
async def delete_template(request: Request, name: str) -> Response:
    """템플릿 삭제."""
    try:
        _manager(request).delete(name)
    except TemplateError as e:
        raise _template_error(e) from e

    logger.info(f"Template '{name}' deleted")
    return Response(status_code=204)
