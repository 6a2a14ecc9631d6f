"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI

from src.app.routes import templates
from src.core.logging import configure_logging
from src.render.engine import RenderEngine
from src.render.fetcher import HttpxFragmentFetcher
from src.templates.manager import TemplateManager

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_ENV_VAR = "INCLUDE_REGISTRY_CONFIG"

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """
    설정 파일 로드.

    우선순위: 인자 → INCLUDE_REGISTRY_CONFIG 환경변수 → 프로젝트 루트 default.yaml
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        config_path = Path(env_path) if env_path else PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def resolve_templates_root(config: dict) -> Path:
    """paths.templates_root (상대 경로는 프로젝트 루트 기준)."""
    root = Path(config.get("paths", {}).get("templates_root", "templates_data"))
    return root if root.is_absolute() else PROJECT_ROOT / root


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 저장소/렌더 엔진 생성 (httpx client 공유)
    종료 시: httpx client 정리
    """
    # Startup
    config = load_config()
    configure_logging(config)

    fetcher = HttpxFragmentFetcher.from_config(config)
    app.state.config = config
    app.state.template_manager = TemplateManager(resolve_templates_root(config))
    app.state.render_engine = RenderEngine.from_config(config, fetcher)
    logger.info(f"Template store: {app.state.template_manager.templates_root}")

    yield

    # Shutdown
    await fetcher.aclose()


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Include Registry",
    description="HTML 템플릿 저장 + include directive 렌더링",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# Routes
# =============================================================================

app.include_router(
    templates.api_router, prefix="/api/v1/template", tags=["Templates API"]
)


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
