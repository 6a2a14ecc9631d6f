"""
Pytest fixtures for the include registry tests.

구성:
- 저장소 fixture (tmp_path 기반 TemplateManager)
- 네트워크 없는 StubFragmentFetcher (고정 지연/status/헤더/body)
- 테스트용 FastAPI 앱 + TestClient
"""

import asyncio
from collections.abc import Generator
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.routes import templates
from src.domain.schemas import FragmentResponse
from src.render.engine import RenderEngine
from src.render.fetcher import FetchError, FragmentFetcher
from src.templates.manager import TemplateManager

# =============================================================================
# Stub Fetcher
# =============================================================================

@dataclass
class StubRoute:
    """stub 응답 정의."""
    body: str = ""
    status_code: int = 200
    headers: list[tuple[str, str]] = field(default_factory=list)
    delay: float = 0.0  # 초
    error: str | None = None  # 설정 시 FetchError 발생


class StubFragmentFetcher(FragmentFetcher):
    """
    네트워크 없이 고정 응답을 주는 fetcher.

    calls: get() 호출 순서 (src)
    completed: 응답 완료 순서 (src)
    """

    def __init__(self) -> None:
        self.routes: dict[str, StubRoute] = {}
        self.calls: list[str] = []
        self.completed: list[str] = []

    def add(self, src: str, **kwargs) -> StubRoute:
        route = StubRoute(**kwargs)
        self.routes[src] = route
        return route

    async def get(self, src: str) -> FragmentResponse:
        self.calls.append(src)
        route = self.routes.get(src)
        if route is None:
            raise FetchError(f"no stub route for {src}")

        if route.delay:
            await asyncio.sleep(route.delay)
        if route.error:
            raise FetchError(route.error)

        self.completed.append(src)
        return FragmentResponse(
            status_code=route.status_code,
            headers=list(route.headers),
            body=route.body,
        )


# =============================================================================
# Sample Data
# =============================================================================

INCLUDE_SRC = "https://api.include.com/get/include/1"
STYLESHEET_URL = "https://my.awesome.server/my-awesome-stylesheet.css"

INCLUDE_BODY = """
    <div id="include-id-1">
        This include has all necessary attributes
        and a link header which is a stylesheet
    </div>
"""

INCLUDE_TAG = (
    f'<include    id="include-id-1"   src="{INCLUDE_SRC}"    timeout="1000" />'
)

RENDER_TEMPLATE_CONTENT = f"""
    <html>
    <head>
        <meta charset="utf-8" />
        <meta name="viewport" content="width=device-width,initial-scale=1"/>
        {INCLUDE_TAG}
        <script>window.console.log('Something...')</script>
    </head>
    <body>
        <div class="class-name-1">Something...</div>
        <div id="div-id-1" class="class-name-2">Something...</div>
        <div id="div-id-2" data-id="data-id-2" />
    </body>
    </html>
"""

EXPECTED_INCLUDE_BLOCK = (
    '<!-- Template include "include-id-1" START -->\n'
    f'<link rel="stylesheet" href="{STYLESHEET_URL}">'
    + INCLUDE_BODY
    + '\n<!-- Template include "include-id-1" END -->'
)


@pytest.fixture
def stub_fetcher() -> StubFragmentFetcher:
    """빈 StubFragmentFetcher."""
    return StubFragmentFetcher()


@pytest.fixture
def include_stub(stub_fetcher: StubFragmentFetcher) -> StubFragmentFetcher:
    """샘플 include 응답이 등록된 stub."""
    stub_fetcher.add(
        INCLUDE_SRC,
        body=INCLUDE_BODY,
        headers=[
            ("X-Powered-By", "JS"),
            ("X-My-Awesome-Header", "Awesome"),
            ("Link", f"{STYLESHEET_URL};rel=stylesheet;loveyou=3000"),
        ],
    )
    return stub_fetcher


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def templates_root(tmp_path: Path) -> Path:
    """테스트용 템플릿 저장 디렉터리."""
    root = tmp_path / "templates_data"
    root.mkdir()
    return root


@pytest.fixture
def manager(templates_root: Path) -> TemplateManager:
    """TemplateManager 인스턴스."""
    return TemplateManager(templates_root)


# =============================================================================
# App Fixtures
# =============================================================================

def build_app(manager: TemplateManager, fetcher: FragmentFetcher) -> FastAPI:
    """lifespan 없이 state를 직접 채운 테스트용 앱."""
    app = FastAPI()
    app.include_router(templates.api_router, prefix="/api/v1/template")
    app.state.config = {}
    app.state.template_manager = manager
    app.state.render_engine = RenderEngine(fetcher)
    return app


@pytest.fixture
def app(manager: TemplateManager, include_stub: StubFragmentFetcher) -> FastAPI:
    """stub fetcher를 쓰는 FastAPI 앱."""
    return build_app(manager, include_stub)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """FastAPI TestClient."""
    with TestClient(app) as client:
        yield client
