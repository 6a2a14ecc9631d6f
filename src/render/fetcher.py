"""
Fragment Fetcher: directive 1개 → upstream GET → FragmentResult.

규칙:
- 요청은 directive당 정확히 1회 (재시도 없음)
- timeout(ms)은 dispatch 시점부터 측정, 초과 시 대기를 중단하고 결과는 버림
- 응답이 오면 status code와 무관하게 success
- 전송 단계 실패 (DNS, 연결 거부, reset) → network-error

전송 계층은 FragmentFetcher.get()으로 추상화되어 있어
테스트에서 고정 지연/응답을 주는 구현으로 교체 가능.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from src.domain.schemas import (
    FragmentResponse,
    FragmentResult,
    FragmentStatus,
    IncludeDirective,
)
from src.render.link_header import resolve_stylesheet_links

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """전송 단계 실패 (응답 없음)."""


class FetchTimeoutError(FetchError):
    """전송 계층 자체 timeout (directive timeout과 동일하게 취급)."""


# =============================================================================
# Abstract Fetcher
# =============================================================================

class FragmentFetcher(ABC):
    """
    fragment fetch 추상 인터페이스.

    구현체는 get()만 제공하면 되고,
    timeout 적용과 결과 분류는 fetch()가 담당.
    """

    @abstractmethod
    async def get(self, src: str) -> FragmentResponse:
        """
        src로 GET 요청 1회.

        Raises:
            FetchError: 응답을 받지 못한 경우
        """
        ...

    async def fetch(self, directive: IncludeDirective) -> FragmentResult:
        """
        directive timeout을 적용해 fragment fetch.

        예외를 던지지 않고 항상 FragmentResult로 반환.
        """
        started = time.monotonic()

        try:
            response = await asyncio.wait_for(
                self.get(directive.src),
                timeout=directive.timeout / 1000,
            )
        except (TimeoutError, FetchTimeoutError):
            logger.warning(
                f"Include '{directive.id}' timed out after {directive.timeout}ms: {directive.src}"
            )
            return FragmentResult(
                directive_id=directive.id,
                status=FragmentStatus.TIMEOUT,
                error_message=f"no response within {directive.timeout}ms",
                elapsed_ms=_elapsed_ms(started),
            )
        except FetchError as e:
            logger.warning(f"Include '{directive.id}' failed: {directive.src}: {e}")
            return FragmentResult(
                directive_id=directive.id,
                status=FragmentStatus.NETWORK_ERROR,
                error_message=str(e),
                elapsed_ms=_elapsed_ms(started),
            )
        except Exception as e:
            # get() 계약 위반 (FetchError 외 예외)도 전송 실패로 분류
            logger.exception(f"Include '{directive.id}' raised unexpectedly: {directive.src}")
            return FragmentResult(
                directive_id=directive.id,
                status=FragmentStatus.NETWORK_ERROR,
                error_message=f"{type(e).__name__}: {e}",
                elapsed_ms=_elapsed_ms(started),
            )

        return FragmentResult(
            directive_id=directive.id,
            status=FragmentStatus.SUCCESS,
            body=response.body,
            stylesheet_tags=resolve_stylesheet_links(response.header_values("link")),
            status_code=response.status_code,
            elapsed_ms=_elapsed_ms(started),
        )

    async def aclose(self) -> None:
        """보유 리소스 정리 (기본: 없음)."""


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


# =============================================================================
# httpx Implementation
# =============================================================================

class HttpxFragmentFetcher(FragmentFetcher):
    """
    httpx.AsyncClient 기반 fetcher.

    client는 앱 수명 동안 공유 (connection pool 재사용).
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        connect_timeout: float = 5.0,
        follow_redirects: bool = True,
        max_connections: int = 100,
    ):
        """
        Args:
            client: 외부에서 주입한 client (None이면 설정값으로 생성)
            connect_timeout: 연결 timeout (초)
            follow_redirects: redirect 추적 여부
            max_connections: connection pool 크기
        """
        self._owns_client = client is None
        if client is None:
            # 전체 대기 시간은 directive timeout이 제한하므로 read timeout 없음
            client = httpx.AsyncClient(
                timeout=httpx.Timeout(None, connect=connect_timeout),
                follow_redirects=follow_redirects,
                limits=httpx.Limits(max_connections=max_connections),
            )
        self.client = client

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "HttpxFragmentFetcher":
        """config의 http 섹션으로 생성."""
        http_config = config.get("http", {})
        return cls(
            connect_timeout=float(http_config.get("connect_timeout", 5.0)),
            follow_redirects=bool(http_config.get("follow_redirects", True)),
            max_connections=int(http_config.get("max_connections", 100)),
        )

    async def get(self, src: str) -> FragmentResponse:
        try:
            response = await self.client.get(src)
        except httpx.TimeoutException as e:
            raise FetchTimeoutError(f"{type(e).__name__}: {e}") from e
        except httpx.RequestError as e:
            raise FetchError(f"{type(e).__name__}: {e}") from e
        except httpx.InvalidURL as e:
            raise FetchError(f"Invalid URL: {e}") from e

        return FragmentResponse(
            status_code=response.status_code,
            headers=list(response.headers.multi_items()),
            body=response.text,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
