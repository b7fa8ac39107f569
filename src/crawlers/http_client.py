"""공유 HTTP 클라이언트 (curl_cffi)

- 요청마다 AsyncSession을 만들면 TLS/커넥션 오버헤드가 커지므로
  프로세스 단위로 세션(커넥션 풀)을 재사용합니다. 요청 데이터는 공유하지 않습니다.
- 실패 원인(HTTP 상태/네트워크/타임아웃)은 호출자가 구분할 수 있도록 HttpFetchResult로 돌려줍니다.
- 앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional, Dict

from curl_cffi.requests import AsyncSession

from src.core.config import settings
from src.core.logging import logger


@dataclass(frozen=True)
class HttpFetchResult:
    """GET 결과. status가 None이면 응답 자체를 받지 못한 경우."""
    status: Optional[int]
    text: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not None and 200 <= self.status < 300

    @property
    def timed_out(self) -> bool:
        lowered = (self.error or "").lower()
        return "timeout" in lowered or "timed out" in lowered


class SharedHttpClient:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._session: Optional[AsyncSession] = None

    async def _ensure_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                impersonate=settings.crawler_http_impersonate,
                headers=self.default_headers(),
                allow_redirects=True,
                max_clients=int(getattr(settings, "crawler_http_max_clients", 20)),
                trust_env=False,
            )
            return self._session

    def default_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": settings.crawler_user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": settings.crawler_accept_language,
        }

    async def get_text(
        self,
        url: str,
        *,
        timeout_s: float,
        headers: Optional[Dict[str, str]] = None,
    ) -> HttpFetchResult:
        sess = await self._ensure_session()
        try:
            resp = await sess.get(url, headers=headers, timeout=timeout_s, allow_redirects=True)
            status = getattr(resp, "status_code", 0) or 0
            text = getattr(resp, "text", "") or ""
            return HttpFetchResult(status=status, text=text)
        except Exception as e:
            logger.info(f"[HTTP_CLIENT] GET failed: {type(e).__name__}: {repr(e)}")
            return HttpFetchResult(status=None, error=f"{type(e).__name__}: {e}")

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                return
            try:
                await self._session.close()
            except Exception as e:
                logger.debug(f"[HTTP_CLIENT] close failed: {type(e).__name__}")
            self._session = None


_shared_http_client = SharedHttpClient()


def get_shared_http_client() -> SharedHttpClient:
    return _shared_http_client


async def shutdown_shared_http_client() -> None:
    await _shared_http_client.close()
