"""
HttpFetcher: 단일 업스트림 GET 호출.

- 타임아웃은 UpstreamDescriptor.timeout_s (행정동 조회 15초, 일반 30초)
- TLS 검증 여부는 라우트별 플래그 (bigdata.sbiz.or.kr만 완화)
- 본문이 JSON이 아니면 원문 텍스트를 그대로 반환
"""

import asyncio
import json
import logging
from typing import Any, Dict

import aiohttp
from pydantic import BaseModel, Field
from yarl import URL

from sbizproxy.engine.routing import UpstreamDescriptor
from sbizproxy.shared.config import settings
from sbizproxy.shared.errors import UpstreamTransportError

logger = logging.getLogger("Fetcher")


class FetchResult(BaseModel):
    status: int
    data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class ProxyResult(BaseModel):
    """모든 집계 경로의 공통 응답 봉투"""
    success: bool
    status: int
    data: Any = None
    elapsed_ms: int = Field(0, alias="elapsedMs")

    model_config = {"populate_by_name": True}

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def _default_headers() -> Dict[str, str]:
    # Referer/User-Agent 없으면 소상공인365가 요청을 거부함
    return {
        "Accept": "application/json",
        "User-Agent": settings.UPSTREAM_USER_AGENT,
        "Referer": settings.UPSTREAM_REFERER,
    }


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {token}")


def _parse_body(body: str) -> Any:
    # NaN / Infinity 는 표준 JSON이 아니므로 원문 텍스트로 취급
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except ValueError:
        return body


async def fetch_upstream(descriptor: UpstreamDescriptor) -> FetchResult:
    headers = {**_default_headers(), **descriptor.headers}
    timeout = aiohttp.ClientTimeout(total=descriptor.timeout_s)
    # 공공데이터포털 serviceKey 이중 인코딩 방지: 이미 인코딩된 URL 그대로 사용
    url = URL(descriptor.url, encoded=True)

    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, headers=headers, ssl=descriptor.verify_tls) as resp:
                status = resp.status
                body = await resp.text(errors="replace")
    except asyncio.TimeoutError:
        logger.warning(f"[Fetch] timeout after {descriptor.timeout_s}s: {descriptor.redacted_url()}")
        raise UpstreamTransportError(f"Upstream timeout after {descriptor.timeout_s:g}s")
    except aiohttp.ClientError as e:
        reason = descriptor.scrub(str(e) or e.__class__.__name__)
        logger.warning(f"[Fetch] transport error for {descriptor.redacted_url()}: {reason}")
        raise UpstreamTransportError(f"Upstream request failed: {reason}")

    if not 200 <= status < 300:
        logger.warning(f"[Fetch] HTTP {status} from {descriptor.redacted_url()}")

    return FetchResult(status=status, data=_parse_body(body))
