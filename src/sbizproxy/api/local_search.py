"""
Naver Local Search 프록시

GET /api/v1/naver-local?query=성수동 카페&display=5

업스트림 응답 형태({ items: [...] })를 유지하되 title의 HTML 태그를 제거하고
mapx/mapy를 WGS84로 변환한 wgs84 필드를 각 item에 추가합니다.
"""

import logging

from fastapi import APIRouter

from sbizproxy.api.fetcher import fetch_upstream
from sbizproxy.api.responses import json_response
from sbizproxy.engine.normalize import normalize_local_search
from sbizproxy.engine.routing import local_search_descriptor
from sbizproxy.shared.config import settings
from sbizproxy.shared.errors import ProxyError, UpstreamHTTPError

logger = logging.getLogger("LocalSearch")

router = APIRouter(prefix="/api/v1", tags=["local-search"])


@router.get("/naver-local")
async def naver_local(query: str = "", display: str = "5"):
    if not query:
        return json_response({"success": False, "error": "query parameter required"}, 400)

    try:
        descriptor = local_search_descriptor(query, display or "5", settings)
        result = await fetch_upstream(descriptor)
        if not result.ok:
            raise UpstreamHTTPError(result.status, result.data)
        return json_response(normalize_local_search(result.data))
    except ProxyError as e:
        logger.error(f"Naver Local Search error: {e.status_code} {e.message}")
        return json_response(e.to_body(), e.status_code)
    except Exception as e:
        logger.error(f"naver-local proxy error: {e}")
        return json_response({"success": False, "error": str(e)}, 500)
