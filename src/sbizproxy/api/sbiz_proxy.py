"""
소상공인 데이터 집계 프록시 (Gateway)

GET /api/v1/sbiz-proxy?api=<gis|open|sbiz|coord|store|storeRadius|storeInds|seoul>&...

1. api 파라미터 검증 -> RouteRequest
2. RoutingTable로 업스트림 명세 생성 (coord는 반경 확대 검색으로 위임)
3. HttpFetcher 호출
4. { success, status, data, elapsedMs } 봉투로 응답
"""

import logging
import time
from typing import Mapping

from fastapi import APIRouter, Request

from sbizproxy.api.coord_search import search_admin_units
from sbizproxy.api.fetcher import ProxyResult, fetch_upstream
from sbizproxy.api.responses import json_response
from sbizproxy.engine.routing import AdminLookup, RouteRequest, route_request
from sbizproxy.engine.vault import get_vault
from sbizproxy.shared.config import settings
from sbizproxy.shared.errors import ProxyError, UpstreamHTTPError

logger = logging.getLogger("SbizProxy")

router = APIRouter(prefix="/api/v1", tags=["sbiz-proxy"])


async def dispatch(params: Mapping[str, str]) -> ProxyResult:
    start_ms = time.time() * 1000
    req = RouteRequest.from_query(params)
    route = route_request(req, get_vault(), settings)

    if isinstance(route, AdminLookup):
        return await search_admin_units(route.point)

    logger.info(f"[proxy] {req.api_kind.value} → {route.redacted_url()}")
    result = await fetch_upstream(route)
    if not result.ok:
        raise UpstreamHTTPError(result.status, result.data)

    return ProxyResult(
        success=True,
        status=result.status,
        data=result.data,
        elapsed_ms=int(time.time() * 1000 - start_ms),
    )


@router.get("/sbiz-proxy")
async def sbiz_proxy(request: Request):
    try:
        result = await dispatch(request.query_params)
        return json_response(result.to_body())
    except ProxyError as e:
        logger.warning(f"[proxy] {e.status_code}: {e.message}")
        return json_response(e.to_body(), e.status_code)
    except Exception as e:
        logger.error(f"[proxy error] {e}")
        return json_response({"success": False, "error": str(e)}, 500)
