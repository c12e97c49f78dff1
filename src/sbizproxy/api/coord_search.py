"""
AdaptiveSearchController: 좌표 -> 행정동 조회 (반경 자동 확대)

1000m -> 2000m -> 3000m 순서로 순차 조회하고, 비어있지 않은 배열이
처음 돌아오는 반경에서 멈춥니다. 한 반경에서의 타임아웃/전송 오류는
다음 반경으로 넘어가는 신호일 뿐 전체 요청을 실패시키지 않습니다.
"""

import logging
import time

from sbizproxy.api.fetcher import ProxyResult, fetch_upstream
from sbizproxy.engine.projection import BoundingBox, GeoPoint, wgs84_to_planar
from sbizproxy.engine.routing import admin_lookup_descriptor
from sbizproxy.shared.constants import DEFAULT_MAP_LEVEL, SEARCH_MARGINS_M
from sbizproxy.shared.errors import UpstreamTransportError

logger = logging.getLogger("CoordSearch")


async def search_admin_units(point: GeoPoint) -> ProxyResult:
    start_ms = time.time() * 1000
    center = wgs84_to_planar(point.lat, point.lng)

    for margin in SEARCH_MARGINS_M:
        box = BoundingBox.around(center, margin, DEFAULT_MAP_LEVEL)
        try:
            result = await fetch_upstream(admin_lookup_descriptor(box))
        except UpstreamTransportError as e:
            logger.info(f"[coord] margin={margin}m failed ({e.message}), widening")
            continue

        if result.ok and isinstance(result.data, list) and result.data:
            logger.info(f"[coord] margin={margin}m → {len(result.data)}개 행정동 찾음")
            return ProxyResult(
                success=True,
                status=200,
                data=result.data,
                elapsed_ms=int(time.time() * 1000 - start_ms),
            )
        logger.info(f"[coord] margin={margin}m → empty (HTTP {result.status})")

    logger.info(f"[coord] no administrative unit within {SEARCH_MARGINS_M[-1]}m")
    return ProxyResult(
        success=True,
        status=200,
        data=[],
        elapsed_ms=int(time.time() * 1000 - start_ms),
    )
