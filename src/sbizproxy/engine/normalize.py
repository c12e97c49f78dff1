"""
Local search response post-processing.

Naver returns titles wrapped in <b>...</b> and coordinates as
mapx/mapy (경도*1e7, 위도*1e7). Items get a plain title and, when the
coordinates parse, an extra ``wgs84`` field.
"""

import re
from typing import Any, Dict, List

from sbizproxy.engine.projection import tm128_to_wgs84

_TAG_RE = re.compile(r"<[^>]*>")


def strip_html(text: str) -> str:
    """HTML 태그 제거 (Naver가 <b>bold</b> 형태로 반환)"""
    return _TAG_RE.sub("", text)


def normalize_local_item(item: Dict[str, Any]) -> Dict[str, Any]:
    item = dict(item)
    if item.get("mapx") and item.get("mapy"):
        point = tm128_to_wgs84(item["mapx"], item["mapy"])
        if point is not None:
            item["wgs84"] = {"lat": point.lat, "lng": point.lng}
    if isinstance(item.get("title"), str):
        item["title"] = strip_html(item["title"])
    return item


def normalize_local_search(payload: Any) -> Any:
    """items 배열이 있는 dict만 변환, 그 외 형태는 그대로 반환"""
    if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
        return payload
    items: List[Any] = [
        normalize_local_item(item) if isinstance(item, dict) else item
        for item in payload["items"]
    ]
    return {**payload, "items": items}
