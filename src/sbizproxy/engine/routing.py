"""
RoutingTable: api 키 + 쿼리 파라미터 -> 업스트림 요청 명세(UpstreamDescriptor).

네트워크 호출은 하지 않습니다. coord 요청은 AdminLookup으로 반환되어
AdaptiveSearchController(api.coord_search)에 위임됩니다.
"""

from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, quote_plus, urlencode, urlsplit, urlunsplit

from pydantic import BaseModel, Field

from sbizproxy.engine.projection import BoundingBox, GeoPoint, wgs84_to_planar
from sbizproxy.engine.vault import CredentialVault
from sbizproxy.shared.config import Settings
from sbizproxy.shared.constants import (
    ADMIN_LOOKUP_PATH,
    ADMIN_LOOKUP_TIMEOUT_S,
    API_KINDS,
    DATA_GO_KR_BASE,
    DEFAULT_MAP_LEVEL,
    DEFAULT_MARGIN_M,
    GIS_FILTER_PARAMS,
    INDUSTRY_PARAMS,
    NAVER_LOCAL_URL,
    PASSTHROUGH_TIMEOUT_S,
    RESERVED_PARAMS,
    SBIZ_HOST,
    SEOUL_HOST,
    STORE_PATHS,
    ApiKind,
)
from sbizproxy.shared.errors import ConfigurationError, ValidationError

Query = List[Tuple[str, str]]


class Transport(str, Enum):
    HTTP = "http"
    HTTPS = "https"


class UpstreamDescriptor(BaseModel):
    url: str = Field(repr=False)
    transport: Transport
    verify_tls: bool = True
    credential: Optional[str] = Field(default=None, repr=False)
    headers: Dict[str, str] = Field(default_factory=dict, repr=False)
    timeout_s: float = PASSTHROUGH_TIMEOUT_S

    model_config = {"frozen": True}

    def scrub(self, text: str) -> str:
        """키의 원문 및 URL 인코딩 형태를 모두 마스킹"""
        if not self.credential:
            return text
        for form in (quote(self.credential, safe=""), quote_plus(self.credential), self.credential):
            text = text.replace(form, "***")
        return text

    def redacted_url(self) -> str:
        """로그용 URL: 쿼리스트링 제거 + 경로에 포함된 키 마스킹"""
        parts = urlsplit(self.url)
        return urlunsplit((parts.scheme, parts.netloc, self.scrub(parts.path), "", ""))

    def __repr_args__(self):
        yield "url", self.redacted_url()
        yield from super().__repr_args__()


class RouteRequest(BaseModel):
    api_kind: ApiKind
    endpoint: Optional[str] = None
    sub_api_name: Optional[str] = None
    raw_params: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "RouteRequest":
        api = params.get("api")
        if not api:
            raise ValidationError("api parameter is required", field="api", available=API_KINDS)
        if api not in API_KINDS:
            raise ValidationError(f"Unsupported api: {api}", field="api", available=API_KINDS)
        return cls(
            api_kind=ApiKind(api),
            endpoint=params.get("endpoint") or None,
            sub_api_name=params.get("apiName") or None,
            raw_params={k: v for k, v in params.items() if k not in RESERVED_PARAMS},
        )


class AdminLookup(BaseModel):
    """coord 요청: 좌표 -> 행정동 검색 위임"""
    point: GeoPoint


Route = Union[UpstreamDescriptor, AdminLookup]


def _describe(url: str, **kwargs) -> UpstreamDescriptor:
    transport = Transport(urlsplit(url).scheme)
    return UpstreamDescriptor(url=url, transport=transport, **kwargs)


def _with_query(base: str, query: Query) -> str:
    return f"{base}?{urlencode(query)}" if query else base


def _require(params: Mapping[str, str], *names: str) -> List[str]:
    values = []
    for name in names:
        value = params.get(name)
        if not value:
            raise ValidationError(f"{name} parameter is required", field=name)
        values.append(value)
    return values


def _require_endpoint(req: RouteRequest) -> str:
    endpoint = req.endpoint
    if not endpoint:
        raise ValidationError(
            f"endpoint parameter is required for api={req.api_kind.value}", field="endpoint"
        )
    # host + endpoint 결합이므로 경로 형태만 허용
    if not endpoint.startswith("/") or endpoint.startswith("//"):
        raise ValidationError("endpoint must be an absolute path", field="endpoint")
    return endpoint


def _shared_key(value: str, name: str) -> str:
    if not value:
        raise ConfigurationError(f"{name} not configured")
    return value


def _sbiz(endpoint: str, query: Query, credential: Optional[str] = None) -> UpstreamDescriptor:
    return _describe(
        _with_query(f"{SBIZ_HOST}{quote(endpoint, safe='/')}", query),
        verify_tls=False,
        credential=credential,
    )


def _int_param(params: Mapping[str, str], name: str, default: int) -> int:
    raw = params.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer", field=name)


def _margin(params: Mapping[str, str]) -> int:
    try:
        margin = int(params.get("margin") or 0)
    except ValueError:
        margin = 0
    return margin if margin > 0 else DEFAULT_MARGIN_M


def _coordinate_fields(params: Mapping[str, str]) -> Optional[Tuple[str, str]]:
    for lat_field, lng_field in (("lat", "lng"), ("wgs84_lat", "wgs84_lng")):
        if params.get(lat_field) and params.get(lng_field):
            return lat_field, lng_field
    return None


def _route_gis(req: RouteRequest, vault: CredentialVault, config: Settings) -> Route:
    endpoint = _require_endpoint(req)
    params = req.raw_params
    fields = _coordinate_fields(params)
    if fields is None:
        return _sbiz(endpoint, list(params.items()))

    lat_field, lng_field = fields
    point = GeoPoint.parse(params[lat_field], params[lng_field], lat_field, lng_field)
    box = BoundingBox.around(
        wgs84_to_planar(point.lat, point.lng),
        _margin(params),
        _int_param(params, "mapLevel", DEFAULT_MAP_LEVEL),
    )
    query = list(box.as_query().items())
    query += [(name, params[name]) for name in GIS_FILTER_PARAMS if params.get(name)]
    return _sbiz(endpoint, query)


def _route_open(req: RouteRequest, vault: CredentialVault, config: Settings) -> Route:
    endpoint = _require_endpoint(req)
    cert_key = vault.lookup(req.sub_api_name)
    query = [("certKey", cert_key)]
    query += [(k, v) for k, v in req.raw_params.items() if k != "certKey"]
    return _sbiz(endpoint, query, credential=cert_key)


def _route_sbiz(req: RouteRequest, vault: CredentialVault, config: Settings) -> Route:
    return _sbiz(_require_endpoint(req), list(req.raw_params.items()))


def _route_coord(req: RouteRequest, vault: CredentialVault, config: Settings) -> Route:
    lat, lng = _require(req.raw_params, "lat", "lng")
    return AdminLookup(point=GeoPoint.parse(lat, lng))


def _industry_filters(params: Mapping[str, str]) -> Query:
    return [(name, params[name]) for name in INDUSTRY_PARAMS if params.get(name)]


def _route_store(req: RouteRequest, vault: CredentialVault, config: Settings) -> Route:
    """store / storeInds: 행정구역 단위 상가업소 조회"""
    service_key = _shared_key(config.DATA_GO_KR_API_KEY, "DATA_GO_KR_API_KEY")
    p = req.raw_params
    query = [
        ("serviceKey", service_key),
        ("divId", p.get("divId") or "adongCd"),
        ("key", p.get("key") or "1168010100"),
        ("numOfRows", p.get("numOfRows") or "100"),
        ("pageNo", p.get("pageNo") or "1"),
        ("type", "json"),
    ] + _industry_filters(p)
    url = _with_query(f"{DATA_GO_KR_BASE}/{STORE_PATHS[req.api_kind]}", query)
    return _describe(url, credential=service_key)


def _route_store_radius(req: RouteRequest, vault: CredentialVault, config: Settings) -> Route:
    p = req.raw_params
    cx, cy = _require(p, "cx", "cy")
    service_key = _shared_key(config.DATA_GO_KR_API_KEY, "DATA_GO_KR_API_KEY")
    query = [
        ("serviceKey", service_key),
        ("cx", cx),
        ("cy", cy),
        ("radius", p.get("radius") or "500"),
        ("numOfRows", p.get("numOfRows") or "100"),
        ("pageNo", p.get("pageNo") or "1"),
        ("type", "json"),
    ] + _industry_filters(p)
    url = _with_query(f"{DATA_GO_KR_BASE}/{STORE_PATHS[ApiKind.STORE_RADIUS]}", query)
    return _describe(url, credential=service_key)


def _route_seoul(req: RouteRequest, vault: CredentialVault, config: Settings) -> Route:
    """서울시 열린데이터: /{key}/json/{service}/{start}/{end}[/{quarter}]"""
    api_key = _shared_key(config.SEOUL_OPEN_API_KEY, "SEOUL_OPEN_API_KEY")
    p = req.raw_params
    segments = [
        api_key,
        "json",
        p.get("service") or "VwsmTrdarSelngQq",   # 기본: 추정매출
        p.get("startIndex") or "1",
        p.get("endIndex") or "1000",
    ]
    if p.get("stdrYyquCd"):
        segments.append(p["stdrYyquCd"])
    path = "/".join(quote(segment, safe="") for segment in segments)
    return _describe(f"{SEOUL_HOST}/{path}", credential=api_key)


ROUTES: Dict[ApiKind, Callable[[RouteRequest, CredentialVault, Settings], Route]] = {
    ApiKind.GIS: _route_gis,
    ApiKind.OPEN: _route_open,
    ApiKind.SBIZ: _route_sbiz,
    ApiKind.COORD: _route_coord,
    ApiKind.STORE: _route_store,
    ApiKind.STORE_INDS: _route_store,
    ApiKind.STORE_RADIUS: _route_store_radius,
    ApiKind.SEOUL: _route_seoul,
}


def route_request(req: RouteRequest, vault: CredentialVault, config: Settings) -> Route:
    return ROUTES[req.api_kind](req, vault, config)


def admin_lookup_descriptor(box: BoundingBox) -> UpstreamDescriptor:
    """소상공인365 좌표 -> 행정동 조회"""
    return _describe(
        _with_query(f"{SBIZ_HOST}{ADMIN_LOOKUP_PATH}", list(box.as_query().items())),
        verify_tls=False,
        timeout_s=ADMIN_LOOKUP_TIMEOUT_S,
    )


def local_search_descriptor(query: str, display: str, config: Settings) -> UpstreamDescriptor:
    """Naver Search Local API (developers.naver.com 키)"""
    if not config.NAVER_SEARCH_CLIENT_ID or not config.NAVER_SEARCH_CLIENT_SECRET:
        raise ConfigurationError("Naver Search API keys not configured")
    return _describe(
        _with_query(NAVER_LOCAL_URL, [("query", query), ("display", display), ("sort", "random")]),
        headers={
            "X-Naver-Client-Id": config.NAVER_SEARCH_CLIENT_ID,
            "X-Naver-Client-Secret": config.NAVER_SEARCH_CLIENT_SECRET,
        },
    )
