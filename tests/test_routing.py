"""
Unit tests for the RoutingTable: api key + query -> upstream descriptor.
No network involved.
"""

from urllib.parse import parse_qs, urlsplit

import pytest

from sbizproxy.engine.projection import GeoPoint, wgs84_to_planar
from sbizproxy.engine.routing import (
    AdminLookup,
    RouteRequest,
    Transport,
    admin_lookup_descriptor,
    local_search_descriptor,
    route_request,
)
from sbizproxy.engine.projection import BoundingBox
from sbizproxy.engine.vault import CredentialVault
from sbizproxy.shared.config import Settings
from sbizproxy.shared.constants import API_KINDS
from sbizproxy.shared.errors import ConfigurationError, CredentialMissing, ValidationError

VAULT = CredentialVault({"simple": "cert-simple", "detail": "cert-detail"})
CONFIG = Settings(
    DATA_GO_KR_API_KEY="data-key",
    SEOUL_OPEN_API_KEY="seoulkey123",
    NAVER_SEARCH_CLIENT_ID="naver-id",
    NAVER_SEARCH_CLIENT_SECRET="naver-secret",
)
EMPTY_CONFIG = Settings(
    DATA_GO_KR_API_KEY="",
    SEOUL_OPEN_API_KEY="",
    NAVER_SEARCH_CLIENT_ID="",
    NAVER_SEARCH_CLIENT_SECRET="",
)


def _route(params, config=CONFIG):
    return route_request(RouteRequest.from_query(params), VAULT, config)


def _query(url):
    return {k: v[0] for k, v in parse_qs(urlsplit(url).query, keep_blank_values=True).items()}


# -----------------------------------------------------------------------------
# RouteRequest parsing
# -----------------------------------------------------------------------------
def test_missing_api_lists_all_kinds():
    with pytest.raises(ValidationError) as exc:
        RouteRequest.from_query({})
    assert exc.value.field == "api"
    assert exc.value.available == API_KINDS


def test_unknown_api_rejected():
    with pytest.raises(ValidationError) as exc:
        RouteRequest.from_query({"api": "weather"})
    assert exc.value.to_body()["available"] == API_KINDS


def test_reserved_params_are_not_forwarded():
    req = RouteRequest.from_query({"api": "open", "endpoint": "/x", "apiName": "simple", "q": "1"})
    assert req.endpoint == "/x"
    assert req.sub_api_name == "simple"
    assert req.raw_params == {"q": "1"}


# -----------------------------------------------------------------------------
# gis / sbiz / open (bigdata.sbiz.or.kr)
# -----------------------------------------------------------------------------
def test_gis_passthrough_forwards_everything():
    d = _route({"api": "gis", "endpoint": "/x", "adongCd": "1168010100", "foo": "bar", "blank": ""})
    assert d.url.startswith("https://bigdata.sbiz.or.kr/x?")
    assert _query(d.url) == {"adongCd": "1168010100", "foo": "bar", "blank": ""}
    assert d.transport is Transport.HTTPS
    assert d.verify_tls is False


def test_gis_with_coordinates_builds_bounding_box():
    d = _route({
        "api": "gis", "endpoint": "/gis/api/x.json",
        "lat": "37.5442", "lng": "127.0499",
        "indsLclsCd": "I2", "evil": "drop-me",
    })
    q = _query(d.url)
    center = wgs84_to_planar(37.5442, 127.0499)
    assert int(q["maxXAxis"]) - int(q["minXAxis"]) == 2000
    assert int(q["maxYAxis"]) - int(q["minYAxis"]) == 2000
    assert int(q["minXAxis"]) + 1000 == center.x
    assert int(q["minYAxis"]) + 1000 == center.y
    assert q["mapLevel"] == "14"
    assert q["indsLclsCd"] == "I2"
    assert "evil" not in q
    assert "lat" not in q


def test_gis_margin_and_legacy_aliases():
    d = _route({
        "api": "gis", "endpoint": "/x",
        "wgs84_lat": "37.5", "wgs84_lng": "127.0", "margin": "500", "mapLevel": "12",
    })
    q = _query(d.url)
    assert int(q["maxXAxis"]) - int(q["minXAxis"]) == 1000
    assert q["mapLevel"] == "12"


def test_gis_invalid_margin_falls_back_to_default():
    d = _route({"api": "gis", "endpoint": "/x", "lat": "37.5", "lng": "127.0", "margin": "wide"})
    q = _query(d.url)
    assert int(q["maxXAxis"]) - int(q["minXAxis"]) == 2000


@pytest.mark.parametrize("api", ["gis", "open", "sbiz"])
def test_endpoint_required(api):
    with pytest.raises(ValidationError) as exc:
        _route({"api": api, "apiName": "simple"})
    assert exc.value.field == "endpoint"


def test_endpoint_must_be_a_path():
    with pytest.raises(ValidationError):
        _route({"api": "sbiz", "endpoint": ".evil.example/x"})


def test_open_injects_cert_key():
    d = _route({"api": "open", "endpoint": "/sbiz/api/bizonSttus", "apiName": "simple", "admiCd": "11"})
    q = _query(d.url)
    assert q["certKey"] == "cert-simple"
    assert q["admiCd"] == "11"
    assert "cert-simple" not in d.redacted_url()
    assert "cert-simple" not in repr(d)


def test_open_unknown_api_name():
    with pytest.raises(CredentialMissing) as exc:
        _route({"api": "open", "endpoint": "/x", "apiName": "weather"})
    assert exc.value.available == ["detail", "simple"]


def test_sbiz_passthrough():
    d = _route({"api": "sbiz", "endpoint": "/sbiz/api/x", "a": "1"})
    assert _query(d.url) == {"a": "1"}
    assert d.verify_tls is False


# -----------------------------------------------------------------------------
# coord
# -----------------------------------------------------------------------------
def test_coord_delegates_to_admin_lookup():
    route = _route({"api": "coord", "lat": "37.5", "lng": "127.0"})
    assert isinstance(route, AdminLookup)
    assert route.point == GeoPoint(lat=37.5, lng=127.0)


def test_coord_requires_lat_lng():
    with pytest.raises(ValidationError) as exc:
        _route({"api": "coord", "lat": "37.5"})
    assert exc.value.field == "lng"


def test_admin_lookup_descriptor():
    box = BoundingBox.around(wgs84_to_planar(37.5, 127.0), 3000)
    d = admin_lookup_descriptor(box)
    assert urlsplit(d.url).path == "/gis/api/getCoordToAdmPoint.json"
    assert d.timeout_s == 15.0
    assert d.verify_tls is False


# -----------------------------------------------------------------------------
# data.go.kr / Seoul (legacy HTTP)
# -----------------------------------------------------------------------------
@pytest.mark.parametrize("api, path", [
    ("store", "/B553077/api/open/sdsc/storeListInDong"),
    ("storeInds", "/B553077/api/open/sdsc/storeListByIndsMclasCd"),
])
def test_store_defaults(api, path):
    d = _route({"api": api, "indsMclsCd": "I201"})
    parts = urlsplit(d.url)
    assert parts.scheme == "http"
    assert parts.path == path
    q = _query(d.url)
    assert q["serviceKey"] == "data-key"
    assert q["divId"] == "adongCd"
    assert q["key"] == "1168010100"
    assert q["numOfRows"] == "100"
    assert q["type"] == "json"
    assert q["indsMclsCd"] == "I201"
    assert d.transport is Transport.HTTP
    assert d.timeout_s == 30.0


def test_store_radius_requires_cx_cy():
    with pytest.raises(ValidationError) as exc:
        _route({"api": "storeRadius", "cy": "37.5"})
    assert exc.value.field == "cx"


def test_store_radius():
    d = _route({"api": "storeRadius", "cx": "127.0", "cy": "37.5"})
    q = _query(d.url)
    assert urlsplit(d.url).path.endswith("/storeListInRadius")
    assert q["radius"] == "500"
    assert q["cx"] == "127.0"


def test_store_without_service_key_is_configuration_error():
    with pytest.raises(ConfigurationError):
        _route({"api": "store"}, config=EMPTY_CONFIG)


def test_seoul_path_layout():
    d = _route({"api": "seoul", "stdrYyquCd": "20241"})
    assert d.url == "http://openapi.seoul.go.kr:8088/seoulkey123/json/VwsmTrdarSelngQq/1/1000/20241"
    assert "seoulkey123" not in d.redacted_url()


def test_seoul_without_quarter():
    d = _route({"api": "seoul", "service": "VwsmTrdarFlpopQq", "startIndex": "5", "endIndex": "10"})
    assert d.url.endswith("/json/VwsmTrdarFlpopQq/5/10")


# -----------------------------------------------------------------------------
# Naver local search
# -----------------------------------------------------------------------------
def test_local_search_descriptor():
    d = local_search_descriptor("성수 카페", "5", CONFIG)
    q = _query(d.url)
    assert q == {"query": "성수 카페", "display": "5", "sort": "random"}
    assert d.verify_tls is True
    assert d.headers["X-Naver-Client-Id"] == "naver-id"


def test_local_search_requires_keys():
    with pytest.raises(ConfigurationError):
        local_search_descriptor("카페", "5", EMPTY_CONFIG)


# -----------------------------------------------------------------------------
# Credential masking and endpoint encoding
# -----------------------------------------------------------------------------
def test_repr_hides_query_credentials():
    d = _route({"api": "store"})

    assert "data-key" in d.url
    assert "data-key" not in repr(d)
    assert "data-key" not in str(d)


def test_encoded_seoul_key_is_masked():
    config = Settings(SEOUL_OPEN_API_KEY="ab+c/d==")
    d = _route({"api": "seoul"}, config=config)

    assert "ab%2Bc%2Fd%3D%3D" in d.url
    assert "ab%2Bc%2Fd%3D%3D" not in d.redacted_url()
    assert "ab%2Bc%2Fd%3D%3D" not in repr(d)


def test_scrub_masks_every_encoded_form():
    config = Settings(DATA_GO_KR_API_KEY="k+ey/1==")
    d = _route({"api": "store"}, config=config)
    message = f"Exceeded redirects for {d.url} (raw k+ey/1==, plus k%2Bey%2F1%3D%3D)"

    scrubbed = d.scrub(message)

    assert "k+ey/1==" not in scrubbed
    assert "k%2Bey%2F1%3D%3D" not in scrubbed


def test_endpoint_is_percent_encoded():
    d = _route({"api": "sbiz", "endpoint": "/gis/상권 분석.json"})

    assert urlsplit(d.url).path == "/gis/%EC%83%81%EA%B6%8C%20%EB%B6%84%EC%84%9D.json"
    assert d.url.isascii()
