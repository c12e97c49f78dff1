"""
sbiz-proxy 공유 상수 정의

업스트림 호스트, 라우팅 키, 좌표계 파라미터, 타임아웃 등
프로젝트 전역에서 사용되는 불변 값들을 중앙 관리합니다.
"""

from enum import Enum


class ApiKind(str, Enum):
    GIS = "gis"
    OPEN = "open"
    SBIZ = "sbiz"
    COORD = "coord"
    STORE = "store"
    STORE_RADIUS = "storeRadius"
    STORE_INDS = "storeInds"
    SEOUL = "seoul"


API_KINDS = [kind.value for kind in ApiKind]

# ─── 업스트림 호스트 ──────────────────────────────────────
SBIZ_HOST = "https://bigdata.sbiz.or.kr"        # 소상공인365 (인증서 문제로 TLS 검증 완화)
DATA_GO_KR_BASE = "http://apis.data.go.kr/B553077/api/open/sdsc"
SEOUL_HOST = "http://openapi.seoul.go.kr:8088"
NAVER_LOCAL_URL = "https://openapi.naver.com/v1/search/local.json"

ADMIN_LOOKUP_PATH = "/gis/api/getCoordToAdmPoint.json"

STORE_PATHS = {
    ApiKind.STORE: "storeListInDong",
    ApiKind.STORE_RADIUS: "storeListInRadius",
    ApiKind.STORE_INDS: "storeListByIndsMclasCd",
}

# ─── 좌표계 (Korea 2000 / Central Belt, GRS80) ───────────
TM_SEMI_MAJOR_AXIS = 6378137.0
TM_FLATTENING = 1 / 298.257222101
TM_LAT_ORIGIN = 38.0
TM_LNG_ORIGIN = 127.0
TM_SCALE_FACTOR = 1.0
TM_FALSE_EASTING = 200000
TM_FALSE_NORTHING = 500000
TM_PROJ_STRING = (
    "+proj=tmerc +lat_0=38 +lon_0=127 +k=1 +x_0=200000 +y_0=500000 "
    "+ellps=GRS80 +units=m +no_defs"
)

TM128_SCALE = 10_000_000    # Naver mapx/mapy = 경도/위도 * 1e7

# ─── 행정동 검색 ──────────────────────────────────────────
DEFAULT_MARGIN_M = 1000
SEARCH_MARGINS_M = (1000, 2000, 3000)
DEFAULT_MAP_LEVEL = 14

# ─── 쿼리 파라미터 ────────────────────────────────────────
RESERVED_PARAMS = ("api", "endpoint", "apiName")
GIS_FILTER_PARAMS = ("chkedList", "indsLclsCd", "indsLclsNm", "indsMclsCd", "indsMclsNm")
INDUSTRY_PARAMS = ("indsLclsCd", "indsMclsCd", "indsSclsCd")

# ─── 타임아웃 (초) ────────────────────────────────────────
ADMIN_LOOKUP_TIMEOUT_S = 15.0
PASSTHROUGH_TIMEOUT_S = 30.0

# ─── HTTP ─────────────────────────────────────────────────
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Content-Type": "application/json; charset=utf-8",
}
