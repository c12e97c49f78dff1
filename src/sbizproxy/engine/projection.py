"""
Coordinate projection utilities.

Two unrelated encodings live here and must stay separate:
- WGS84 <-> Korea 2000 Central Belt TM (소상공인365 행정경계 API, EPSG:5181 parameters)
- Naver local search mapx/mapy (WGS84 degrees * 1e7 as decimal strings)
"""

import math
from typing import Optional

import pydantic
from pydantic import BaseModel, Field
from pyproj import Transformer

from sbizproxy.shared.constants import (
    DEFAULT_MAP_LEVEL,
    TM128_SCALE,
    TM_FALSE_EASTING,
    TM_FALSE_NORTHING,
    TM_FLATTENING,
    TM_LAT_ORIGIN,
    TM_LNG_ORIGIN,
    TM_PROJ_STRING,
    TM_SCALE_FACTOR,
    TM_SEMI_MAJOR_AXIS,
)
from sbizproxy.shared.errors import ValidationError

# always_xy=True forces (x, y) / (lon, lat) ordering
TRANSFORM_TM_TO_WGS84 = Transformer.from_crs(TM_PROJ_STRING, "EPSG:4326", always_xy=True)

_E2 = 2 * TM_FLATTENING - TM_FLATTENING ** 2
_EP2 = _E2 / (1 - _E2)


class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, lat: Optional[str], lng: Optional[str], lat_field: str = "lat",
              lng_field: str = "lng") -> "GeoPoint":
        """쿼리 문자열 값으로부터 GeoPoint 생성. 실패 시 400."""
        values = {}
        for field, raw in ((lat_field, lat), (lng_field, lng)):
            try:
                value = float(raw)
            except (TypeError, ValueError):
                raise ValidationError(f"{field} must be a number", field=field)
            if not math.isfinite(value):
                raise ValidationError(f"{field} must be a number", field=field)
            values[field] = value
        try:
            return cls(lat=values[lat_field], lng=values[lng_field])
        except pydantic.ValidationError:
            raise ValidationError(
                f"{lat_field}/{lng_field} out of WGS84 range", field=f"{lat_field},{lng_field}"
            )


class PlanarPoint(BaseModel):
    x: int
    y: int

    model_config = {"frozen": True}


class BoundingBox(BaseModel):
    min_x: int
    max_x: int
    min_y: int
    max_y: int
    map_level: int = DEFAULT_MAP_LEVEL

    model_config = {"frozen": True}

    @classmethod
    def around(cls, center: PlanarPoint, margin: int, map_level: int = DEFAULT_MAP_LEVEL) -> "BoundingBox":
        return cls(
            min_x=center.x - margin,
            max_x=center.x + margin,
            min_y=center.y - margin,
            max_y=center.y + margin,
            map_level=map_level,
        )

    def as_query(self) -> dict:
        return {
            "minXAxis": str(self.min_x),
            "maxXAxis": str(self.max_x),
            "minYAxis": str(self.min_y),
            "maxYAxis": str(self.max_y),
            "mapLevel": str(self.map_level),
        }


def _meridional_arc(phi: float) -> float:
    e2 = _E2
    return TM_SEMI_MAJOR_AXIS * (
        (1 - e2 / 4 - 3 * e2 ** 2 / 64 - 5 * e2 ** 3 / 256) * phi
        - (3 * e2 / 8 + 3 * e2 ** 2 / 32 + 45 * e2 ** 3 / 1024) * math.sin(2 * phi)
        + (15 * e2 ** 2 / 256 + 45 * e2 ** 3 / 1024) * math.sin(4 * phi)
        - (35 * e2 ** 3 / 3072) * math.sin(6 * phi)
    )


def wgs84_to_planar(lat: float, lng: float) -> PlanarPoint:
    """
    WGS84 (lat, lng) -> TM (x, y) in integer meters.

    Transverse Mercator forward series (Snyder), central meridian 127E,
    latitude of origin 38N, k0 = 1.0, false easting/northing 200000/500000.
    """
    phi = math.radians(lat)
    phi0 = math.radians(TM_LAT_ORIGIN)
    lam = math.radians(lng)
    lam0 = math.radians(TM_LNG_ORIGIN)

    sin_phi = math.sin(phi)
    n = TM_SEMI_MAJOR_AXIS / math.sqrt(1 - _E2 * sin_phi * sin_phi)
    t = math.tan(phi) ** 2
    c = _EP2 * math.cos(phi) ** 2
    a = (lam - lam0) * math.cos(phi)

    m = _meridional_arc(phi)
    m0 = _meridional_arc(phi0)

    x = TM_SCALE_FACTOR * n * (
        a
        + (1 - t + c) * a ** 3 / 6
        + (5 - 18 * t + t * t + 72 * c - 58 * _EP2) * a ** 5 / 120
    ) + TM_FALSE_EASTING
    y = TM_SCALE_FACTOR * (
        m - m0 + n * math.tan(phi) * (
            a ** 2 / 2
            + (5 - t + 9 * c + 4 * c * c) * a ** 4 / 24
            + (61 - 58 * t + t * t + 600 * c - 330 * _EP2) * a ** 6 / 720
        )
    ) + TM_FALSE_NORTHING

    return PlanarPoint(x=round(x), y=round(y))


def planar_to_wgs84(x: float, y: float) -> GeoPoint:
    """
    TM (x, y) back to WGS84 via pyproj.
    always_xy returns (lon, lat).
    """
    lon, lat = TRANSFORM_TM_TO_WGS84.transform(xx=x, yy=y)
    return GeoPoint(lat=lat, lng=lon)


def tm128_to_wgs84(mapx, mapy) -> Optional[GeoPoint]:
    """Naver mapx/mapy (경도*1e7, 위도*1e7) -> WGS84. 파싱 실패 시 None."""
    try:
        raw_x = int(str(mapx).strip())
        raw_y = int(str(mapy).strip())
    except (TypeError, ValueError):
        return None
    try:
        return GeoPoint(lat=raw_y / TM128_SCALE, lng=raw_x / TM128_SCALE)
    except pydantic.ValidationError:
        return None
