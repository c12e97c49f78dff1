from typing import Any

from fastapi.responses import JSONResponse, Response

from sbizproxy.shared.constants import CORS_HEADERS


def json_response(body: Any, status_code: int = 200) -> JSONResponse:
    """CORS 헤더가 항상 포함된 JSON 응답"""
    return JSONResponse(content=body, status_code=status_code, headers=CORS_HEADERS)


def preflight_response() -> Response:
    return Response(content=b"", status_code=200, headers=CORS_HEADERS)
