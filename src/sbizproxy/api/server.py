from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from sbizproxy import __version__
from sbizproxy.api.local_search import router as local_search_router
from sbizproxy.api.responses import json_response, preflight_response
from sbizproxy.api.sbiz_proxy import router as sbiz_proxy_router

app = FastAPI(title="sbiz-proxy", version=__version__)

app.include_router(sbiz_proxy_router)
app.include_router(local_search_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # 404 / 405 도 동일한 JSON + CORS 형태로
    return json_response({"success": False, "error": str(exc.detail)}, exc.status_code)


@app.options("/{full_path:path}")
async def preflight(full_path: str):
    """CORS pre-flight: 업스트림 호출 없이 빈 200"""
    return preflight_response()


@app.get("/health")
def health_check():
    return json_response({"status": "ok", "version": __version__})
