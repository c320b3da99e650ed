# wloc/server.py
"""
FastAPI server exposing access point lookups as JSON.
"""

from typing import Any, Optional

from fastapi import FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from wloc.analysis.pipeline import LocatePipeline
from wloc.errors import InputError, WlocError
from wloc.transport.client import WlocClient
from wloc.transport.config import ServiceConfig
from wloc.utils.log import get_logger
from wloc.utils.validate import LocateRequest, LocateResult

logger = get_logger(__name__)

NO_STORE = {"Cache-Control": "no-store"}


def parse_boolean(value: Any) -> bool:
    """
    Lenient flag parsing: a bare `?all` counts as true.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"", "1", "true", "yes"}


def _result_response(result: LocateResult) -> JSONResponse:
    return JSONResponse(status_code=200, content=result.to_json_dict(), headers=NO_STORE)


def create_app(
    config: Optional[ServiceConfig] = None,
    client: Optional[WlocClient] = None,
) -> FastAPI:
    """
    Build a FastAPI instance bound to one upstream client.
    """
    app = FastAPI(title="wloc")
    app.state.pipeline = LocatePipeline(client or WlocClient(config or ServiceConfig.from_env()))

    @app.exception_handler(WlocError)
    async def wloc_error(request: Request, exc: WlocError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc,
                           extra={"reason": exc.reason})
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=NO_STORE)

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": "POST requests must use JSON (`application/json`) with `accessPoints` or `bssid`.",
                "reason": InputError.reason,
                "detail": jsonable_encoder(exc.errors()),
            },
            headers=NO_STORE,
        )

    @app.get("/api/status", response_class=JSONResponse)
    async def status() -> JSONResponse:
        return JSONResponse(status_code=200, content={"status": "ok"})

    @app.get("/api/locate", response_class=JSONResponse)
    def locate_one(
        request: Request,
        bssid: Optional[str] = None,
        all_: Optional[str] = Query(None, alias="all"),
    ) -> JSONResponse:
        """
        Look up a single BSSID given as a query string parameter.
        """
        if not bssid:
            raise InputError(
                "Provide `bssid` as a query string parameter or use POST JSON with `accessPoints`."
            )
        result = request.app.state.pipeline.run([(bssid, None)], parse_boolean(all_))
        return _result_response(result)

    @app.post("/api/locate", response_class=JSONResponse)
    def locate_many(
        request: Request,
        body: LocateRequest,
        all_: Optional[str] = Query(None, alias="all"),
    ) -> JSONResponse:
        """
        Look up one or more access points; `all` in the body wins over the
        query string.
        """
        include_all = parse_boolean(body.all) if body.all is not None else parse_boolean(all_)
        if body.access_points:
            points = [(p.bssid, p.signal) for p in body.access_points]
        elif body.bssid is not None:
            points = [(body.bssid, body.signal)]
        else:
            raise InputError("POST JSON payload must include `accessPoints` array with `bssid` values.")
        result = request.app.state.pipeline.run(points, include_all)
        return _result_response(result)

    return app
