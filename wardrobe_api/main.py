import logging
import time
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from fastapi.routing import APIRouter
from pydantic import ValidationError
from starlette.exceptions import HTTPException

from .config import Settings
from .handler import GarmentAnalyzer, Success
from .limiter import RateLimiter
from .logging_setup import configure_logging
from .schemas import AnalyzeRequest, AnalyzeResponse
from .security import make_token_verifier


logger = logging.getLogger("api")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _json(status_code: int, body: AnalyzeResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True), headers=CORS_HEADERS)


def create_app(settings: Optional[Settings] = None, analyzer: Optional[GarmentAnalyzer] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    analyzer = analyzer or GarmentAnalyzer.from_settings(settings)
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Wardrobe Garment Analysis API", version="1.0.0")
    app.state.settings = settings
    app.state.analyzer = analyzer
    app.state.limiter = RateLimiter(settings.RATE_LIMIT_PER_MIN, settings.RATE_LIMIT_BURST)

    router = APIRouter(prefix=settings.API_PREFIX)
    verify_token = make_token_verifier(settings)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return _json(exc.status_code, AnalyzeResponse(success=False, error=str(exc.detail)))

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        resp = await call_next(request)
        resp.headers.update(CORS_HEADERS)
        return resp

    @app.middleware("http")
    async def log_analysis_traffic(request: Request, call_next):
        started = time.perf_counter()
        status = 500
        try:
            resp = await call_next(request)
            status = resp.status_code
            return resp
        finally:
            level = logging.WARNING if status >= 400 else logging.INFO
            logger.log(
                level,
                "http_request",
                extra={
                    "route": request.url.path,
                    "verb": request.method,
                    "status": status,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 1),
                    "client": request.client.host if request.client else None,
                },
            )

    @router.get("/health", summary="Liveness probe")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @router.options("/analyze-garment", include_in_schema=False)
    def analyze_preflight() -> Response:
        return Response(headers=CORS_HEADERS)

    @router.post("/analyze-garment", response_model=AnalyzeResponse)
    async def analyze_garment(request: Request, _claims: Any = Depends(verify_token)):
        app.state.limiter(request)
        try:
            payload = await request.json()
            body = AnalyzeRequest.model_validate(payload)
        except (ValueError, ValidationError):
            return _json(400, AnalyzeResponse(success=False, error="Invalid request body"))

        outcome = await run_in_threadpool(app.state.analyzer.analyze, body)
        if isinstance(outcome, Success):
            return _json(200, AnalyzeResponse(success=True, data=outcome.analysis.to_payload()))
        return _json(outcome.status_code, AnalyzeResponse(success=False, error=outcome.reason, data=outcome.partial_data))

    app.include_router(router)
    return app


app = create_app()
