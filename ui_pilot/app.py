"""
ui-pilot service
Main application entry point
"""

from contextlib import asynccontextmanager
from time import perf_counter

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ui_pilot import __version__
from ui_pilot.api.routers import agent_router, capture_router, status_router
from ui_pilot.config import get_config, load_ai_config
from ui_pilot.exceptions import UIPilotError
from ui_pilot.utils.logger import setup_logger

config = get_config()
logger = setup_logger(__name__, config.api.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the HTTP client shared by every model call"""
    ai = load_ai_config()
    logger.info("[BOOT] Starting ui-pilot...")
    logger.info(f"[BOOT] Vision model: {ai.vision_model}")
    logger.info(f"[BOOT] Chat model: {ai.chat_model}")
    if not ai.binding_configured:
        logger.warning("[BOOT] AI binding is not configured; model endpoints will return 503")

    app.state.http_client = httpx.AsyncClient(timeout=ai.timeout_seconds)
    try:
        yield
    finally:
        logger.info("[SHUTDOWN] Closing HTTP client...")
        await app.state.http_client.aclose()
        logger.info("[SHUTDOWN] ui-pilot stopped")


app = FastAPI(
    title="ui-pilot",
    description="Screenshot capture planning and chat agent backed by Workers AI",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_latency(request: Request, call_next):
    """Basic latency logging middleware."""
    start = perf_counter()
    try:
        return await call_next(request)
    finally:
        logger.info(
            "[HTTP] %s %s %0.3fs", request.method, request.url.path, perf_counter() - start
        )


@app.exception_handler(UIPilotError)
async def ui_pilot_error_handler(_: Request, exc: UIPilotError):
    """Uniform error response for service exceptions; details stay in the logs."""
    logger.error(f"[ERR] {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.public_message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_: Request, exc: StarletteHTTPException):
    # Unmatched routes and methods
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not found", status_code=404)
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(_: Request, exc: Exception):
    logger.error(f"[ERR] Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": "Internal server error occurred"},
    )


app.include_router(status_router.router, tags=["Status"])
app.include_router(capture_router.router, tags=["Capture"])
app.include_router(agent_router.router, prefix="/agents", tags=["Agents"])


def main():
    import uvicorn

    uvicorn.run(
        "ui_pilot.app:app",
        host=config.api.host,
        port=config.api.port,
        reload=config.api.debug,
        log_level=config.api.log_level.lower(),
    )


if __name__ == "__main__":
    main()
