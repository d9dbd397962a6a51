"""FastAPI application entry point.

Startup only logs configuration state; the credential is read per request
and handed to the core, so nothing is initialized ahead of time.
"""

from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from gateway.api.routes import router
from gateway.core.config import load_settings
from gateway.core.error_translator import redact

load_dotenv()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = load_settings()
    logger.info("startup.complete", base_url=settings.base_url,
                credential_configured=settings.credential_configured)
    if not settings.credential_configured:
        logger.warning("startup.missing_credential", hint="Set DEEPSEEK_API_KEY in .env")
    yield
    logger.info("shutdown.complete")


app = FastAPI(
    title="DeepSeek Chat Gateway",
    description="Stateless single-turn chat gateway for the DeepSeek API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=load_settings().cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    """Last-resort JSON 500 for anything the routes did not translate."""
    logger.error("request.unhandled_error", path=request.url.path, error=type(exc).__name__)
    settings = load_settings()

    # Runs outside CORSMiddleware, so the allow-origin header is set here
    headers = {}
    origin = request.headers.get("origin")
    if "*" in settings.cors_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin in settings.cors_origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"

    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "message": redact(str(exc), settings.api_key)},
        headers=headers,
    )


app.include_router(router)
