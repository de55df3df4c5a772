"""
Solflow API
Backend for the visual Solana workflow builder: stores workflow graphs and
proxies Solana RPC, Bags.fm and AI completion calls for the frontend.
"""

from dotenv import load_dotenv
load_dotenv()

import logging
import time
from contextlib import asynccontextmanager
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .errors import error_body, register_exception_handlers
from .logging_config import setup_logging
from .routers import ai, bags, health, nfts, payments, programs, rpc, tokens, transactions, workflows

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    logger.info(
        "Solflow API %s starting (env=%s, store=%s, ai=%s)",
        __version__, settings.app_env, settings.workflow_store, settings.ia_provider,
    )
    yield
    logger.info("Solflow API shutting down")


# ============================================================================
# App Configuration
# ============================================================================

app = FastAPI(
    title="Solflow API",
    version=__version__,
    description="Workflow storage and Solana / Bags / AI proxies for the visual workflow builder",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# ============================================================================
# Middleware
# ============================================================================

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


@app.middleware("http")
async def limit_body_size(request: Request, call_next):
    length = request.headers.get("content-length")
    if length and length.isdigit() and int(length) > settings.max_request_bytes:
        return JSONResponse(
            status_code=413,
            content=error_body("Request body too large", "PAYLOAD_TOO_LARGE"),
        )
    return await call_next(request)


@app.middleware("http")
async def request_context(request: Request, call_next):
    # Registered last, so it wraps every other middleware
    request_id = request.headers.get("x-request-id") or uuid4().hex
    started = time.perf_counter()
    response = await call_next(request)

    response.headers["X-Request-Id"] = request_id
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)

    logger.info(
        "%s %s %s %.1fms rid=%s",
        request.method, request.url.path, response.status_code,
        (time.perf_counter() - started) * 1000, request_id,
    )
    return response


# ============================================================================
# Routers
# ============================================================================

app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(workflows.router, prefix="/api", tags=["workflows"])
app.include_router(rpc.router, prefix="/api", tags=["rpc"])
app.include_router(tokens.router, prefix="/api", tags=["tokens"])
app.include_router(transactions.router, prefix="/api", tags=["transactions"])
app.include_router(programs.router, prefix="/api", tags=["programs"])
app.include_router(nfts.router, prefix="/api", tags=["nfts"])
app.include_router(payments.router, prefix="/api", tags=["payments"])
app.include_router(bags.router, prefix="/api", tags=["bags"])
app.include_router(ai.router, prefix="/api", tags=["ai"])


def run() -> None:
    uvicorn.run("solflow_api.main:app", host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
