# /buddy/main.py

import os
import time
import uuid
import uvicorn
import asyncio
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from buddy.config.settings import VERSION, settings
from buddy.utils.lifecycle import lifespan
from buddy.utils.logging import bind_request_context
from buddy.utils.metrics import response_time_histogram
from buddy.utils.rate_limiter import limiter
from buddy.utils.request_utils import get_remote_address
from buddy.routes import assistant, public

logger = logging.getLogger(__name__)

_docs_enabled = settings.environment != "production"

app = FastAPI(
    title="Daily Buddy Assistant",
    version=VERSION,
    description="Turns Hindi, English and Hinglish messages into task, alarm, reminder and note actions.",
    lifespan=lifespan,
    openapi_url=f"/api/{settings.api_version}/openapi.json" if _docs_enabled else None,
    docs_url=f"/api/{settings.api_version}/docs" if _docs_enabled else None,
    redoc_url=f"/api/{settings.api_version}/redoc" if _docs_enabled else None,
)

# --- Rate Limiting ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Middleware (the last one added runs first) ---
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)

if settings.environment != "test":
    allowed_hosts = [host.strip() for host in settings.allowed_hosts.split(",") if host.strip()]
    if allowed_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=allowed_hosts)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin for origin in settings.cors_allowed_origins if origin],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Process-Time"],
)


@app.middleware("http")
async def timeout_middleware(request: Request, call_next):
    try:
        return await asyncio.wait_for(call_next(request), timeout=settings.request_timeout_seconds)
    except asyncio.TimeoutError:
        logger.error(f"Request to {request.url.path} exceeded {settings.request_timeout_seconds}s")
        return JSONResponse({"detail": "Request timed out"}, status_code=504)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    # The browser client may send its own id so that its logs and ours line up.
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    bind_request_context(request_id=request_id, path=request.url.path, client=get_remote_address(request))

    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = time.perf_counter() - start_time

    route = request.scope.get("route")
    endpoint = route.path if route is not None else "unmatched"
    response_time_histogram.labels(endpoint=endpoint).observe(process_time)
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    return response


# --- API Routers ---
app.include_router(public.router)
app.include_router(assistant.router, prefix=f"/api/{settings.api_version}")

# --- Main Entry Point for Uvicorn (for local development) ---
if __name__ == "__main__":
    uvicorn.run(
        "buddy.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.environment == "development",
        workers=settings.workers if settings.environment == "production" else 1,
    )
