# /buddy/routes/public.py

from datetime import datetime

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from prometheus_client import generate_latest

from buddy.config.settings import VERSION, settings
from buddy.services.ai_service import ai_service
from buddy.utils.dependencies import verify_metrics_access

# This file defines public-facing endpoints that do not require a caller
# identity: the root banner and health checks. The /metrics endpoint is
# protected by an API key when one is configured.

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Daily Buddy Assistant",
        "version": VERSION,
        "status": "operational",
        "environment": settings.environment,
    }


@router.get("/health", summary="Basic Health Check")
async def health_check():
    """Health check for load balancers; reports whether the oracle is configured."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow(),
        "oracle": "configured" if ai_service.available else "not_configured",
    }


@router.get("/health/live", summary="Liveness Probe")
async def liveness_check():
    """Kubernetes/Docker liveness probe."""
    return {"status": "alive"}


@router.get("/metrics", tags=["Monitoring"])
async def metrics(request: Request, _: bool = Depends(verify_metrics_access)):
    """Prometheus metrics endpoint."""
    return PlainTextResponse(generate_latest(), media_type="text/plain")
