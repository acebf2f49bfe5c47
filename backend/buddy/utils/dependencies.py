# /buddy/utils/dependencies.py

import secrets
from datetime import datetime
from typing import Optional

import structlog
from fastapi import HTTPException, Request

from buddy.config.settings import settings
from buddy.services.date_service import reference_now
from buddy.utils.request_utils import get_remote_address

log = structlog.get_logger(__name__)


async def verify_metrics_access(request: Request):
    if settings.api_key:
        provided_key = request.headers.get("X-API-KEY")
        if not (provided_key and secrets.compare_digest(provided_key, settings.api_key)):
            log.warning("Rejected metrics request.", client=get_remote_address(request))
            raise HTTPException(status_code=403, detail="Invalid or missing API key")


def caller_clock(current_date: Optional[str], current_time: Optional[str]) -> datetime:
    """
    The caller's wall clock. Relative dates and times resolve against this,
    never against the server's timezone; gaps fall back to the server clock.
    """
    if not current_date or not current_time:
        log.debug("Request without a full caller clock, filling from server time.",
                  current_date=current_date, current_time=current_time)
    return reference_now(current_date, current_time)
