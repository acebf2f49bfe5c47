# /buddy/utils/rate_limiter.py

from slowapi import Limiter
from buddy.utils.request_utils import get_remote_address
from buddy.config.settings import settings

# Shared limiter instance; main registers it on app.state and the assistant
# routes decorate their oracle-backed endpoints with it.

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
    enabled=settings.environment != "test",
)

# Oracle-backed endpoints get a tighter budget than template-rendered ones.
ORACLE_LIMIT = f"{max(1, settings.rate_limit_per_minute // 2)}/minute"
