"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules (e.g. auth) can use
the same instance without circular imports. Limit strings come from settings
and are resolved per request, so tests can change them via env.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def _register_limit() -> str:
    return get_settings().rate_limit_register


# Registration is public and creates a tenant per call.
limit_register = limiter.limit(_register_limit)
