"""Shared utilities: datetime and generators."""

from app.shared.utils.datetime import today_utc, utc_now
from app.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "today_utc",
    "utc_now",
]
