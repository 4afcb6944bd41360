"""HTTP middleware: request ID and correlation ID.

Applied in main app; order matters (last added = outermost).
Import and use from app.main.
"""

from app.middleware.request_context import (
    CorrelationIDMiddleware,
    RequestContextLogFilter,
    RequestIDMiddleware,
)

__all__ = [
    "CorrelationIDMiddleware",
    "RequestContextLogFilter",
    "RequestIDMiddleware",
]
