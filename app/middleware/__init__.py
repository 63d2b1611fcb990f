"""Raw ASGI middleware wired by create_app().

Outermost first: timeout (504), body size limit (413), request ID.
"""

from app.middleware.request_id import RequestIDMiddleware
from app.middleware.request_size_limit import RequestSizeLimitMiddleware
from app.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "TimeoutMiddleware",
]
