"""Shared helpers: request context, collection paths, telemetry and utilities.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.context import (
    get_current_uid,
    get_request_id,
    set_current_uid,
    set_request_id,
)
from app.shared.utils import ensure_utc, generate_cuid, utc_now

__all__ = [
    "set_request_id",
    "get_request_id",
    "set_current_uid",
    "get_current_uid",
    "generate_cuid",
    "utc_now",
    "ensure_utc",
]
