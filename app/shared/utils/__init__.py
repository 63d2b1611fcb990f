"""Shared utilities: datetime, generators, document paths."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid
from app.shared.utils.paths import collection_path, document_path, split_path

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "collection_path",
    "document_path",
    "split_path",
]
