"""Domain value objects and shared value types."""

from app.domain.value_objects.access_policy import (
    AccessPolicy,
    normalize_namespace,
    rules_path,
)

__all__ = [
    "AccessPolicy",
    "normalize_namespace",
    "rules_path",
]
