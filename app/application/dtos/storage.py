"""DTOs for blob storage."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ObjectRef:
    """Reference to a stored blob (returned by put_object)."""

    path: str
    size: int
    checksum: str
    content_type: str
