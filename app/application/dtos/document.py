"""DTOs for document store reads (no dependency on a specific backend)."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class StoredDocument:
    """Snapshot of one stored document: id (last path segment), full path, and fields."""

    id: str
    path: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.data)
