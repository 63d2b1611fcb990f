"""Document-store path helpers.

Paths alternate collection and document segments: 'users' is a collection,
'users/abc' a document, 'users/abc/projects' a sub-collection.
"""


def split_path(path: str) -> list[str]:
    """Split a slash-separated path; raises ValueError on empty segments."""
    segments = path.strip("/").split("/")
    if not path.strip("/") or any(not s or s in (".", "..") for s in segments):
        raise ValueError(f"Invalid document store path: {path!r}")
    return segments


def document_path(path: str) -> str:
    """Validate and normalize a document path (even number of segments)."""
    segments = split_path(path)
    if len(segments) % 2 != 0:
        raise ValueError(f"Not a document path: {path!r}")
    return "/".join(segments)


def collection_path(path: str) -> str:
    """Validate and normalize a collection path (odd number of segments)."""
    segments = split_path(path)
    if len(segments) % 2 != 1:
        raise ValueError(f"Not a collection path: {path!r}")
    return "/".join(segments)

