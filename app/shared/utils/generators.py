"""Identifier and blob key generators.

Document ids and blob keys are CUID2 strings: collision-resistant and safe in
both Firestore document ids and object keys.
"""

import mimetypes
from pathlib import PurePosixPath

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

_MAX_EXTENSION_LENGTH = 10


def generate_cuid() -> str:
    """Return a new CUID2 string."""
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def blob_extension(filename: str | None, content_type: str | None) -> str:
    """Lower-cased extension from the filename, else guessed from content type."""
    suffix = PurePosixPath(filename or "").suffix.lower()
    if suffix and len(suffix) <= _MAX_EXTENSION_LENGTH:
        return suffix
    return mimetypes.guess_extension(content_type or "") or ""


def generate_blob_key(
    prefix: str,
    owner: str,
    filename: str | None = None,
    content_type: str | None = None,
) -> str:
    """Unique object key '{prefix}/{owner}/{cuid}{ext}'.

    The client filename only contributes its extension, so two uploads of
    'photo.png' never overwrite each other.
    """
    return f"{prefix}/{owner}/{generate_cuid()}{blob_extension(filename, content_type)}"
