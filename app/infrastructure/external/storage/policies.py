"""Serialization of namespace access policies stored beside blobs."""

import hashlib
import json

from app.domain.value_objects.access_policy import AccessPolicy
from app.infrastructure.exceptions import StoragePolicyError

POLICY_CONTENT_TYPE = "application/json"


def encode_policy(policy: AccessPolicy) -> bytes:
    """Return the rules document for policy as UTF-8 JSON."""
    return json.dumps(policy.to_rules_document(), indent=2, sort_keys=True).encode("utf-8")


def decode_policy(namespace: str, raw: bytes) -> AccessPolicy:
    """Parse a stored rules document. Raises StoragePolicyError if it is corrupt."""
    try:
        return AccessPolicy.from_rules_document(json.loads(raw.decode("utf-8")))
    except (ValueError, KeyError, TypeError) as e:
        raise StoragePolicyError(namespace, f"Corrupt rules document: {e}") from e


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
