"""Blob namespace access policy.

A policy scopes read/write access to every object under a namespace prefix
(e.g. 'admin/<uid>/'). It is a predicate over (path, requester claims, entry
metadata, action) and serializes to a JSON rules document that the blob store
persists next to the objects it governs.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

RULES_VERSION = "2"
ACTIONS = ("read", "write")


def normalize_namespace(namespace: str) -> str:
    """Return namespace with no leading slash and exactly one trailing slash.

    Raises:
        ValueError: If namespace is empty or contains '..' segments.
    """
    ns = namespace.strip().strip("/")
    if not ns:
        raise ValueError("Namespace must be a non-empty path prefix")
    if any(part in ("", ".", "..") for part in ns.split("/")):
        raise ValueError(f"Invalid namespace: {namespace!r}")
    return f"{ns}/"


@dataclass(frozen=True)
class AccessPolicy:
    """Claim-gated access rule for a blob namespace.

    Access is granted when the path lies inside the namespace, the requester
    carries claim_name == claim_value, and (for existing entries) the entry's
    metadata has metadata_key set to "true".
    """

    namespace: str
    claim_name: str = "admin"
    claim_value: Any = True
    metadata_key: str = "admin"
    actions: tuple[str, ...] = ACTIONS

    def __post_init__(self) -> None:
        object.__setattr__(self, "namespace", normalize_namespace(self.namespace))
        unknown = set(self.actions) - set(ACTIONS)
        if unknown:
            raise ValueError(f"Unknown policy actions: {sorted(unknown)}")

    @classmethod
    def admin_only(cls, namespace: str) -> "AccessPolicy":
        """Policy that admits only requesters with admin=true to namespace."""
        return cls(namespace=namespace)

    def covers(self, path: str) -> bool:
        """Return True if path is inside this policy's namespace."""
        return path.lstrip("/").startswith(self.namespace)

    def allows(
        self,
        path: str,
        claims: Mapping[str, Any] | None,
        action: str = "read",
        entry_metadata: Mapping[str, str] | None = None,
    ) -> bool:
        """Evaluate the rule for one request.

        Args:
            path: Object path being accessed.
            claims: Requester's token claims (None for anonymous).
            action: 'read' or 'write'.
            entry_metadata: Metadata of the existing entry; None when writing a
                new object.

        Returns:
            True when every condition of the policy holds.
        """
        if action not in self.actions or not self.covers(path):
            return False
        if not claims or claims.get(self.claim_name) != self.claim_value:
            return False
        if entry_metadata is None:
            return action == "write"
        return str(entry_metadata.get(self.metadata_key, "")).lower() == "true"

    def to_rules_document(self) -> dict[str, Any]:
        """Return JSON-serializable rules document."""
        condition = (
            f"request.auth.token.{self.claim_name} == {str(self.claim_value).lower()}"
            f" && resource.metadata.{self.metadata_key} == 'true'"
        )
        return {
            "rulesVersion": RULES_VERSION,
            "namespace": self.namespace,
            "claim": {"name": self.claim_name, "value": self.claim_value},
            "metadataKey": self.metadata_key,
            "rules": {
                f".{action}": condition for action in self.actions
            },
        }

    @classmethod
    def from_rules_document(cls, doc: Mapping[str, Any]) -> "AccessPolicy":
        """Rebuild a policy from to_rules_document() output."""
        claim = doc.get("claim") or {}
        actions = tuple(
            key.lstrip(".") for key in (doc.get("rules") or {}) if key.lstrip(".") in ACTIONS
        )
        return cls(
            namespace=doc["namespace"],
            claim_name=claim.get("name", "admin"),
            claim_value=claim.get("value", True),
            metadata_key=doc.get("metadataKey", "admin"),
            actions=actions or ACTIONS,
        )


def rules_path(namespace: str) -> str:
    """Object path where the rules document for namespace is stored."""
    return f".settings/rules/{normalize_namespace(namespace).rstrip('/')}.json"
