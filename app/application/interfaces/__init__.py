"""Application interfaces (ports): store and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.services import IIdentityProvider
from app.application.interfaces.stores import IBlobStore, IDocumentStore

__all__ = [
    "IBlobStore",
    "IDocumentStore",
    "IIdentityProvider",
]
