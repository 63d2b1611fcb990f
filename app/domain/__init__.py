"""Domain layer: value objects and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.exceptions import (
    ForbiddenException,
    GatewayException,
    RegistrationFailedException,
    ResourceNotFoundException,
    UnauthorizedException,
    UpstreamException,
    ValidationException,
)
from app.domain.value_objects import AccessPolicy

__all__ = [
    # Exceptions
    "ForbiddenException",
    "GatewayException",
    "RegistrationFailedException",
    "ResourceNotFoundException",
    "UnauthorizedException",
    "UpstreamException",
    "ValidationException",
    # Value objects
    "AccessPolicy",
]
