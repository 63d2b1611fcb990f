"""Account use cases."""

from app.application.use_cases.accounts.account_query import AccountQueryService
from app.application.use_cases.accounts.profile_image import ProfileImageService

__all__ = ["AccountQueryService", "ProfileImageService"]
