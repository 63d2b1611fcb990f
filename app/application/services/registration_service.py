"""Account provisioning: identity, account document and (for admins) storage namespace."""

from __future__ import annotations

import logging

from app.application.dtos.account import RegistrationCommand, RegistrationResult
from app.application.interfaces.services import IIdentityProvider
from app.application.interfaces.stores import IBlobStore, IDocumentStore
from app.application.services.saga import Saga
from app.domain.exceptions import RegistrationFailedException
from app.domain.value_objects.access_policy import AccessPolicy
from app.shared.collections import user_path

logger = logging.getLogger(__name__)

ADMIN_NAMESPACE_ROOT = "admin"
ADMIN_CLAIMS = {"admin": True}


def admin_namespace(uid: str) -> str:
    return f"{ADMIN_NAMESPACE_ROOT}/{uid}/"


class RegistrationService:
    """Runs the registration workflow as a saga.

    Steps: create identity, write users/{uid}, and for admins create the
    admin/{uid}/ namespace, attach the admin-only policy and set the admin
    claim. If any step fails the completed ones are undone in reverse order
    and RegistrationFailedException is raised.
    """

    def __init__(
        self,
        identity: IIdentityProvider,
        documents: IDocumentStore,
        blobs: IBlobStore,
    ) -> None:
        self.identity = identity
        self.documents = documents
        self.blobs = blobs

    async def register(self, command: RegistrationCommand) -> RegistrationResult:
        saga = Saga("register")
        step = "create_identity"
        try:
            uid = await self.identity.create_user(command.email, command.password)
            saga.add_compensation(step, lambda: self.identity.delete_user(uid))

            step = "write_account"
            path = user_path(uid)
            await self.documents.set_document(path, command.account_fields())
            saga.add_compensation(step, lambda: self.documents.delete_document(path))

            if command.is_admin:
                namespace = admin_namespace(uid)
                step = "create_namespace"
                await self.blobs.create_namespace(namespace)
                saga.add_compensation(step, lambda: self.blobs.delete_namespace(namespace))

                step = "set_access_policy"
                await self.blobs.set_access_policy(
                    namespace, AccessPolicy.admin_only(namespace)
                )

                step = "set_admin_claim"
                await self.identity.set_custom_claims(uid, dict(ADMIN_CLAIMS))
        except Exception as e:
            logger.error(
                "Registration failed at %s after %s: %s",
                step,
                saga.completed_steps,
                e,
            )
            failed = await saga.compensate()
            if failed:
                logger.error("Registration left partial state; failed undo: %s", failed)
            raise RegistrationFailedException(step) from e

        logger.info("Registered user %s (admin=%s)", uid, command.is_admin)
        return RegistrationResult(user_id=uid)
