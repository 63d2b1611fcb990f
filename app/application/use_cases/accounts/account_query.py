"""Account document reads (users/{uid})."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.stores import IDocumentStore
from app.domain.exceptions import ResourceNotFoundException
from app.shared.collections import COLLECTION_USERS, user_path


class AccountQueryService:
    """Reads account documents."""

    def __init__(self, documents: IDocumentStore) -> None:
        self.documents = documents

    async def get_account(self, uid: str) -> dict[str, Any]:
        """Return the account's fields. Raises ResourceNotFoundException if absent."""
        doc = await self.documents.get_document(user_path(uid))
        if doc is None:
            raise ResourceNotFoundException("user", uid, "User not found")
        return doc.to_dict()

    async def get_first_name(self, uid: str) -> str:
        account = await self.get_account(uid)
        first_name = account.get("firstName")
        if not first_name:
            raise ResourceNotFoundException("user", uid, "User first name not found")
        return first_name

    async def list_accounts(self) -> list[dict[str, Any]]:
        """Every account as {id, ...fields}, sorted by id."""
        docs = await self.documents.list_documents(COLLECTION_USERS)
        return [{"id": d.id, **d.data} for d in docs]
