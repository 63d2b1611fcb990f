"""RegistrationService workflow and compensation with mocked backends."""

from unittest.mock import AsyncMock, call

import pytest

from app.application.dtos.account import RegistrationCommand
from app.application.services.registration_service import RegistrationService
from app.application.services.saga import Saga
from app.domain.exceptions import RegistrationFailedException
from app.domain.value_objects.access_policy import AccessPolicy


def _command(is_admin: bool = False) -> RegistrationCommand:
    return RegistrationCommand(
        first_name="Ada",
        last_name="Lovelace",
        birthday="1815-12-10",
        email="ada@example.com",
        password="secret-pass",
        is_admin=is_admin,
    )


@pytest.fixture
def backends():
    identity = AsyncMock()
    identity.create_user = AsyncMock(return_value="uid-1")
    documents = AsyncMock()
    blobs = AsyncMock()
    return identity, documents, blobs


async def test_register_regular_user(backends) -> None:
    identity, documents, blobs = backends
    result = await RegistrationService(identity, documents, blobs).register(_command())

    assert result.user_id == "uid-1"
    assert result.message == "User registered successfully"
    identity.create_user.assert_awaited_once_with("ada@example.com", "secret-pass")
    documents.set_document.assert_awaited_once()
    path, fields = documents.set_document.await_args.args
    assert path == "users/uid-1"
    assert fields["firstName"] == "Ada"
    assert "password" not in fields
    blobs.create_namespace.assert_not_awaited()
    identity.set_custom_claims.assert_not_awaited()


async def test_register_admin_provisions_namespace_policy_and_claim(backends) -> None:
    identity, documents, blobs = backends
    await RegistrationService(identity, documents, blobs).register(_command(is_admin=True))

    blobs.create_namespace.assert_awaited_once_with("admin/uid-1/")
    blobs.set_access_policy.assert_awaited_once_with(
        "admin/uid-1/", AccessPolicy.admin_only("admin/uid-1/")
    )
    identity.set_custom_claims.assert_awaited_once_with("uid-1", {"admin": True})


async def test_identity_failure_has_nothing_to_undo(backends) -> None:
    identity, documents, blobs = backends
    identity.create_user.side_effect = RuntimeError("EMAIL_EXISTS")

    with pytest.raises(RegistrationFailedException) as exc_info:
        await RegistrationService(identity, documents, blobs).register(_command())

    assert exc_info.value.details == {"step": "create_identity"}
    identity.delete_user.assert_not_awaited()
    documents.set_document.assert_not_awaited()


async def test_claim_failure_undoes_every_completed_step(backends) -> None:
    identity, documents, blobs = backends
    identity.set_custom_claims.side_effect = RuntimeError("quota")

    with pytest.raises(RegistrationFailedException) as exc_info:
        await RegistrationService(identity, documents, blobs).register(_command(is_admin=True))

    assert exc_info.value.details == {"step": "set_admin_claim"}
    blobs.delete_namespace.assert_awaited_once_with("admin/uid-1/")
    documents.delete_document.assert_awaited_once_with("users/uid-1")
    identity.delete_user.assert_awaited_once_with("uid-1")


async def test_document_failure_deletes_identity(backends) -> None:
    identity, documents, blobs = backends
    documents.set_document.side_effect = RuntimeError("firestore down")

    with pytest.raises(RegistrationFailedException):
        await RegistrationService(identity, documents, blobs).register(_command(is_admin=True))

    identity.delete_user.assert_awaited_once_with("uid-1")
    documents.delete_document.assert_not_awaited()
    blobs.create_namespace.assert_not_awaited()


async def test_saga_compensates_newest_first_and_continues_after_failure() -> None:
    order = AsyncMock()
    saga = Saga("test")

    async def broken() -> None:
        raise RuntimeError("undo failed")

    saga.add_compensation("first", lambda: order("first"))
    saga.add_compensation("second", broken)
    saga.add_compensation("third", lambda: order("third"))
    assert saga.completed_steps == ["first", "second", "third"]

    failed = await saga.compensate()

    assert failed == ["second"]
    assert order.await_args_list == [call("third"), call("first")]
    assert saga.completed_steps == []
