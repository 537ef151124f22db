from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from aether.dependencies import get_current_identity, get_vault_service


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.mark.asyncio
async def test_no_token_means_local_vault() -> None:
    assert await get_current_identity(credentials=None, client=MagicMock()) is None


@pytest.mark.asyncio
async def test_token_ignored_when_cloud_disabled() -> None:
    assert await get_current_identity(credentials=_credentials("a.b.c"), client=None) is None


@pytest.mark.asyncio
async def test_valid_token_returns_identity() -> None:
    client = MagicMock()
    client.auth.get_user.return_value = SimpleNamespace(user=SimpleNamespace(id="u-42", email="me@example.com"))

    identity = await get_current_identity(credentials=_credentials("a.b.c"), client=client)

    assert identity is not None
    assert identity.id == "u-42"
    assert identity.email == "me@example.com"
    assert identity.access_token == "a.b.c"
    client.auth.get_user.assert_called_once_with("a.b.c")


@pytest.mark.asyncio
async def test_malformed_token_is_rejected() -> None:
    with pytest.raises(HTTPException) as exc:
        await get_current_identity(credentials=_credentials("not-a-jwt"), client=MagicMock())

    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_is_rejected() -> None:
    client = MagicMock()
    client.auth.get_user.side_effect = RuntimeError("JWT expired")

    with pytest.raises(HTTPException) as exc:
        await get_current_identity(credentials=_credentials("a.b.c"), client=client)

    assert exc.value.status_code == 401


def test_vault_service_routes_by_identity(local_repo, supabase_client, identity) -> None:
    signed_in = get_vault_service(local=local_repo, client=supabase_client, identity=identity)
    signed_out = get_vault_service(local=local_repo, client=supabase_client, identity=None)
    no_cloud = get_vault_service(local=local_repo, client=None, identity=identity)

    assert signed_in.is_cloud is True
    assert signed_out.is_cloud is False
    assert no_cloud.is_cloud is False
