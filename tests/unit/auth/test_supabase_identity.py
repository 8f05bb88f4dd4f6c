# tests/unit/auth/test_supabase_identity.py — v1
"""Tests for auth/supabase_identity.py."""

from __future__ import annotations

import httpx
import pytest

from accessibilityhub.auth.supabase_identity import SupabaseIdentityProvider


def _provider(handler, access_token: str | None = "jwt", **kwargs) -> SupabaseIdentityProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseIdentityProvider(
        "https://proj.supabase.co", "anon", access_token=access_token, client=client, **kwargs
    )


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_user(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/auth/v1/user"
            assert request.headers["authorization"] == "Bearer jwt"
            return httpx.Response(
                200, json={"id": "abc", "email": "a@b.c", "user_metadata": {"name": "A"}}
            )

        user = await _provider(handler).current_user()
        assert (user.id, user.email, user.metadata) == ("abc", "a@b.c", {"name": "A"})

    @pytest.mark.asyncio
    async def test_signed_out(self):
        provider = _provider(lambda request: pytest.fail("no request expected"), access_token=None)
        assert await provider.current_user() is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403, 500])
    async def test_rejected(self, status):
        assert await _provider(lambda request: httpx.Response(status)).current_user() is None

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        assert await _provider(handler).current_user() is None


class TestSignInUrl:
    def test_with_redirect(self):
        provider = _provider(lambda r: httpx.Response(200), redirect_to="http://localhost:3000/cb")
        url = httpx.URL(provider.sign_in_url("github"))
        assert url.path == "/auth/v1/authorize"
        assert url.params["provider"] == "github"
        assert url.params["redirect_to"] == "http://localhost:3000/cb"

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            _provider(lambda r: httpx.Response(200)).sign_in_url("myspace")
