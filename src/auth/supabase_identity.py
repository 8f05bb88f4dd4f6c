# src/auth/supabase_identity.py — v1
"""Supabase Auth (GoTrue) identity provider over httpx."""

from __future__ import annotations

import logging

import httpx

from accessibilityhub.auth.base_identity_provider import BaseIdentityProvider, OAuthProvider
from accessibilityhub.core.models import UserIdentity

logger = logging.getLogger(__name__)

_OAUTH_PROVIDERS = ("google", "github")


class SupabaseIdentityProvider(BaseIdentityProvider):
    """Resolves the session access token to a user via ``GET /auth/v1/user``.

    Args:
        url: Supabase project URL.
        api_key: Project (anon) key.
        access_token: Session access token; None means signed out.
        redirect_to: OAuth callback URL used by sign_in_url().
        client: Pre-built httpx.AsyncClient (tests inject a MockTransport).
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        access_token: str | None = None,
        redirect_to: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base = url.rstrip("/") + "/auth/v1"
        self._api_key = api_key
        self._access_token = access_token
        self._redirect_to = redirect_to
        self._timeout = timeout
        self.__client = client

    @property
    def _client(self) -> httpx.AsyncClient:
        if self.__client is None:
            self.__client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self.__client

    async def current_user(self) -> UserIdentity | None:
        if not self._access_token:
            return None
        headers = {"apikey": self._api_key, "Authorization": f"Bearer {self._access_token}"}
        try:
            response = await self._client.get(f"{self._base}/user", headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Session lookup failed: %s", e)
            return None
        if response.status_code in (401, 403):
            logger.info("Session token rejected by identity provider")
            return None
        if response.is_error:
            logger.warning("Session lookup returned HTTP %d", response.status_code)
            return None

        body = response.json()
        return UserIdentity(
            id=str(body["id"]),
            email=body.get("email") or "",
            metadata=body.get("user_metadata") or {},
        )

    def sign_in_url(self, provider: OAuthProvider) -> str:
        if provider not in _OAUTH_PROVIDERS:
            raise ValueError(f"Unsupported OAuth provider: {provider!r}")
        params = {"provider": provider}
        if self._redirect_to:
            params["redirect_to"] = self._redirect_to
        return str(httpx.URL(f"{self._base}/authorize", params=params))

    async def close(self) -> None:
        if self.__client is not None:
            await self.__client.aclose()
            self.__client = None
