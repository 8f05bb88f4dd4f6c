# src/auth/base_identity_provider.py — v1
"""Abstract identity provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal

from accessibilityhub.core.models import UserIdentity

OAuthProvider = Literal["google", "github"]


class BaseIdentityProvider(ABC):
    """Source of the signed-in user for quota-gated processing."""

    @abstractmethod
    async def current_user(self) -> UserIdentity | None:
        """Return the signed-in user, or None when there is no valid session."""

    @abstractmethod
    def sign_in_url(self, provider: OAuthProvider) -> str:
        """Return the URL that starts an OAuth sign-in with ``provider``."""

    async def close(self) -> None:
        """Release network resources (no-op by default)."""
