"""Supabase Auth implementation of IdentityProvider."""

import os
from collections.abc import Callable
from http import HTTPStatus

import requests
from aws_lambda_powertools import Logger

from core.models.image import CurrentUser
from core.repositories.identity_repository import IdentityProvider
from core.utils.constants import (
    AUTH_REQUEST_TIMEOUT_SECONDS,
    AUTH_USER_PATH,
    ENV_SUPABASE_ANON_KEY,
    ENV_SUPABASE_URL,
)

logger = Logger(UTC=True)

AccessTokenSource = Callable[[], str | None]


class SupabaseIdentityProvider(IdentityProvider):
    """Resolves the signed-in user by asking Supabase Auth about a session token.

    The access token is read through `access_token` on every call so that a
    refreshed session is picked up without rebuilding the provider.
    """

    def __init__(
        self,
        access_token: AccessTokenSource,
        *,
        root_url: str | None = None,
        api_key: str | None = None,
        timeout: float = AUTH_REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        root = root_url or os.getenv(ENV_SUPABASE_URL)
        if not root:
            raise RuntimeError(f"{ENV_SUPABASE_URL} environment variable is not set")

        self._user_url = f"{root.rstrip('/')}{AUTH_USER_PATH}"
        self._api_key = api_key or os.getenv(ENV_SUPABASE_ANON_KEY)
        self._access_token = access_token
        self._timeout = timeout
        self._session = session or requests.Session()

    def get_current_user(self) -> CurrentUser | None:
        """Return the user behind the current access token.

        Raises:
            requests.RequestException: On transport failures
        """
        token = self._access_token()
        if not token:
            logger.debug("No access token in session")
            return None

        headers = {"Authorization": f"Bearer {token}"}
        if self._api_key:
            headers["apikey"] = self._api_key

        response = self._session.get(self._user_url, headers=headers, timeout=self._timeout)

        if response.status_code != HTTPStatus.OK:
            logger.info(
                "Session token rejected",
                extra={"status_code": response.status_code},
            )
            return None

        payload = response.json()
        user_id = payload.get("id") if isinstance(payload, dict) else None
        if not user_id:
            logger.warning("Auth response missing user id")
            return None

        return CurrentUser(id=str(user_id), email=payload.get("email"))
