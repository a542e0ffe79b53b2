"""Abstract contract for the authentication session provider."""

from abc import ABC, abstractmethod

from core.models.image import CurrentUser


class IdentityProvider(ABC):
    """Reports the currently authenticated principal, if any."""

    @abstractmethod
    def get_current_user(self) -> CurrentUser | None:
        """Return the current user, or None when nobody is signed in.

        Implementations may raise on transport failures; callers treat an
        error the same as an absent user.
        """


class StaticIdentityProvider(IdentityProvider):
    """Identity provider that always reports the same principal."""

    def __init__(self, user: CurrentUser | None = None) -> None:
        self._user = user

    def get_current_user(self) -> CurrentUser | None:
        return self._user
