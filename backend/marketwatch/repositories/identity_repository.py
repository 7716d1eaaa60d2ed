from __future__ import annotations

import datetime as dt
from abc import ABC, abstractmethod

from marketwatch.domain.identity import AppRole


class IdentityRepository(ABC):
    @abstractmethod
    def add_user(self, *, email: str, roles: tuple[AppRole, ...] = (AppRole.INVESTOR,), user_id: str | None = None) -> str: ...

    @abstractmethod
    def issue_token(self, *, user_id: str, ttl: dt.timedelta | None = None) -> str: ...

    @abstractmethod
    def revoke_token(self, token: str) -> bool: ...

    @abstractmethod
    def resolve_user(self, token: str, *, now: dt.datetime | None = None) -> str | None:
        """Subject (user id) of a bearer token, or None if the token is unusable."""

    @abstractmethod
    def has_role(self, user_id: str, role: AppRole) -> bool: ...

    @abstractmethod
    def user_exists(self, user_id: str) -> bool: ...
