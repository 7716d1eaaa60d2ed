from __future__ import annotations

import datetime as dt
import hashlib
import secrets
from uuid import uuid4

from sqlalchemy import select

from marketwatch.domain.identity import AppRole
from marketwatch.repositories.identity_repository import IdentityRepository
from marketwatch.repositories.sql_helpers import SessionFactory, as_utc, resolve_session_factory
from marketwatch.repositories.sql_identity_models import AccessTokenRow, UserRoleRow, UserRow


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SqlIdentityRepository(IdentityRepository):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session = resolve_session_factory(session_factory)

    def add_user(
        self,
        *,
        email: str,
        roles: tuple[AppRole, ...] = (AppRole.INVESTOR,),
        user_id: str | None = None,
    ) -> str:
        e = email.strip().lower()
        if not e:
            raise ValueError("email cannot be empty")

        uid = user_id or str(uuid4())
        with self._session() as s:
            if s.execute(select(UserRow).where(UserRow.email == e)).scalars().first() is not None:
                raise ValueError(f"user '{e}' already exists")

            s.add(UserRow(id=uid, email=e))
            for role in dict.fromkeys(roles):
                s.add(UserRoleRow(id=str(uuid4()), user_id=uid, role=role.value))
            s.commit()
        return uid

    def issue_token(self, *, user_id: str, ttl: dt.timedelta | None = None) -> str:
        token = secrets.token_urlsafe(32)
        expires_at = None
        if ttl is not None:
            expires_at = dt.datetime.now(dt.timezone.utc) + ttl

        with self._session() as s:
            if s.get(UserRow, user_id) is None:
                raise KeyError(f"unknown user_id '{user_id}'")
            s.add(AccessTokenRow(token_hash=hash_token(token), user_id=user_id, expires_at=expires_at, revoked=False))
            s.commit()
        return token

    def revoke_token(self, token: str) -> bool:
        with self._session() as s:
            row = s.get(AccessTokenRow, hash_token(token))
            if row is None:
                return False
            row.revoked = True
            s.commit()
            return True

    def resolve_user(self, token: str, *, now: dt.datetime | None = None) -> str | None:
        if not token or not token.strip():
            return None

        now = now or dt.datetime.now(dt.timezone.utc)
        with self._session() as s:
            row = s.get(AccessTokenRow, hash_token(token.strip()))
            if row is None or row.revoked:
                return None
            if row.expires_at is not None and as_utc(row.expires_at) <= now:
                return None
            if s.get(UserRow, row.user_id) is None:
                return None
            return row.user_id

    def has_role(self, user_id: str, role: AppRole) -> bool:
        stmt = (
            select(UserRoleRow.id)
            .where(UserRoleRow.user_id == user_id)
            .where(UserRoleRow.role == role.value)
            .limit(1)
        )
        with self._session() as s:
            return s.execute(stmt).first() is not None

    def user_exists(self, user_id: str) -> bool:
        with self._session() as s:
            return s.get(UserRow, user_id) is not None
