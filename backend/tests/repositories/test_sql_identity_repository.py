import datetime as dt

import pytest

from marketwatch.domain.identity import AppRole
from marketwatch.repositories.sql_identity_repository import hash_token


def test_issue_and_resolve_token(identity_repo):
    uid = identity_repo.add_user(email="Ana@Example.com")
    token = identity_repo.issue_token(user_id=uid)

    assert identity_repo.resolve_user(token) == uid
    assert identity_repo.resolve_user(f"  {token} ") == uid


def test_unknown_or_empty_token(identity_repo):
    assert identity_repo.resolve_user("nope") is None
    assert identity_repo.resolve_user("") is None


def test_revoked_token_is_rejected(identity_repo):
    uid = identity_repo.add_user(email="a@example.com")
    token = identity_repo.issue_token(user_id=uid)

    assert identity_repo.revoke_token(token) is True
    assert identity_repo.resolve_user(token) is None
    assert identity_repo.revoke_token("never-issued") is False


def test_expired_token_is_rejected(identity_repo):
    uid = identity_repo.add_user(email="a@example.com")
    token = identity_repo.issue_token(user_id=uid, ttl=dt.timedelta(hours=1))

    later = dt.datetime.now(dt.timezone.utc) + dt.timedelta(hours=2)
    assert identity_repo.resolve_user(token) == uid
    assert identity_repo.resolve_user(token, now=later) is None


def test_issue_token_for_unknown_user(identity_repo):
    with pytest.raises(KeyError):
        identity_repo.issue_token(user_id="ghost")


def test_duplicate_email_rejected(identity_repo):
    identity_repo.add_user(email="a@example.com")
    with pytest.raises(ValueError):
        identity_repo.add_user(email="A@example.com ")


def test_roles(identity_repo):
    admin = identity_repo.add_user(email="admin@example.com", roles=(AppRole.ADMIN, AppRole.INVESTOR))
    investor = identity_repo.add_user(email="inv@example.com")

    assert identity_repo.has_role(admin, AppRole.ADMIN)
    assert identity_repo.has_role(admin, AppRole.INVESTOR)
    assert not identity_repo.has_role(investor, AppRole.ADMIN)
    assert identity_repo.has_role(investor, AppRole.INVESTOR)


def test_hash_token_is_sha256_hex():
    h = hash_token("abc")
    assert len(h) == 64
    assert h == hash_token("abc")
    assert h != hash_token("abd")


def test_user_exists(identity_repo):
    uid = identity_repo.add_user(email="known@example.com")
    assert identity_repo.user_exists(uid) is True
    assert identity_repo.user_exists("nobody") is False
