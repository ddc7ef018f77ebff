# tests/test_tokens.py

import pytest
from postboard.core.errors import AuthenticationError
from postboard.core.security import get_password_hash
from postboard.core.tokens import TokenStore
from postboard.models import AccessToken, User


@pytest.fixture
def user(db):
    u = User(name="Alice", email="alice@example.com", hashed_password=get_password_hash("correct-horse"))
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def test_issue_persists_a_row_and_resolves(db, user):
    store = TokenStore(db)

    token = store.issue(user)

    assert db.query(AccessToken).filter_by(user_id=user.id).count() == 1
    assert store.resolve(token).id == user.id


def test_revoke_all_invalidates_every_token(db, user):
    store = TokenStore(db)
    tokens = [store.issue(user) for _ in range(3)]

    assert store.revoke_all(user) == 3

    for token in tokens:
        with pytest.raises(AuthenticationError):
            store.resolve(token)


def test_expired_token_is_rejected(db, user):
    token = TokenStore(db, expire_minutes=-5).issue(user)

    with pytest.raises(AuthenticationError):
        TokenStore(db).resolve(token)


def test_tampered_token_is_rejected(db, user):
    token = TokenStore(db).issue(user)
    header, payload, signature = token.split(".")

    with pytest.raises(AuthenticationError):
        TokenStore(db).resolve(".".join([header, payload, signature[::-1]]))


def test_explicit_zero_expiry_is_kept(db):
    assert TokenStore(db, expire_minutes=0).expire_minutes == 0
    assert TokenStore(db).expire_minutes == 60
