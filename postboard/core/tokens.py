# postboard/core/tokens.py

import uuid
import logging
from datetime import datetime, timedelta
from sqlalchemy.orm import Session
from postboard.config import settings
from postboard.core.errors import AuthenticationError
from postboard.core.security import create_access_token, decode_access_token
from postboard.models import AccessToken, User


logger = logging.getLogger(__name__)


class TokenStore:
    """
    Issues, resolves and revokes bearer tokens.

    Every token is a signed JWT whose `jti` claim names a row in
    `access_tokens`; a token is valid only while its row exists, so
    deleting the rows revokes the tokens before they expire.
    """

    def __init__(self, db: Session, expire_minutes: int | None = None):
        self.db = db
        if expire_minutes is None:
            expire_minutes = settings.access_token_expire_minutes
        self.expire_minutes = expire_minutes

    def issue(self, user: User, name: str = "api") -> str:
        expires_delta = timedelta(minutes=self.expire_minutes)
        jti = uuid.uuid4().hex
        self.db.add(AccessToken(
            user_id=user.id,
            jti=jti,
            name=name,
            expires_at=datetime.now() + expires_delta,
        ))
        self.db.commit()
        return create_access_token({"sub": str(user.id), "jti": jti}, expires_delta)

    def resolve(self, token: str) -> User:
        credentials_error = AuthenticationError("Could not validate credentials")

        payload = decode_access_token(token)
        if payload is None:
            raise credentials_error

        jti = payload.get("jti")
        sub = payload.get("sub")
        if not jti or sub is None:
            raise credentials_error

        record = self.db.query(AccessToken).filter(AccessToken.jti == jti).first()
        if record is None or str(record.user_id) != str(sub):
            raise credentials_error
        if record.expires_at < datetime.now():
            raise credentials_error

        return record.user

    def revoke_all(self, user: User) -> int:
        count = self.db.query(AccessToken).filter(AccessToken.user_id == user.id).delete()
        self.db.commit()
        self.db.expire(user, ["tokens"])
        logger.info("Revoked %d token(s) for user %s", count, user.id)
        return count
