# postboard/models/token.py

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from . import Base


class AccessToken(Base):
    """
    One issued bearer token. The row's jti is embedded in the signed JWT;
    deleting the row revokes the token.
    """
    __tablename__ = "access_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    jti = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False, default="api")
    created_at = Column(DateTime, default=datetime.now)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="tokens")
