# postboard/models/__init__.py

from sqlalchemy.orm import declarative_base


Base = declarative_base()

from .user import User  # noqa: E402
from .token import AccessToken  # noqa: E402
from .post import Post  # noqa: E402
from .notification import Notification  # noqa: E402

__all__ = ["Base", "User", "AccessToken", "Post", "Notification"]
