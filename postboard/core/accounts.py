# postboard/core/accounts.py

import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from postboard.core.errors import AuthenticationError, ConflictError
from postboard.core.media import MediaStorage
from postboard.core.notifications import NotificationDispatcher
from postboard.core.security import get_password_hash, verify_password
from postboard.core.tokens import TokenStore
from postboard.models import User
from postboard.schemas import LoginIn, ProfileUpdateIn, RegisterIn


logger = logging.getLogger(__name__)

EMAIL_TAKEN = "The email has already been taken."


def _email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    query = db.query(User).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def _commit_unique(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(EMAIL_TAKEN, [EMAIL_TAKEN])


def register(
    db: Session,
    tokens: TokenStore,
    data: RegisterIn,
    dispatcher: NotificationDispatcher | None = None,
) -> tuple[User, str]:
    """
    Creates the user, issues its first token and announces the new user.
    Raises ConflictError when the email is already registered.
    """
    if _email_taken(db, data.email):
        raise ConflictError(EMAIL_TAKEN, [EMAIL_TAKEN])

    user = User(
        name=data.name,
        email=data.email,
        hashed_password=get_password_hash(data.password),
    )
    db.add(user)
    _commit_unique(db)
    db.refresh(user)

    token = tokens.issue(user)
    logger.info("Registered user %s", user.id)

    if dispatcher is not None:
        dispatcher.user_created(user)
    return user, token


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return None
    try:
        matches = verify_password(password, user.hashed_password)
    except ValueError:
        # passlib rejects oversized passwords outright
        logger.info("Rejected oversized password for user %s", user.id)
        return None
    return user if matches else None


def login(db: Session, tokens: TokenStore, data: LoginIn) -> tuple[User, str]:
    user = authenticate_user(db, data.email, data.password)
    if not user:
        raise AuthenticationError("Email and password do not match.")
    return user, tokens.issue(user)


def logout(tokens: TokenStore, user: User) -> int:
    return tokens.revoke_all(user)


def update_profile(db: Session, user: User, data: ProfileUpdateIn) -> User:
    if _email_taken(db, data.email, exclude_user_id=user.id):
        raise ConflictError(EMAIL_TAKEN, [EMAIL_TAKEN])

    user.name = data.name
    user.email = data.email
    if data.password:
        user.hashed_password = get_password_hash(data.password)

    _commit_unique(db)
    db.refresh(user)
    return user


def delete_account(db: Session, tokens: TokenStore, media: MediaStorage, user: User):
    """
    Revokes every token of the user, then deletes the user together with
    its posts (and their images) and notifications.
    """
    user_id = user.id
    tokens.revoke_all(user)

    images = [post.image for post in user.posts if post.image]
    db.delete(user)
    db.commit()

    for name in images:
        media.delete(name)
    logger.info("Deleted user %s", user_id)
