# postboard/api/auth.py

import logging
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from postboard.core import accounts
from postboard.core.errors import PostboardError
from postboard.core.media import MediaStorage, get_media_storage
from postboard.core.notifications import NotificationDispatcher, get_dispatcher
from postboard.core.responses import send_error, send_success
from postboard.core.tokens import TokenStore
from postboard.database import get_db
from postboard.models import User
from postboard.schemas import LoginIn, ProfileUpdateIn, RegisterIn, UserOut


logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login")


# -------------------------------
# Dependencies
# -------------------------------

def get_token_store(db: Session = Depends(get_db)) -> TokenStore:
    return TokenStore(db)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    tokens: TokenStore = Depends(get_token_store),
) -> User:
    """Resolves the bearer token; AuthenticationError becomes a 401 envelope."""
    return tokens.resolve(token)


def _user_data(user: User) -> dict:
    return UserOut.model_validate(user).model_dump()


# -------------------------------
# Public Endpoints
# -------------------------------

@router.post("/register")
def register(
    body: RegisterIn,
    db: Session = Depends(get_db),
    tokens: TokenStore = Depends(get_token_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    try:
        user, token = accounts.register(db, tokens, body, dispatcher)
        return send_success({"user": _user_data(user), "token": token}, "User registered successfully.")
    except PostboardError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Registration failed")
        return send_error("Failed to create user", [str(e)], 500)


@router.post("/login")
def login(
    body: LoginIn,
    db: Session = Depends(get_db),
    tokens: TokenStore = Depends(get_token_store),
):
    try:
        user, token = accounts.login(db, tokens, body)
        return send_success(
            {"user": _user_data(user), "token": token, "token_type": "bearer"},
            "User Logged in successfully!",
        )
    except PostboardError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Login failed")
        return send_error("Failed to log in", [str(e)], 500)


# -------------------------------
# Authenticated Endpoints
# -------------------------------

@router.post("/logout")
def logout(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    tokens: TokenStore = Depends(get_token_store),
):
    try:
        accounts.logout(tokens, user)
        return send_success(None, "User logged out successfully!")
    except Exception as e:
        db.rollback()
        logger.exception("Logout failed")
        return send_error("Failed to log out", [str(e)], 500)


@router.get("/profile")
def show_profile(user: User = Depends(get_current_user)):
    try:
        return send_success(_user_data(user), "User profile fetched successfully.")
    except Exception as e:
        logger.exception("Fetching profile failed")
        return send_error("Failed to fetch user profile", [str(e)], 500)


@router.put("/profile-update")
def update_profile(
    body: ProfileUpdateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        user = accounts.update_profile(db, user, body)
        return send_success(_user_data(user), "User profile updated successfully.")
    except PostboardError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Profile update failed for user %s", user.id)
        return send_error("Failed to update user profile", [str(e)], 500)


@router.post("/profile-delete")
def delete_account(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    tokens: TokenStore = Depends(get_token_store),
    media: MediaStorage = Depends(get_media_storage),
):
    try:
        accounts.delete_account(db, tokens, media, user)
        return send_success(None, "User account deleted successfully.")
    except Exception as e:
        db.rollback()
        logger.exception("Account deletion failed")
        return send_error("Failed to delete user account", [str(e)], 500)
