# postboard/api/posts.py

import logging
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
from postboard.api.auth import get_current_user
from postboard.core import posts as post_service
from postboard.core.errors import PostboardError
from postboard.core.media import MediaStorage, get_media_storage
from postboard.core.notifications import NotificationDispatcher, get_dispatcher
from postboard.core.responses import send_error, send_success
from postboard.database import get_db
from postboard.models import User
from postboard.schemas import PostOut


logger = logging.getLogger(__name__)

# Every post route requires a bearer token
router = APIRouter(prefix="/posts", tags=["posts"], dependencies=[Depends(get_current_user)])


def _post_data(post, media: MediaStorage) -> dict:
    out = PostOut.model_validate(post)
    return out.model_copy(update={"image_url": media.url(out.image)}).model_dump()


@router.get("")
def index(db: Session = Depends(get_db), media: MediaStorage = Depends(get_media_storage)):
    try:
        posts = post_service.list_posts(db)
        return send_success({"posts": [_post_data(p, media) for p in posts]}, "All posts fetched.")
    except PostboardError:
        raise
    except Exception as e:
        logger.exception("Listing posts failed")
        return send_error("Failed to fetch posts", [str(e)], 500)


@router.post("")
def store(
    title: str = Form(...),
    description: str = Form(...),
    image: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    media: MediaStorage = Depends(get_media_storage),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    try:
        post = post_service.create_post(db, media, user, title, description, image, dispatcher)
        data = {"image_url": media.url(post.image), "post": _post_data(post, media)}
        return send_success(data, "Post created successfully.")
    except PostboardError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Post creation failed")
        return send_error("Failed to create post", [str(e)], 500)


@router.get("/{post_id}")
def show(post_id: int, db: Session = Depends(get_db), media: MediaStorage = Depends(get_media_storage)):
    try:
        post = post_service.get_post(db, post_id)
        return send_success(_post_data(post, media), "Post fetched successfully.")
    except PostboardError:
        raise
    except Exception as e:
        logger.exception("Fetching post %s failed", post_id)
        return send_error("Failed to fetch post", [str(e)], 500)


@router.api_route("/{post_id}", methods=["PUT", "PATCH"])
def update(
    post_id: int,
    title: str = Form(...),
    description: str = Form(...),
    image: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    media: MediaStorage = Depends(get_media_storage),
):
    try:
        post = post_service.update_post(db, media, user, post_id, title, description, image)
        return send_success(_post_data(post, media), "Post updated successfully.")
    except PostboardError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Updating post %s failed", post_id)
        return send_error("Failed to update post", [str(e)], 500)


@router.delete("/{post_id}")
def destroy(
    post_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    media: MediaStorage = Depends(get_media_storage),
):
    try:
        post = post_service.delete_post(db, media, user, post_id)
        return send_success(_post_data(post, media), "Post deleted successfully.")
    except PostboardError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Deleting post %s failed", post_id)
        return send_error("Failed to delete post", [str(e)], 500)
