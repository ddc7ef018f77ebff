# postboard/core/posts.py

import logging
from fastapi import UploadFile
from sqlalchemy.orm import Session
from postboard.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from postboard.core.media import MediaStorage, validate_image
from postboard.core.notifications import NotificationDispatcher
from postboard.models import Post, User
from postboard.schemas import PostOut


logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 255


def _has_file(image: UploadFile | None) -> bool:
    return image is not None and bool(image.filename)


def validate_post(title: str | None, description: str | None, image: UploadFile | None = None) -> list[str]:
    errors = []
    if not title or not title.strip():
        errors.append("The title field is required.")
    elif len(title.strip()) > MAX_TITLE_LENGTH:
        errors.append(f"The title may not be greater than {MAX_TITLE_LENGTH} characters.")
    if not description or not description.strip():
        errors.append("The description field is required.")
    if _has_file(image):
        errors.extend(validate_image(image))
    return errors


def ensure_owner(post: Post, actor: User):
    if post.user_id != actor.id:
        raise PermissionDeniedError("You are not allowed to modify this post.")


def list_posts(db: Session) -> list[Post]:
    posts = db.query(Post).order_by(Post.id.desc()).all()
    if not posts:
        raise NotFoundError("Posts not found")
    return posts


def get_post(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def create_post(
    db: Session,
    media: MediaStorage,
    owner: User,
    title: str,
    description: str,
    image: UploadFile | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> Post:
    errors = validate_post(title, description, image)
    if errors:
        raise ValidationError(errors)

    image_name = media.save(image) if _has_file(image) else None
    post = Post(
        title=title.strip(),
        description=description,
        image=image_name,
        user_id=owner.id,
    )
    db.add(post)
    try:
        db.commit()
    except Exception:
        db.rollback()
        media.delete(image_name)
        raise
    db.refresh(post)

    logger.info("User %s created post %s", owner.id, post.id)
    if dispatcher is not None:
        dispatcher.post_created(post)
    return post


def update_post(
    db: Session,
    media: MediaStorage,
    actor: User,
    post_id: int,
    title: str,
    description: str,
    image: UploadFile | None = None,
) -> Post:
    """
    Replaces title and description; a new image replaces the stored one,
    which is removed once the update is committed.
    """
    post = get_post(db, post_id)
    ensure_owner(post, actor)

    errors = validate_post(title, description, image)
    if errors:
        raise ValidationError(errors)

    old_image = new_image = None
    if _has_file(image):
        old_image = post.image
        new_image = media.save(image)
        post.image = new_image

    post.title = title.strip()
    post.description = description
    try:
        db.commit()
    except Exception:
        db.rollback()
        media.delete(new_image)
        raise
    db.refresh(post)

    media.delete(old_image)
    return post


def delete_post(db: Session, media: MediaStorage, actor: User, post_id: int) -> PostOut:
    """Deletes the post and its image; returns a snapshot of the deleted post."""
    post = get_post(db, post_id)
    ensure_owner(post, actor)

    snapshot = PostOut.model_validate(post)
    db.delete(post)
    db.commit()
    media.delete(snapshot.image)

    logger.info("User %s deleted post %s", actor.id, post_id)
    return snapshot
