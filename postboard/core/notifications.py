# postboard/core/notifications.py

import logging
from fastapi import BackgroundTasks
from sqlalchemy.orm import Session
from postboard.config import settings
from postboard.database import SessionLocal
from postboard.models import Notification, Post, User


logger = logging.getLogger(__name__)

POST_CREATED = "post_created"
USER_CREATED = "user_created"


# -------------------------------
# Notification jobs
# -------------------------------

def send_post_created_notification(db: Session, post_id: int) -> int:
    """
    Notifies every user except the post's author. Returns the number of
    notifications written.
    """
    post = db.get(Post, post_id)
    if post is None:
        logger.warning("PostCreated for missing post %s, nothing sent", post_id)
        return 0

    recipients = db.query(User).filter(User.id != post.user_id).all()
    for user in recipients:
        db.add(Notification(
            user_id=user.id,
            type=POST_CREATED,
            data={
                "post_id": post.id,
                "title": post.title,
                "author_id": post.user_id,
                "author_name": post.owner.name,
                "message": f"{post.owner.name} published a new post: {post.title}",
            },
        ))
    db.commit()

    logger.info("PostCreated %s: notified %d user(s)", post.id, len(recipients))
    return len(recipients)


def send_user_created_notification(db: Session, user_id: int) -> int:
    admin = db.get(User, settings.admin_user_id)
    if admin is None:
        logger.warning("UserCreated %s: administrator %s not found, nothing sent", user_id, settings.admin_user_id)
        return 0
    if admin.id == user_id:
        logger.info("UserCreated %s: new user is the administrator, nothing sent", user_id)
        return 0

    user = db.get(User, user_id)
    if user is None:
        logger.warning("UserCreated for missing user %s, nothing sent", user_id)
        return 0

    db.add(Notification(
        user_id=admin.id,
        type=USER_CREATED,
        data={
            "user_id": user.id,
            "name": user.name,
            "email": user.email,
            "message": f"New user registered: {user.name} <{user.email}>",
        },
    ))
    db.commit()

    logger.info("UserCreated %s: notified administrator %s", user.id, admin.id)
    return 1


# -------------------------------
# Dispatcher
# -------------------------------

class NotificationDispatcher:
    """
    Queues notification jobs off the request path.

    Jobs run on the framework's background task queue after the response
    is sent, each with its own database session. Delivery is
    fire-and-forget: a failing job is logged and dropped.
    """

    def __init__(self, background_tasks: BackgroundTasks | None = None, session_factory=SessionLocal):
        self.background_tasks = background_tasks
        self.session_factory = session_factory

    def post_created(self, post: Post):
        self._enqueue(send_post_created_notification, post.id)

    def user_created(self, user: User):
        self._enqueue(send_user_created_notification, user.id)

    def _enqueue(self, job, *args):
        if self.background_tasks is None:
            self.run(job, *args)
        else:
            self.background_tasks.add_task(self.run, job, *args)

    def run(self, job, *args):
        try:
            with self.session_factory() as db:
                return job(db, *args)
        except Exception:
            logger.exception("Notification job %s%r failed", job.__name__, args)
            return None


def get_dispatcher(background_tasks: BackgroundTasks) -> NotificationDispatcher:
    return NotificationDispatcher(background_tasks)


def list_notifications(db: Session, user: User) -> list[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user.id)
        .order_by(Notification.id.desc())
        .all()
    )
