# postboard/api/notifications.py

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from postboard.api.auth import get_current_user
from postboard.core.notifications import list_notifications
from postboard.core.responses import send_error, send_success
from postboard.database import get_db
from postboard.models import User
from postboard.schemas import NotificationOut


logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])


@router.get("/notifications")
def index(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Lists the caller's notifications, newest first.
    """
    try:
        notifications = list_notifications(db, user)
        data = [NotificationOut.model_validate(n).model_dump() for n in notifications]
        return send_success({"notifications": data}, "Notifications fetched.")
    except Exception as e:
        logger.exception("Listing notifications failed")
        return send_error("Failed to fetch notifications", [str(e)], 500)
