"""
Notification Routes

GET /notifications - Own notifications, newest first
PUT /notifications/read-all - Mark all as read
PUT /notifications/{id}/read - Mark one as read
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from hirehub.core.auth import get_current_user
from hirehub.db.mongodb import get_database
from hirehub.schemas.schemas import MessageResponse, NotificationResponse
from hirehub.services.mongo_service import serialize_doc, serialize_docs
from hirehub.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=100),
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_database),
):
    return serialize_docs(NotificationService(db).list_for_user(user["_id"], unread_only, limit))


@router.put("/read-all", response_model=MessageResponse)
async def mark_all_read(user: dict = Depends(get_current_user), db: Database = Depends(get_database)):
    count = NotificationService(db).mark_all_read(user["_id"])
    return MessageResponse(message=f"{count} notifications marked as read")


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_database),
):
    return serialize_doc(NotificationService(db).mark_read(user["_id"], notification_id))
