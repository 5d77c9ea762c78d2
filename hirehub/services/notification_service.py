"""
Notification Service - in-app notifications stored in MongoDB.
"""

from typing import Any, List, Optional

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.database import Database

from hirehub.core.errors import NotFoundError
from hirehub.core.logging import get_logger
from hirehub.db.mongodb import COLLECTIONS
from hirehub.schemas.schemas import NotificationType
from hirehub.services.mongo_service import parse_object_id, utcnow

logger = get_logger(__name__)


class NotificationService:

    def __init__(self, db: Database):
        self.collection = db[COLLECTIONS["notifications"]]

    def create(
        self,
        user_id: ObjectId,
        type: NotificationType,
        title: str,
        message: str,
        data: Any = None,
        action_url: Optional[str] = None,
    ) -> str:
        doc = {
            "user_id": user_id,
            "type": type.value,
            "title": title,
            "message": message,
            "data": data,
            "read": False,
            "action_url": action_url,
            "created_at": utcnow(),
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def notify(self, user_id: ObjectId, type: NotificationType, title: str, message: str, **kwargs) -> None:
        """Side-effect notification: a failure is logged, never raised."""
        try:
            self.create(user_id, type, title, message, **kwargs)
        except Exception as e:
            logger.error("notification_failed", user_id=str(user_id), title=title, error=str(e))

    def list_for_user(self, user_id: ObjectId, unread_only: bool = False, limit: int = 50) -> List[dict]:
        query = {"user_id": user_id}
        if unread_only:
            query["read"] = False
        cursor = self.collection.find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        return list(cursor.limit(limit))

    def mark_read(self, user_id: ObjectId, notification_id: str) -> dict:
        oid = parse_object_id(notification_id, "Notification")
        result = self.collection.update_one({"_id": oid, "user_id": user_id}, {"$set": {"read": True}})
        if result.matched_count == 0:
            raise NotFoundError("Notification not found")
        return self.collection.find_one({"_id": oid})

    def mark_all_read(self, user_id: ObjectId) -> int:
        result = self.collection.update_many({"user_id": user_id, "read": False}, {"$set": {"read": True}})
        return result.modified_count
