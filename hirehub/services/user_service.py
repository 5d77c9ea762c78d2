"""
User Service - accounts, email verification, password reset and profiles.
"""

from datetime import timedelta
from typing import Optional

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from hirehub.core.auth import create_access_token, generate_token, hash_password, verify_password
from hirehub.core.errors import ConflictError, UnauthorizedError, ValidationError
from hirehub.core.logging import get_logger
from hirehub.db.mongodb import COLLECTIONS
from hirehub.schemas.schemas import ProfileUpdate, RegisterRequest
from hirehub.services.email_service import EmailService, fire_and_forget
from hirehub.services.mongo_service import utcnow

logger = get_logger(__name__)

VERIFICATION_TTL = timedelta(hours=24)
RESET_TTL = timedelta(hours=1)


class UserService:

    def __init__(self, db: Database, email_service: Optional[EmailService] = None):
        self.users = db[COLLECTIONS["users"]]
        self.email = email_service

    def register(self, request: RegisterRequest) -> dict:
        now = utcnow()
        token = generate_token()
        doc = {
            "email": request.email.lower(),
            "password_hash": hash_password(request.password),
            "first_name": request.first_name,
            "last_name": request.last_name,
            "role": request.role.value,
            "title": "",
            "location": "",
            "bio": "",
            "company": "",
            "skills": [],
            "experience": [],
            "education": [],
            "primary_resume_id": None,
            "is_verified": False,
            "verification_token": token,
            "verification_token_expiry": now + VERIFICATION_TTL,
            "last_login": None,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.users.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Email already registered")

        logger.info("user_registered", user_id=str(result.inserted_id), role=doc["role"])
        fire_and_forget("verification", self.email.send_verification_email, doc["email"], token)
        return self.users.find_one({"_id": result.inserted_id})

    def login(self, email: str, password: str) -> dict:
        """
        Returns:
            {"access_token", "user_id", "role"}
        """
        user = self.users.find_one({"email": email.lower()})
        if not user or not verify_password(password, user["password_hash"]):
            raise UnauthorizedError("Invalid email or password")

        self.users.update_one({"_id": user["_id"]}, {"$set": {"last_login": utcnow()}})
        token = create_access_token(data={"sub": str(user["_id"]), "role": user["role"]})
        logger.info("user_logged_in", user_id=str(user["_id"]))
        return {"access_token": token, "user_id": str(user["_id"]), "role": user["role"]}

    def verify_email(self, token: str) -> None:
        result = self.users.update_one(
            {"verification_token": token, "verification_token_expiry": {"$gt": utcnow()}},
            {
                "$set": {"is_verified": True, "updated_at": utcnow()},
                "$unset": {"verification_token": "", "verification_token_expiry": ""},
            },
        )
        if result.matched_count == 0:
            raise ValidationError("Invalid or expired verification token")

    def forgot_password(self, email: str) -> None:
        """Silent when the address is unknown."""
        token = generate_token()
        user = self.users.find_one_and_update(
            {"email": email.lower()},
            {"$set": {"reset_password_token": token, "reset_password_expires": utcnow() + RESET_TTL}},
        )
        if user is None:
            logger.info("password_reset_unknown_email")
            return
        fire_and_forget("password_reset", self.email.send_password_reset_email, user["email"], token)

    def reset_password(self, token: str, password: str) -> None:
        result = self.users.update_one(
            {"reset_password_token": token, "reset_password_expires": {"$gt": utcnow()}},
            {
                "$set": {"password_hash": hash_password(password), "updated_at": utcnow()},
                "$unset": {"reset_password_token": "", "reset_password_expires": ""},
            },
        )
        if result.matched_count == 0:
            raise ValidationError("Invalid or expired reset token")

    def update_profile(self, user: dict, changes: ProfileUpdate) -> dict:
        update = changes.model_dump(exclude_unset=True)
        update["updated_at"] = utcnow()
        return self.users.find_one_and_update(
            {"_id": user["_id"]},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )


def get_user_service(db: Database, email_service: Optional[EmailService] = None) -> UserService:
    return UserService(db, email_service)
