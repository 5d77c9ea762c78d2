"""
User Routes

GET /users/profile - Get own profile
PUT /users/profile - Update own profile
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from hirehub.core.auth import get_current_user
from hirehub.db.mongodb import get_database
from hirehub.schemas.schemas import ProfileUpdate, UserResponse
from hirehub.services.mongo_service import serialize_doc
from hirehub.services.user_service import get_user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    return serialize_doc(user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_database),
):
    """Update profile fields. Only the fields sent are changed."""
    updated = get_user_service(db).update_profile(user, data)
    return serialize_doc(updated)
