"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
POST /auth/verify-email - Confirm email address with emailed token
POST /auth/forgot-password - Email a password reset link
POST /auth/reset-password - Set a new password with the reset token
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from hirehub.core.auth import get_current_user
from hirehub.db.mongodb import get_database
from hirehub.schemas.schemas import (
    ForgotPasswordRequest, LoginRequest, MessageResponse, RegisterRequest,
    ResetPasswordRequest, TokenRequest, TokenResponse, UserResponse
)
from hirehub.services.email_service import EmailService, get_email_service
from hirehub.services.mongo_service import serialize_doc
from hirehub.services.user_service import get_user_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    request: RegisterRequest,
    db: Database = Depends(get_database),
    email: EmailService = Depends(get_email_service),
):
    """
    Register a new user account.

    A verification link is emailed; login works before verifying.
    """
    user = get_user_service(db, email).register(request)
    return serialize_doc(user)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: Database = Depends(get_database)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    return get_user_service(db).login(request.email, request.password)


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return serialize_doc(user)


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(request: TokenRequest, db: Database = Depends(get_database)):
    get_user_service(db).verify_email(request.token)
    return MessageResponse(message="Email verified successfully")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    db: Database = Depends(get_database),
    email: EmailService = Depends(get_email_service),
):
    """Always succeeds so registered addresses cannot be probed."""
    get_user_service(db, email).forgot_password(request.email)
    return MessageResponse(message="If the email exists, a password reset link has been sent")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest, db: Database = Depends(get_database)):
    get_user_service(db).reset_password(request.token, request.password)
    return MessageResponse(message="Password reset successfully")
