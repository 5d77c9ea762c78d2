"""
Application Routes

POST /applications - Apply to a job (candidate only)
GET /applications - Own applications (candidate) or applicants to own jobs (recruiter)
GET /applications/{id} - Application details
PUT /applications/{id} - Update status, notes or interview (owning recruiter)
PUT /applications/{id}/status - Change status (owning recruiter)
DELETE /applications/{id} - Withdraw (owning candidate)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from hirehub.core.auth import get_current_user, require_candidate, require_recruiter
from hirehub.db.mongodb import get_database
from hirehub.schemas.schemas import (
    ApplicationCreate, ApplicationListResponse, ApplicationResponse,
    ApplicationStatusUpdate, ApplicationUpdate, MessageResponse
)
from hirehub.services.application_service import get_application_service
from hirehub.services.email_service import EmailService, get_email_service
from hirehub.services.mongo_service import pagination, serialize_doc, serialize_docs

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(
    data: ApplicationCreate,
    candidate: dict = Depends(require_candidate),
    db: Database = Depends(get_database),
    email: EmailService = Depends(get_email_service),
):
    """
    Apply to a published job.

    Uses the primary resume unless resume_id is given. Applying twice to
    the same job is rejected.
    """
    service = get_application_service(db, email)
    application = service.apply(candidate, data.job_id, data.resume_id, data.cover_letter)
    return serialize_doc(service.expand([application])[0])


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None),
    job_id: Optional[str] = Query(None),
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_database),
    email: EmailService = Depends(get_email_service),
):
    applications, total = get_application_service(db, email).list(user, page, limit, status, job_id)
    return {
        "success": True,
        "data": serialize_docs(applications),
        "pagination": pagination(page, limit, total),
    }


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_database),
    email: EmailService = Depends(get_email_service),
):
    return serialize_doc(get_application_service(db, email).get(user, application_id))


@router.put("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: str,
    data: ApplicationUpdate,
    recruiter: dict = Depends(require_recruiter),
    db: Database = Depends(get_database),
    email: EmailService = Depends(get_email_service),
):
    schedule = data.interview_schedule.model_dump(mode="python") if data.interview_schedule else None
    if schedule:
        schedule["type"] = data.interview_schedule.type.value
    application = get_application_service(db, email).update(
        recruiter,
        application_id,
        status=data.status,
        recruiter_notes=data.recruiter_notes,
        interview_schedule=schedule,
    )
    return serialize_doc(application)


@router.put("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    recruiter: dict = Depends(require_recruiter),
    db: Database = Depends(get_database),
    email: EmailService = Depends(get_email_service),
):
    """Move an application to any known status."""
    application = get_application_service(db, email).update_status(recruiter, application_id, data.status)
    return serialize_doc(application)


@router.delete("/{application_id}", response_model=MessageResponse)
async def withdraw_application(
    application_id: str,
    candidate: dict = Depends(require_candidate),
    db: Database = Depends(get_database),
    email: EmailService = Depends(get_email_service),
):
    get_application_service(db, email).withdraw(candidate, application_id)
    return MessageResponse(message="Application withdrawn successfully")
