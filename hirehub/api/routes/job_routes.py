"""
Job Routes

POST /jobs - Create job posting (recruiter only)
GET /jobs - Search open jobs with filters; ranked by match for candidates
GET /jobs/mine - Recruiter's own jobs, any status
GET /jobs/recommended - Skill-matched jobs for the candidate
GET /jobs/{job_id} - Get job details
PUT /jobs/{job_id} - Update job (owning recruiter)
DELETE /jobs/{job_id} - Archive job (owning recruiter)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from hirehub.core.auth import get_optional_user, require_candidate, require_recruiter
from hirehub.db.mongodb import get_database
from hirehub.schemas.schemas import (
    ExperienceLevel, JobCreate, JobListResponse, JobResponse, JobStatus, JobType,
    JobUpdate, MessageResponse
)
from hirehub.services.job_service import get_job_service
from hirehub.services.matching_service import get_recommendation_service
from hirehub.services.mongo_service import pagination, serialize_doc, serialize_docs

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    job: JobCreate,
    recruiter: dict = Depends(require_recruiter),
    db: Database = Depends(get_database),
):
    """Create a new job posting. Starts as a draft unless a status is given."""
    return serialize_doc(get_job_service(db).create(recruiter, job))


@router.get("", response_model=JobListResponse)
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    search: Optional[str] = Query(None, description="Search title, description, company and skills"),
    location: Optional[str] = Query(None),
    type: Optional[JobType] = Query(None),
    category: Optional[str] = Query(None),
    experience_level: Optional[ExperienceLevel] = Query(None),
    min_salary: Optional[float] = Query(None, ge=0),
    max_salary: Optional[float] = Query(None, ge=0),
    user: Optional[dict] = Depends(get_optional_user),
    db: Database = Depends(get_database),
):
    """List open job postings with filters and pagination."""
    candidate = user if user and user.get("role") == "candidate" else None
    jobs, total = get_job_service(db).search(
        page=page,
        limit=limit,
        candidate=candidate,
        search=search,
        location=location,
        type=type.value if type else None,
        category=category,
        experience_level=experience_level.value if experience_level else None,
        min_salary=min_salary,
        max_salary=max_salary,
    )
    return {"success": True, "data": serialize_docs(jobs), "pagination": pagination(page, limit, total)}


@router.get("/mine", response_model=List[JobResponse])
async def my_jobs(
    status: Optional[JobStatus] = Query(None),
    recruiter: dict = Depends(require_recruiter),
    db: Database = Depends(get_database),
):
    return serialize_docs(get_job_service(db).mine(recruiter, status))


@router.get("/recommended", response_model=List[JobResponse])
async def recommended_jobs(
    limit: int = Query(10, ge=1, le=50),
    min_score: int = Query(40, ge=0, le=100, description="Keep jobs scoring strictly above this"),
    candidate: dict = Depends(require_candidate),
    db: Database = Depends(get_database),
):
    """Open jobs ranked by skill match against the primary resume."""
    jobs = get_recommendation_service(db).recommend(candidate, limit=limit, min_score=min_score)
    return serialize_docs(jobs)


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str,
    user: Optional[dict] = Depends(get_optional_user),
    db: Database = Depends(get_database),
):
    return serialize_doc(get_job_service(db).get(job_id, user))


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    updates: JobUpdate,
    recruiter: dict = Depends(require_recruiter),
    db: Database = Depends(get_database),
):
    return serialize_doc(get_job_service(db).update(recruiter, job_id, updates))


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    recruiter: dict = Depends(require_recruiter),
    db: Database = Depends(get_database),
):
    """Archive the job. Existing applications are kept."""
    get_job_service(db).archive(recruiter, job_id)
    return MessageResponse(message="Job archived successfully")
