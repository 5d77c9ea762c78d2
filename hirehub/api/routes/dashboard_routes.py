"""
Dashboard Routes

GET /dashboard/candidate - Application and resume counts
GET /dashboard/recruiter - Job, applicant and score summary
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from hirehub.core.auth import require_candidate, require_recruiter
from hirehub.db.mongodb import get_database
from hirehub.services.dashboard_service import DashboardService
from hirehub.services.mongo_service import serialize_doc

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/candidate")
async def candidate_dashboard(candidate: dict = Depends(require_candidate), db: Database = Depends(get_database)):
    summary = DashboardService(db).candidate(candidate)
    summary["recent_applications"] = [serialize_doc(a) for a in summary["recent_applications"]]
    return summary


@router.get("/recruiter")
async def recruiter_dashboard(recruiter: dict = Depends(require_recruiter), db: Database = Depends(get_database)):
    return DashboardService(db).recruiter(recruiter)
