"""
Recruiter Routes

GET /recruiter/candidates - Candidates who applied to the recruiter's jobs
GET /recruiter/candidates/{candidate_id} - Candidate profile, resume and applications
"""

from typing import List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from hirehub.core.auth import require_recruiter
from hirehub.db.mongodb import get_database
from hirehub.schemas.schemas import CandidateDetail, CandidateSummary
from hirehub.services.candidate_service import get_candidate_service
from hirehub.services.mongo_service import serialize_doc, serialize_docs

router = APIRouter(prefix="/recruiter", tags=["Recruiter"])


@router.get("/candidates", response_model=List[CandidateSummary])
async def list_candidates(recruiter: dict = Depends(require_recruiter), db: Database = Depends(get_database)):
    return serialize_docs(get_candidate_service(db).list(recruiter))


@router.get("/candidates/{candidate_id}", response_model=CandidateDetail)
async def get_candidate(
    candidate_id: str,
    recruiter: dict = Depends(require_recruiter),
    db: Database = Depends(get_database),
):
    return serialize_doc(get_candidate_service(db).get(recruiter, candidate_id))
