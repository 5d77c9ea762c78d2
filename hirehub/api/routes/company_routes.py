"""
Company Routes

POST /companies - Create company profile (recruiter only)
GET /companies - Browse active companies with open position counts
GET /companies/{company_id} - Company details
PUT /companies/{company_id} - Update company (owning recruiter)
GET /companies/{company_id}/jobs - Open jobs at the company
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from hirehub.core.auth import require_recruiter
from hirehub.db.mongodb import get_database
from hirehub.schemas.schemas import (
    CompanyCreate, CompanyListResponse, CompanyResponse, CompanyUpdate, JobResponse
)
from hirehub.services.company_service import get_company_service
from hirehub.services.mongo_service import pagination, serialize_doc, serialize_docs

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", response_model=CompanyResponse, status_code=201)
async def create_company(
    company: CompanyCreate,
    recruiter: dict = Depends(require_recruiter),
    db: Database = Depends(get_database),
):
    return serialize_doc(get_company_service(db).create(recruiter, company))


@router.get("", response_model=CompanyListResponse)
async def list_companies(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=50),
    search: Optional[str] = Query(None, description="Match company name"),
    industry: Optional[str] = Query(None),
    db: Database = Depends(get_database),
):
    companies, total = get_company_service(db).search(page, limit, search, industry)
    return {"success": True, "data": serialize_docs(companies), "pagination": pagination(page, limit, total)}


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(company_id: str, db: Database = Depends(get_database)):
    return serialize_doc(get_company_service(db).get(company_id))


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: str,
    updates: CompanyUpdate,
    recruiter: dict = Depends(require_recruiter),
    db: Database = Depends(get_database),
):
    """Update company fields; jobs linked to the company pick up the new summary."""
    return serialize_doc(get_company_service(db).update(recruiter, company_id, updates))


@router.get("/{company_id}/jobs", response_model=List[JobResponse])
async def company_jobs(company_id: str, db: Database = Depends(get_database)):
    return serialize_docs(get_company_service(db).open_jobs(company_id))
