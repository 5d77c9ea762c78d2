"""
Company Service - recruiter-managed company profiles.

Recruiters create and edit their own companies; anyone can browse the
active ones. A job may reference one of its recruiter's companies via
`company_id`, and the job keeps a copy of the company summary so job
listings never need a join.
"""

import re
from typing import List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

from hirehub.core.errors import ForbiddenError, NotFoundError
from hirehub.core.logging import get_logger
from hirehub.db.mongodb import COLLECTIONS
from hirehub.schemas.schemas import CompanyCreate, CompanyUpdate
from hirehub.services.matching_service import open_jobs_query
from hirehub.services.mongo_service import parse_object_id, utcnow

logger = get_logger(__name__)


def company_summary(company: dict) -> dict:
    """The slice of a company embedded in its jobs."""
    return {
        "name": company["name"],
        "logo": company.get("logo") or "",
        "description": company.get("description") or "",
    }


class CompanyService:

    def __init__(self, db: Database):
        self.companies = db[COLLECTIONS["companies"]]
        self.jobs = db[COLLECTIONS["jobs"]]

    def create(self, recruiter: dict, company: CompanyCreate) -> dict:
        now = utcnow()
        doc = company.model_dump(mode="json")
        doc.update({
            "recruiter_id": recruiter["_id"],
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        })
        result = self.companies.insert_one(doc)
        logger.info("company_created", company_id=str(result.inserted_id), recruiter_id=str(recruiter["_id"]))
        return self.companies.find_one({"_id": result.inserted_id})

    def owned(self, recruiter: dict, company_id: str) -> dict:
        company = self.companies.find_one({"_id": parse_object_id(company_id, "Company")})
        if not company:
            raise NotFoundError("Company not found")
        if company["recruiter_id"] != recruiter["_id"]:
            raise ForbiddenError("Not authorized to modify this company")
        return company

    def update(self, recruiter: dict, company_id: str, changes: CompanyUpdate) -> dict:
        company = self.owned(recruiter, company_id)
        update = changes.model_dump(mode="json", exclude_unset=True)
        update["updated_at"] = utcnow()
        self.companies.update_one({"_id": company["_id"]}, {"$set": update})

        updated = self.companies.find_one({"_id": company["_id"]})
        # jobs carry a copy of the summary
        self.jobs.update_many({"company_id": company["_id"]}, {"$set": {"company": company_summary(updated)}})
        logger.info("company_updated", company_id=str(company["_id"]), fields=sorted(update))
        return updated

    def _open_positions(self, company_id) -> int:
        return self.jobs.count_documents({"company_id": company_id, **open_jobs_query()})

    def search(self, page: int = 1, limit: int = 12, search: Optional[str] = None,
               industry: Optional[str] = None) -> Tuple[List[dict], int]:
        """Active companies by name, each with its count of open jobs."""
        query: dict = {"is_active": True}
        if search:
            query["name"] = {"$regex": re.escape(search.strip()), "$options": "i"}
        if industry:
            query["industry"] = industry

        total = self.companies.count_documents(query)
        companies = list(
            self.companies.find(query)
            .sort([("name", ASCENDING), ("_id", ASCENDING)])
            .skip((page - 1) * limit)
            .limit(limit)
        )
        for company in companies:
            company["open_positions"] = self._open_positions(company["_id"])
        return companies, total

    def get(self, company_id: str) -> dict:
        company = self.companies.find_one({"_id": parse_object_id(company_id, "Company"), "is_active": True})
        if not company:
            raise NotFoundError("Company not found")
        company["open_positions"] = self._open_positions(company["_id"])
        return company

    def open_jobs(self, company_id: str) -> List[dict]:
        company = self.get(company_id)
        query = {"company_id": company["_id"], **open_jobs_query()}
        return list(self.jobs.find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)]))


def get_company_service(db: Database) -> CompanyService:
    return CompanyService(db)
