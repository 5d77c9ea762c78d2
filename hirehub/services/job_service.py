"""
Job Service - recruiter postings and the public job board.

Lifecycle: draft -> published -> closed -> archived.
Only published jobs whose deadline has not passed are listed publicly
and accept applications. Deleting a job archives it.
"""

import re
from typing import List, Optional, Tuple

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from hirehub.core.errors import ForbiddenError, NotFoundError
from hirehub.core.logging import get_logger
from hirehub.db.mongodb import COLLECTIONS
from hirehub.schemas.schemas import JobCreate, JobStatus, JobUpdate
from hirehub.services.company_service import CompanyService, company_summary
from hirehub.services.matching_service import RecommendationService, open_jobs_query, rank_jobs
from hirehub.services.mongo_service import parse_object_id, utcnow

logger = get_logger(__name__)

SEARCH_FIELDS = ("title", "description", "company.name", "skills")


def build_search_query(
    search: Optional[str] = None,
    location: Optional[str] = None,
    type: Optional[str] = None,
    category: Optional[str] = None,
    experience_level: Optional[str] = None,
    min_salary: Optional[float] = None,
    max_salary: Optional[float] = None,
) -> dict:
    """Public listing filter: open jobs narrowed by the optional criteria."""
    clauses: List[dict] = [open_jobs_query()]

    if search:
        pattern = re.escape(search.strip())
        clauses.append({"$or": [{f: {"$regex": pattern, "$options": "i"}} for f in SEARCH_FIELDS]})
    if location:
        clauses.append({"location": {"$regex": re.escape(location.strip()), "$options": "i"}})
    if type:
        clauses.append({"type": type})
    if category:
        clauses.append({"category": category})
    if experience_level:
        clauses.append({"experience_level": experience_level})
    # salary ranges overlap the requested band
    if min_salary is not None:
        clauses.append({"salary.max": {"$gte": min_salary}})
    if max_salary is not None:
        clauses.append({"salary.min": {"$lte": max_salary}})

    return clauses[0] if len(clauses) == 1 else {"$and": clauses}


class JobService:

    def __init__(self, db: Database):
        self.db = db
        self.jobs = db[COLLECTIONS["jobs"]]

    def create(self, recruiter: dict, job: JobCreate) -> dict:
        now = utcnow()
        doc = job.model_dump(mode="json", exclude={"company_id"})
        doc["application_deadline"] = job.application_deadline
        if job.company_id:
            doc.update(self._company_link(recruiter, job.company_id))
        doc.update({
            "recruiter_id": recruiter["_id"],
            "views": 0,
            "applicant_count": 0,
            "created_at": now,
            "updated_at": now,
        })
        result = self.jobs.insert_one(doc)
        logger.info("job_created", job_id=str(result.inserted_id), recruiter_id=str(recruiter["_id"]),
                    status=doc["status"])
        return self.jobs.find_one({"_id": result.inserted_id})

    def search(self, page: int = 1, limit: int = 10, candidate: Optional[dict] = None,
               **filters) -> Tuple[List[dict], int]:
        """
        Paginated public listing, newest first.

        With a candidate, each job gets a match_score and the whole result
        set is ordered best match first before the page is cut, newest
        first among equal scores.
        """
        query = build_search_query(**filters)
        newest = [("created_at", DESCENDING), ("_id", DESCENDING)]
        skip = (page - 1) * limit

        if candidate is None:
            total = self.jobs.count_documents(query)
            return list(self.jobs.find(query).sort(newest).skip(skip).limit(limit)), total

        skills = RecommendationService(self.db).candidate_skills(candidate)
        ranked = rank_jobs(list(self.jobs.find(query).sort(newest)), skills)
        return ranked[skip:skip + limit], len(ranked)

    def mine(self, recruiter: dict, status: Optional[JobStatus] = None) -> List[dict]:
        query = {"recruiter_id": recruiter["_id"]}
        if status:
            query["status"] = status.value
        return list(self.jobs.find(query).sort("created_at", DESCENDING))

    def get(self, job_id: str, user: Optional[dict] = None) -> dict:
        """
        Job details. Viewing counts as a view; jobs that are not open
        (unpublished or past their deadline) are only visible to the
        recruiter who owns them.
        """
        oid = parse_object_id(job_id, "Job")
        job = self.jobs.find_one({"_id": oid})
        if not job:
            raise NotFoundError("Job not found")

        is_owner = user is not None and job["recruiter_id"] == user["_id"]
        if not is_owner and self.jobs.count_documents({"_id": oid, **open_jobs_query()}) == 0:
            raise NotFoundError("Job not found")

        return self.jobs.find_one_and_update(
            {"_id": oid},
            {"$inc": {"views": 1}},
            return_document=ReturnDocument.AFTER,
        )

    def _company_link(self, recruiter: dict, company_id: str) -> dict:
        """Reference one of the recruiter's companies and copy its summary."""
        company = CompanyService(self.db).owned(recruiter, company_id)
        return {"company_id": company["_id"], "company": company_summary(company)}

    def _owned(self, recruiter: dict, job_id: str) -> dict:
        job = self.jobs.find_one({"_id": parse_object_id(job_id, "Job")})
        if not job:
            raise NotFoundError("Job not found")
        if job["recruiter_id"] != recruiter["_id"]:
            raise ForbiddenError("Not authorized to modify this job")
        return job

    def update(self, recruiter: dict, job_id: str, changes: JobUpdate) -> dict:
        job = self._owned(recruiter, job_id)
        update = changes.model_dump(mode="json", exclude_unset=True)
        if "application_deadline" in update:
            update["application_deadline"] = changes.application_deadline
        if update.get("company_id"):
            update.update(self._company_link(recruiter, update["company_id"]))
        else:
            update.pop("company_id", None)
        update["updated_at"] = utcnow()

        updated = self.jobs.find_one_and_update(
            {"_id": job["_id"]},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        logger.info("job_updated", job_id=str(job["_id"]), fields=sorted(update))
        return updated

    def archive(self, recruiter: dict, job_id: str) -> None:
        job = self._owned(recruiter, job_id)
        self.jobs.update_one(
            {"_id": job["_id"]},
            {"$set": {"status": JobStatus.archived.value, "updated_at": utcnow()}},
        )
        logger.info("job_archived", job_id=str(job["_id"]))


def get_job_service(db: Database) -> JobService:
    return JobService(db)
