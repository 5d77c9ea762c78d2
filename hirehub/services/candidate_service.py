"""
Candidate Service - the recruiter's candidate pipeline.

A recruiter sees a candidate only through applications to the
recruiter's own jobs: the list groups those applications per person,
and the detail view is a 404 for anyone who never applied.
"""

from typing import Dict, List

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.database import Database

from hirehub.core.errors import NotFoundError
from hirehub.db.mongodb import COLLECTIONS
from hirehub.services.mongo_service import parse_object_id

PROFILE_FIELDS = {
    "first_name": 1,
    "last_name": 1,
    "email": 1,
    "title": 1,
    "location": 1,
    "skills": 1,
    "experience": 1,
    "education": 1,
    "primary_resume_id": 1,
}

NEWEST = [("applied_at", DESCENDING), ("_id", DESCENDING)]


class CandidateService:

    def __init__(self, db: Database):
        self.applications = db[COLLECTIONS["applications"]]
        self.jobs = db[COLLECTIONS["jobs"]]
        self.users = db[COLLECTIONS["users"]]
        self.resumes = db[COLLECTIONS["resumes"]]

    def _jobs_of(self, recruiter: dict) -> Dict[ObjectId, dict]:
        cursor = self.jobs.find({"recruiter_id": recruiter["_id"]}, {"title": 1, "company": 1})
        return {job["_id"]: job for job in cursor}

    @staticmethod
    def _applied_job(application: dict, job: dict) -> dict:
        return {
            "application_id": application["_id"],
            "job_id": application["job_id"],
            "job_title": job["title"],
            "company": job.get("company") or {},
            "status": application["status"],
            "matching_score": application.get("matching_score", 0),
            "applied_at": application["applied_at"],
        }

    def list(self, recruiter: dict) -> List[dict]:
        """
        Everyone who applied to the recruiter's jobs, most recent applicant first.

        Each entry carries the jobs applied to, the best matching score
        across them and the date of the latest application.
        """
        jobs = self._jobs_of(recruiter)
        if not jobs:
            return []

        pipeline: Dict[ObjectId, dict] = {}
        for application in self.applications.find({"job_id": {"$in": list(jobs)}}).sort(NEWEST):
            # newest first, so the first application seen is the latest one
            entry = pipeline.setdefault(application["candidate_id"], {
                "applied_jobs": [],
                "match_score": 0,
                "last_applied": application["applied_at"],
            })
            entry["applied_jobs"].append(self._applied_job(application, jobs[application["job_id"]]))
            entry["match_score"] = max(entry["match_score"], application.get("matching_score", 0))

        users = {u["_id"]: u for u in self.users.find({"_id": {"$in": list(pipeline)}}, PROFILE_FIELDS)}
        resume_ids = [u["primary_resume_id"] for u in users.values() if u.get("primary_resume_id")]
        resume_urls = {
            r["_id"]: r.get("file_url") for r in self.resumes.find({"_id": {"$in": resume_ids}}, {"file_url": 1})
        }

        candidates = []
        for candidate_id, entry in pipeline.items():
            user = users.get(candidate_id)
            if user is None:
                continue
            candidates.append({
                **user,
                **entry,
                "resume_url": resume_urls.get(user.get("primary_resume_id")),
            })
        return candidates

    def get(self, recruiter: dict, candidate_id: str) -> dict:
        """Profile, primary resume and the applications to this recruiter's jobs."""
        oid = parse_object_id(candidate_id, "Candidate")
        jobs = self._jobs_of(recruiter)
        applications = list(
            self.applications.find({"candidate_id": oid, "job_id": {"$in": list(jobs)}}).sort(NEWEST)
        )
        candidate = self.users.find_one({"_id": oid}) if applications else None
        if not candidate:
            raise NotFoundError("Candidate not found")

        resume = None
        if candidate.get("primary_resume_id"):
            resume = self.resumes.find_one({"_id": candidate["primary_resume_id"]})
        candidate["resume"] = {
            "id": resume["_id"],
            "file_name": resume["file_name"],
            "file_url": resume["file_url"],
            "parsed_data": resume.get("parsed_data") or {},
            "ai_suggestions": resume.get("ai_suggestions") or [],
        } if resume else None
        candidate["applications"] = [self._applied_job(a, jobs[a["job_id"]]) for a in applications]
        return candidate


def get_candidate_service(db: Database) -> CandidateService:
    return CandidateService(db)
