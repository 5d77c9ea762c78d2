"""
Dashboard Service - per-role summary counts.
"""

from pymongo import DESCENDING
from pymongo.database import Database

from hirehub.db.mongodb import COLLECTIONS
from hirehub.schemas.schemas import TERMINAL_STATUSES, ApplicationStatus, JobStatus


def _counts_by(collection, field: str, values, query: dict) -> dict:
    counts = {v: 0 for v in values}
    for doc in collection.find(query, {field: 1}):
        key = doc.get(field)
        counts[key] = counts.get(key, 0) + 1
    return counts


class DashboardService:

    def __init__(self, db: Database):
        self.applications = db[COLLECTIONS["applications"]]
        self.jobs = db[COLLECTIONS["jobs"]]
        self.resumes = db[COLLECTIONS["resumes"]]

    def candidate(self, user: dict, recent: int = 5) -> dict:
        query = {"candidate_id": user["_id"]}
        statuses = [s.value for s in ApplicationStatus]
        counts = _counts_by(self.applications, "status", statuses, query)
        closed = {s.value for s in TERMINAL_STATUSES}
        return {
            "role": "candidate",
            "applications": counts,
            "total_applications": sum(counts.values()),
            "active_applications": sum(n for status, n in counts.items() if status not in closed),
            "resumes": self.resumes.count_documents({"user_id": user["_id"]}),
            "recent_applications": list(
                self.applications.find(query).sort("applied_at", DESCENDING).limit(recent)
            ),
        }

    def recruiter(self, user: dict) -> dict:
        jobs = list(self.jobs.find({"recruiter_id": user["_id"]}, {"status": 1, "applicant_count": 1}))
        job_counts = {s.value: 0 for s in JobStatus}
        for job in jobs:
            job_counts[job["status"]] = job_counts.get(job["status"], 0) + 1

        app_query = {"job_id": {"$in": [j["_id"] for j in jobs]}}
        scores = [a.get("matching_score", 0) for a in self.applications.find(app_query, {"matching_score": 1})]

        return {
            "role": "recruiter",
            "jobs": job_counts,
            "total_jobs": len(jobs),
            "total_applicants": sum(j.get("applicant_count", 0) for j in jobs),
            "applications": _counts_by(
                self.applications, "status", [s.value for s in ApplicationStatus], app_query
            ),
            "average_matching_score": round(sum(scores) / len(scores), 1) if scores else 0,
        }
