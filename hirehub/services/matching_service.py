"""
Skill Matching Service

PURPOSE:
Score how well a candidate's skills cover a job's required skills.

HOW IT WORKS:
- A candidate skill counts as matched when, ignoring case, it contains
  a job skill or is contained in one ("react native" matches "React").
- Score = matched candidate skills / job skills, as a 0-100 integer.
- The denominator is the job's skill count: extra candidate skills never
  lower the score, and jobs listing few skills score in big steps.
"""

import math
from typing import Iterable, List, Optional

from pymongo.database import Database

from hirehub.db.mongodb import COLLECTIONS
from hirehub.schemas.schemas import JobStatus
from hirehub.services.mongo_service import utcnow


def _normalize(skills: Optional[Iterable]) -> List[Optional[str]]:
    # non-string entries become None so they can never match
    if not skills:
        return []
    return [s.strip().lower() if isinstance(s, str) else None for s in skills]


def _is_match(candidate_skill: Optional[str], job_skills: List[Optional[str]]) -> bool:
    if not candidate_skill:
        return False
    for job_skill in job_skills:
        if not job_skill:
            continue
        if candidate_skill in job_skill or job_skill in candidate_skill:
            return True
    return False


def calculate_match_score(job_skills: Optional[Iterable], candidate_skills: Optional[Iterable]) -> int:
    """
    Compute the 0-100 compatibility score.

    Args:
        job_skills: skills the job requires
        candidate_skills: skills from the candidate's resume or profile

    Returns:
        Integer percentage; 0 when the job lists no skills.

    Example:
        >>> calculate_match_score(["React", "Node"], ["React"])
        50
    """
    job = _normalize(job_skills)
    if not job:
        return 0

    matched = sum(1 for skill in _normalize(candidate_skills) if _is_match(skill, job))

    # round half up, then clamp: several candidate variants can hit one job skill
    score = math.floor(100 * matched / len(job) + 0.5)
    return max(0, min(100, score))


def candidate_skills_for(resume: Optional[dict], user: Optional[dict]) -> List[str]:
    """Resume skills when the parser found any, profile skills otherwise."""
    if resume:
        skills = (resume.get("parsed_data") or {}).get("skills") or []
        if skills:
            return list(skills)
    if user:
        return list(user.get("skills") or [])
    return []


def rank_jobs(jobs: List[dict], candidate_skills: List[str]) -> List[dict]:
    """Annotate each job with match_score and sort best first (stable)."""
    for job in jobs:
        job["match_score"] = calculate_match_score(job.get("skills", []), candidate_skills)
    return sorted(jobs, key=lambda j: j["match_score"], reverse=True)


def open_jobs_query() -> dict:
    """Jobs that are published and whose deadline has not passed."""
    return {
        "status": JobStatus.published.value,
        "$or": [
            {"application_deadline": None},
            {"application_deadline": {"$gt": utcnow()}},
        ],
    }


class RecommendationService:
    """
    Recommends open jobs to a candidate using the skill match score.
    """

    def __init__(self, db: Database):
        self.db = db
        self.jobs = db[COLLECTIONS["jobs"]]
        self.resumes = db[COLLECTIONS["resumes"]]

    def candidate_skills(self, user: dict) -> List[str]:
        resume = None
        if user.get("primary_resume_id"):
            resume = self.resumes.find_one({"_id": user["primary_resume_id"]})
        return candidate_skills_for(resume, user)

    def recommend(self, user: dict, limit: int = 10, min_score: int = 40) -> List[dict]:
        """
        Score every open job against the candidate.

        Returns:
            Jobs scoring strictly above min_score, best first, at most `limit`.
        """
        skills = self.candidate_skills(user)
        if not skills:
            return []

        ranked = rank_jobs(list(self.jobs.find(open_jobs_query())), skills)
        return [job for job in ranked if job["match_score"] > min_score][:limit]


def get_recommendation_service(db: Database) -> RecommendationService:
    return RecommendationService(db)
