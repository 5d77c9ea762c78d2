"""
Application Service - the application lifecycle.

States: applied -> reviewed / shortlisted / interview / rejected / hired / withdrawn

Transitions are deliberately permissive: the recruiter owning the job may
set any known status from any other status, terminal ones included. Only
the status name is validated.

Side effects:
- apply: job applicant_count +1, recruiter notification, confirmation email
- entering 'shortlisted': one email to the candidate
- every status change: candidate notification
- withdraw: document deleted, job applicant_count -1 (never below 0)

Emails and notifications never fail the request that triggered them.
"""

from typing import List, Optional, Tuple

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from hirehub.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from hirehub.core.logging import get_logger
from hirehub.db.mongodb import COLLECTIONS
from hirehub.schemas.schemas import ApplicationStatus, NotificationType
from hirehub.services.email_service import EmailService, fire_and_forget
from hirehub.services.matching_service import calculate_match_score, candidate_skills_for, open_jobs_query
from hirehub.services.mongo_service import parse_object_id, utcnow
from hirehub.services.notification_service import NotificationService

logger = get_logger(__name__)


def parse_status(value: Optional[str]) -> ApplicationStatus:
    """Whitelist check for a requested status."""
    try:
        return ApplicationStatus(value)
    except ValueError:
        raise ValidationError("Invalid status value")


class ApplicationService:

    def __init__(self, db: Database, email_service: EmailService):
        self.applications = db[COLLECTIONS["applications"]]
        self.jobs = db[COLLECTIONS["jobs"]]
        self.resumes = db[COLLECTIONS["resumes"]]
        self.users = db[COLLECTIONS["users"]]
        self.notifications = NotificationService(db)
        self.email = email_service

    # ------------------------------------------------------------
    # Create
    # ------------------------------------------------------------

    def _resolve_resume(self, candidate: dict, resume_id: Optional[str]) -> dict:
        if resume_id:
            resume = self.resumes.find_one({
                "_id": parse_object_id(resume_id, "Resume"),
                "user_id": candidate["_id"],
            })
            if not resume:
                raise NotFoundError("Resume not found")
            return resume

        primary_id = candidate.get("primary_resume_id")
        resume = self.resumes.find_one({"_id": primary_id}) if primary_id else None
        if not resume:
            raise ValidationError("Upload a resume before applying")
        return resume

    def apply(self, candidate: dict, job_id: str, resume_id: Optional[str] = None,
              cover_letter: Optional[str] = None) -> dict:
        """
        Create an application for a published, unexpired job.

        The unique (job_id, candidate_id) index decides concurrent duplicates.
        """
        job_oid = parse_object_id(job_id, "Job")
        job = self.jobs.find_one({"_id": job_oid, **open_jobs_query()})
        if not job:
            raise NotFoundError("Job not found or no longer active")

        resume = self._resolve_resume(candidate, resume_id)
        score = calculate_match_score(job.get("skills", []), candidate_skills_for(resume, candidate))

        now = utcnow()
        doc = {
            "job_id": job_oid,
            "candidate_id": candidate["_id"],
            "resume_id": resume["_id"],
            "cover_letter": cover_letter or "",
            "status": ApplicationStatus.applied.value,
            "matching_score": score,
            "applied_at": now,
            "reviewed_at": None,
            "recruiter_notes": None,
            "interview_schedule": None,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.applications.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("You have already applied for this job")

        self.jobs.update_one({"_id": job_oid}, {"$inc": {"applicant_count": 1}})
        logger.info("application_created", application_id=str(result.inserted_id),
                    job_id=str(job_oid), matching_score=score)

        self.notifications.notify(
            job["recruiter_id"],
            NotificationType.application,
            "New application",
            f"{candidate.get('first_name', '')} {candidate.get('last_name', '')} applied for {job['title']}".strip(),
            data={"application_id": str(result.inserted_id), "job_id": str(job_oid)},
            action_url=f"/recruiter/applications/{result.inserted_id}",
        )
        fire_and_forget("application_confirmation", self.email.send_application_confirmation,
                        candidate["email"], job["title"])

        return self.applications.find_one({"_id": result.inserted_id})

    # ------------------------------------------------------------
    # Read
    # ------------------------------------------------------------

    def _recruiter_job_ids(self, recruiter_id: ObjectId) -> List[ObjectId]:
        return [j["_id"] for j in self.jobs.find({"recruiter_id": recruiter_id}, {"_id": 1})]

    def list(self, user: dict, page: int = 1, limit: int = 10, status: Optional[str] = None,
             job_id: Optional[str] = None) -> Tuple[List[dict], int]:
        """Candidates see their own applications, recruiters those to their jobs."""
        query: dict = {}
        if user["role"] == "candidate":
            query["candidate_id"] = user["_id"]
            if job_id:
                query["job_id"] = parse_object_id(job_id, "Job")
        else:
            job_ids = self._recruiter_job_ids(user["_id"])
            if job_id:
                wanted = parse_object_id(job_id, "Job")
                job_ids = [j for j in job_ids if j == wanted]
            query["job_id"] = {"$in": job_ids}

        if status:
            query["status"] = parse_status(status).value

        total = self.applications.count_documents(query)
        cursor = (
            self.applications.find(query)
            .sort([("applied_at", DESCENDING), ("_id", DESCENDING)])
            .skip((page - 1) * limit)
            .limit(limit)
        )
        return self.expand(list(cursor)), total

    def expand(self, applications: List[dict]) -> List[dict]:
        """Attach job and candidate summaries."""
        job_ids = list({a["job_id"] for a in applications})
        user_ids = list({a["candidate_id"] for a in applications})
        jobs = {j["_id"]: j for j in self.jobs.find({"_id": {"$in": job_ids}})}
        users = {u["_id"]: u for u in self.users.find({"_id": {"$in": user_ids}})}

        for app in applications:
            job = jobs.get(app["job_id"])
            if job:
                app["job"] = {
                    "id": str(job["_id"]),
                    "title": job["title"],
                    "company": job.get("company", {}),
                    "location": job.get("location"),
                }
            user = users.get(app["candidate_id"])
            if user:
                app["candidate"] = {
                    "id": str(user["_id"]),
                    "first_name": user.get("first_name"),
                    "last_name": user.get("last_name"),
                    "email": user.get("email"),
                }
        return applications

    def _get_or_404(self, application_id: str) -> dict:
        application = self.applications.find_one({"_id": parse_object_id(application_id, "Application")})
        if not application:
            raise NotFoundError("Application not found")
        return application

    def _owned_job(self, recruiter: dict, application: dict) -> dict:
        job = self.jobs.find_one({"_id": application["job_id"]})
        if not job or job["recruiter_id"] != recruiter["_id"]:
            raise ForbiddenError("Access denied")
        return job

    def get(self, user: dict, application_id: str) -> dict:
        application = self._get_or_404(application_id)
        if user["role"] == "recruiter":
            self._owned_job(user, application)
        elif application["candidate_id"] != user["_id"]:
            raise ForbiddenError("Access denied")
        return self.expand([application])[0]

    # ------------------------------------------------------------
    # Recruiter transitions
    # ------------------------------------------------------------

    def update_status(self, recruiter: dict, application_id: str, status: Optional[str]) -> dict:
        if not status:
            raise ValidationError("Invalid status value")
        return self.update(recruiter, application_id, status=status)

    def update(self, recruiter: dict, application_id: str, status: Optional[str] = None,
               recruiter_notes: Optional[str] = None, interview_schedule: Optional[dict] = None) -> dict:
        """
        Partial recruiter update. Any known status may follow any other.
        """
        new_status = parse_status(status) if status is not None else None

        application = self._get_or_404(application_id)
        job = self._owned_job(recruiter, application)

        now = utcnow()
        changes: dict = {"updated_at": now}
        if new_status is not None:
            changes["status"] = new_status.value
            if new_status != ApplicationStatus.applied:
                changes["reviewed_at"] = now
        if recruiter_notes is not None:
            changes["recruiter_notes"] = recruiter_notes
        if interview_schedule is not None:
            changes["interview_schedule"] = interview_schedule

        # the pre-image tells us which status we actually left
        previous = self.applications.find_one_and_update(
            {"_id": application["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.BEFORE,
        )
        if previous is None:
            raise NotFoundError("Application not found")

        if new_status is not None and previous["status"] != new_status.value:
            logger.info("application_status_changed", application_id=str(application["_id"]),
                        old_status=previous["status"], new_status=new_status.value)
            self._on_status_change(application, job, new_status)

        return self.expand([self.applications.find_one({"_id": application["_id"]})])[0]

    def _on_status_change(self, application: dict, job: dict, new_status: ApplicationStatus) -> None:
        self.notifications.notify(
            application["candidate_id"],
            NotificationType.application,
            "Application status updated",
            f"Your application for {job['title']} is now {new_status.value}",
            data={"application_id": str(application["_id"]), "status": new_status.value},
            action_url=f"/candidate/applications/{application['_id']}",
        )

        if new_status == ApplicationStatus.shortlisted:
            candidate = self.users.find_one({"_id": application["candidate_id"]})
            if candidate:
                fire_and_forget(
                    "shortlisted",
                    self.email.send_shortlisted_email,
                    candidate["email"],
                    job["title"],
                    job.get("company", {}).get("name", ""),
                )

    # ------------------------------------------------------------
    # Candidate withdrawal
    # ------------------------------------------------------------

    def withdraw(self, candidate: dict, application_id: str) -> None:
        application = self._get_or_404(application_id)
        if application["candidate_id"] != candidate["_id"]:
            raise ForbiddenError("Access denied")

        result = self.applications.delete_one({"_id": application["_id"], "candidate_id": candidate["_id"]})
        if result.deleted_count == 0:
            raise NotFoundError("Application not found")

        # conditional decrement keeps the counter at or above zero
        self.jobs.update_one(
            {"_id": application["job_id"], "applicant_count": {"$gt": 0}},
            {"$inc": {"applicant_count": -1}},
        )
        logger.info("application_withdrawn", application_id=str(application["_id"]),
                    job_id=str(application["job_id"]))


def get_application_service(db: Database, email_service: EmailService) -> ApplicationService:
    return ApplicationService(db, email_service)
