"""
Resume Service - ingestion pipeline and resume management.

INGESTION:
1. Store the raw file (storage collaborator) -> file_url
2. Parse it (ResumeAI.extract) -> extracted text + structured data
   A failure here aborts: no resume document is written.
3. Persist the resume
4. Make it the primary resume
5. Merge discovered skills into the user's profile
6. Ask for improvement suggestions (best effort, logged on failure)

PRIMARY RESUME:
The user document holds a single `primary_resume_id` pointer, so exactly
one resume is primary at any time and every change is one atomic
single-document update. Rendered resumes carry a derived `is_primary`.
"""

from typing import List, Optional, Tuple

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.database import Database

from hirehub.core.errors import ForbiddenError, NotFoundError, UpstreamError, ValidationError
from hirehub.core.logging import get_logger
from hirehub.db.mongodb import COLLECTIONS
from hirehub.services.ai_parsing_service import ResumeAI, ResumeAIError
from hirehub.services.mongo_service import parse_object_id, utcnow
from hirehub.services.storage_service import StorageError, StorageService

logger = get_logger(__name__)


def with_primary_flag(resume: dict, primary_id: Optional[ObjectId]) -> dict:
    resume["is_primary"] = primary_id is not None and resume["_id"] == primary_id
    return resume


class ResumeService:

    def __init__(self, db: Database, ai: Optional[ResumeAI] = None, storage: Optional[StorageService] = None):
        self.resumes = db[COLLECTIONS["resumes"]]
        self.users = db[COLLECTIONS["users"]]
        self.ai = ai
        self.storage = storage

    # ------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------

    def ingest(self, user: dict, filename: str, content_type: str, data: bytes) -> Tuple[dict, Optional[dict], int]:
        """
        Run the full ingestion pipeline for an already validated upload.

        Returns:
            (resume document, suggestions or None, number of new profile skills)
        """
        try:
            file_url = self.storage.store(filename, content_type, data)
        except StorageError as e:
            logger.error("resume_storage_failed", user_id=str(user["_id"]), error=str(e))
            raise UpstreamError("Failed to upload resume")

        try:
            extraction = self.ai.extract(data, filename)
        except ResumeAIError as e:
            logger.error("resume_parse_failed", user_id=str(user["_id"]), filename=filename, error=str(e))
            raise UpstreamError("Failed to parse resume")

        now = utcnow()
        doc = {
            "user_id": user["_id"],
            "file_name": filename,
            "file_size": len(data),
            "file_type": content_type,
            "file_url": file_url,
            "extracted_text": extraction.extracted_text,
            "parsed_data": extraction.structured_data,
            "is_parsed": True,
            "ai_suggestions": [],
            "uploaded_at": now,
            "updated_at": now,
        }
        resume_id = self.resumes.insert_one(doc).inserted_id
        self._point_primary(user["_id"], resume_id)

        skills_added = self._merge_skills(user, extraction.structured_data.get("skills", []))
        logger.info("resume_ingested", user_id=str(user["_id"]), resume_id=str(resume_id),
                    skills=len(extraction.structured_data.get("skills", [])))

        suggestions = self._best_effort_suggestions(resume_id, extraction.extracted_text, user.get("title") or None)

        resume = self.resumes.find_one({"_id": resume_id})
        return with_primary_flag(resume, resume_id), suggestions, skills_added

    def _merge_skills(self, user: dict, skills: List[str]) -> int:
        """Union into the profile; de-duplication is case-sensitive."""
        if not skills:
            return 0
        existing = set(user.get("skills") or [])
        self.users.update_one({"_id": user["_id"]}, {"$addToSet": {"skills": {"$each": list(skills)}}})
        return len(set(skills) - existing)

    def _best_effort_suggestions(self, resume_id: ObjectId, text: str,
                                 target_job_title: Optional[str]) -> Optional[dict]:
        try:
            suggestions = self.ai.suggest(text, target_job_title)
        except ResumeAIError as e:
            logger.warning("resume_suggestions_failed", resume_id=str(resume_id), error=str(e))
            return None
        self._push_suggestion(resume_id, suggestions)
        return suggestions

    def _push_suggestion(self, resume_id: ObjectId, suggestion: dict) -> None:
        snapshot = {**suggestion, "generated_at": utcnow()}
        self.resumes.update_one(
            {"_id": resume_id},
            {"$push": {"ai_suggestions": snapshot}, "$set": {"updated_at": utcnow()}},
        )

    # ------------------------------------------------------------
    # Primary pointer
    # ------------------------------------------------------------

    def _point_primary(self, user_id: ObjectId, resume_id: ObjectId) -> None:
        self.users.update_one(
            {"_id": user_id},
            {"$set": {"primary_resume_id": resume_id, "updated_at": utcnow()}},
        )

    def _primary_id(self, user_id: ObjectId) -> Optional[ObjectId]:
        user = self.users.find_one({"_id": user_id}, {"primary_resume_id": 1})
        return user.get("primary_resume_id") if user else None

    # ------------------------------------------------------------
    # Management
    # ------------------------------------------------------------

    def _owned(self, user: dict, resume_id: str) -> dict:
        resume = self.resumes.find_one({"_id": parse_object_id(resume_id, "Resume")})
        if not resume:
            raise NotFoundError("Resume not found")
        if resume["user_id"] != user["_id"]:
            raise ForbiddenError("Access denied")
        return resume

    def list(self, user: dict) -> List[dict]:
        """Primary first, then newest."""
        primary_id = self._primary_id(user["_id"])
        cursor = self.resumes.find({"user_id": user["_id"]}).sort(
            [("uploaded_at", DESCENDING), ("_id", DESCENDING)]
        )
        resumes = [with_primary_flag(r, primary_id) for r in cursor]
        return sorted(resumes, key=lambda r: not r["is_primary"])

    def get(self, user: dict, resume_id: str) -> dict:
        """Owners see their resumes; recruiters may read any resume."""
        resume = self.resumes.find_one({"_id": parse_object_id(resume_id, "Resume")})
        if not resume:
            raise NotFoundError("Resume not found")
        if resume["user_id"] != user["_id"] and user.get("role") != "recruiter":
            raise ForbiddenError("Access denied")
        return with_primary_flag(resume, self._primary_id(resume["user_id"]))

    def update(self, user: dict, resume_id: str, is_primary: Optional[bool] = None,
               parsed_data: Optional[dict] = None, ai_suggestion: Optional[dict] = None) -> dict:
        resume = self._owned(user, resume_id)

        if is_primary is True:
            self._point_primary(user["_id"], resume["_id"])
        elif is_primary is False and self._primary_id(user["_id"]) == resume["_id"]:
            raise ValidationError("Mark another resume as primary instead")

        if parsed_data is not None:
            merged = {**(resume.get("parsed_data") or {}), **parsed_data}
            self.resumes.update_one(
                {"_id": resume["_id"]},
                {"$set": {"parsed_data": merged, "updated_at": utcnow()}},
            )

        if ai_suggestion is not None:
            self._push_suggestion(resume["_id"], ai_suggestion)

        updated = self.resumes.find_one({"_id": resume["_id"]})
        return with_primary_flag(updated, self._primary_id(user["_id"]))

    def regenerate_suggestions(self, user: dict, resume_id: str, target_job_title: Optional[str] = None) -> dict:
        resume = self._owned(user, resume_id)
        try:
            suggestions = self.ai.suggest(resume.get("extracted_text") or "", target_job_title)
        except ResumeAIError as e:
            logger.error("resume_suggestions_failed", resume_id=str(resume["_id"]), error=str(e))
            raise UpstreamError("Failed to get resume suggestions")
        self._push_suggestion(resume["_id"], suggestions)
        return suggestions

    def delete(self, user: dict, resume_id: str) -> None:
        """
        Delete a resume. The only resume cannot be deleted; deleting the
        primary promotes the newest remaining one.

        The remaining count is checked again after the delete: when a
        concurrent delete took the other resume, this one is put back.
        """
        resume = self._owned(user, resume_id)

        if self.resumes.count_documents({"user_id": user["_id"]}) <= 1:
            raise ValidationError("Cannot delete your only resume")

        if self.resumes.delete_one({"_id": resume["_id"]}).deleted_count == 0:
            raise NotFoundError("Resume not found")

        replacement = self.resumes.find_one(
            {"user_id": user["_id"]},
            sort=[("uploaded_at", DESCENDING), ("_id", DESCENDING)],
        )
        if replacement is None:
            self.resumes.insert_one(resume)
            logger.warning("resume_delete_reverted", user_id=str(user["_id"]), resume_id=str(resume["_id"]))
            raise ValidationError("Cannot delete your only resume")

        # only repoints when the pointer still names the deleted resume
        self.users.update_one(
            {"_id": user["_id"], "primary_resume_id": resume["_id"]},
            {"$set": {"primary_resume_id": replacement["_id"], "updated_at": utcnow()}},
        )
        logger.info("resume_deleted", user_id=str(user["_id"]), resume_id=str(resume["_id"]))


def get_resume_service(db: Database, ai: Optional[ResumeAI] = None,
                       storage: Optional[StorageService] = None) -> ResumeService:
    return ResumeService(db, ai, storage)
