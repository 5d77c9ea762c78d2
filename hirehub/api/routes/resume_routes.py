"""
Resume Routes

POST /resume/upload - Upload, parse and store a resume (candidate only)
GET /resume - Own resumes, primary first
GET /resume/{id} - Resume details (owner or any recruiter)
PUT /resume/{id} - Set primary, edit parsed data, attach a suggestion
DELETE /resume/{id} - Delete a resume (never the only one)
POST /resume/{id}/suggestions - Regenerate AI improvement suggestions
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from pymongo.database import Database

from hirehub.core.auth import get_current_user, require_candidate
from hirehub.db.mongodb import get_database
from hirehub.schemas.schemas import (
    MessageResponse, ResumeResponse, ResumeUpdate, ResumeUploadResponse, SuggestionRequest
)
from hirehub.services.ai_parsing_service import ResumeAI, get_resume_ai
from hirehub.services.mongo_service import serialize_doc, serialize_docs
from hirehub.services.resume_service import get_resume_service
from hirehub.services.storage_service import StorageService, get_storage_service
from hirehub.utils.file_upload import read_resume_upload

router = APIRouter(prefix="/resume", tags=["Resumes"])


@router.post("/upload", response_model=ResumeUploadResponse)
async def upload_resume(
    file: UploadFile = File(..., description="Resume file (PDF, DOC or DOCX)"),
    candidate: dict = Depends(require_candidate),
    db: Database = Depends(get_database),
    ai: ResumeAI = Depends(get_resume_ai),
    storage: StorageService = Depends(get_storage_service),
):
    """
    Upload a resume.

    Flow:
    1. Validate type and size
    2. Store the file
    3. Parse it with AI
    4. Save it as the primary resume and merge skills into the profile
    5. Attach improvement suggestions when the AI provides them
    """
    content, filename, content_type = await read_resume_upload(file)
    resume, suggestions, skills_added = get_resume_service(db, ai, storage).ingest(
        candidate, filename, content_type, content
    )
    return {
        "success": True,
        "message": "Resume uploaded and parsed successfully",
        "resume": serialize_doc(resume),
        "suggestions": suggestions,
        "skills_added": skills_added,
    }


@router.get("", response_model=List[ResumeResponse])
async def list_resumes(user: dict = Depends(get_current_user), db: Database = Depends(get_database)):
    return serialize_docs(get_resume_service(db).list(user))


@router.get("/{resume_id}", response_model=ResumeResponse)
async def get_resume(resume_id: str, user: dict = Depends(get_current_user), db: Database = Depends(get_database)):
    return serialize_doc(get_resume_service(db).get(user, resume_id))


@router.put("/{resume_id}", response_model=ResumeResponse)
async def update_resume(
    resume_id: str,
    data: ResumeUpdate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_database),
):
    resume = get_resume_service(db).update(
        user,
        resume_id,
        is_primary=data.is_primary,
        parsed_data=data.parsed_data,
        ai_suggestion=data.ai_suggestion,
    )
    return serialize_doc(resume)


@router.delete("/{resume_id}", response_model=MessageResponse)
async def delete_resume(resume_id: str, user: dict = Depends(get_current_user), db: Database = Depends(get_database)):
    get_resume_service(db).delete(user, resume_id)
    return MessageResponse(message="Resume deleted successfully")


@router.post("/{resume_id}/suggestions")
async def regenerate_suggestions(
    resume_id: str,
    data: Optional[SuggestionRequest] = None,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_database),
    ai: ResumeAI = Depends(get_resume_ai),
):
    suggestions = get_resume_service(db, ai).regenerate_suggestions(
        user, resume_id, data.target_job_title if data else None
    )
    return {"success": True, "suggestions": suggestions}
