import io
import itertools
from datetime import datetime, timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from hirehub.core.auth import create_access_token, hash_password
from hirehub.core.config import Settings, get_settings
from hirehub.db.mongodb import get_database, init_indexes
from hirehub.main import app
from hirehub.services.ai_parsing_service import MockResumeAI, ResumeAIError, get_resume_ai
from hirehub.services.email_service import EmailDeliveryError, EmailService, get_email_service
from hirehub.services.storage_service import StorageService, get_storage_service

PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)

PDF = "application/pdf"

_ids = itertools.count(1)

RESUME_TEXT = b"Jane Doe\nSenior engineer. Python, React, MongoDB, Docker.\nAgile team lead."


class RecordingEmail(EmailService):
    """Captures outgoing mail instead of calling the provider."""

    def __init__(self):
        super().__init__(settings=get_settings())
        self.sent = []

    def send(self, to, subject, html):
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": str(len(self.sent))}


class FailingEmail(RecordingEmail):
    def send(self, to, subject, html):
        raise EmailDeliveryError("provider down")


class FailingExtractAI(MockResumeAI):
    def extract(self, data, filename):
        raise ResumeAIError("parser down")


class FailingSuggestAI(MockResumeAI):
    def suggest(self, resume_text, target_job_title=None):
        raise ResumeAIError("suggestions down")


@pytest.fixture
def db():
    database = mongomock.MongoClient().hirehub
    init_indexes(database)
    return database


@pytest.fixture
def email():
    return RecordingEmail()


@pytest.fixture
def ai():
    return MockResumeAI()


@pytest.fixture
def storage(tmp_path):
    return StorageService(Settings(upload_dir=str(tmp_path / "uploads")))


@pytest.fixture
def client(db, email, ai, storage):
    app.dependency_overrides[get_database] = lambda: db
    app.dependency_overrides[get_email_service] = lambda: email
    app.dependency_overrides[get_resume_ai] = lambda: ai
    app.dependency_overrides[get_storage_service] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, role="candidate", email=None, skills=None, **extra):
    now = datetime.utcnow()
    doc = {
        "email": email or f"{role}{next(_ids)}@example.com",
        "password_hash": PASSWORD_HASH,
        "first_name": "Test",
        "last_name": role.title(),
        "role": role,
        "title": "",
        "location": "",
        "bio": "",
        "company": "",
        "skills": skills or [],
        "experience": [],
        "education": [],
        "primary_resume_id": None,
        "is_verified": True,
        "last_login": None,
        "created_at": now,
        "updated_at": now,
    }
    doc.update(extra)
    doc["_id"] = db.users.insert_one(doc).inserted_id
    return doc


def auth_header(user):
    token = create_access_token({"sub": str(user["_id"]), "role": user["role"]})
    return {"Authorization": f"Bearer {token}"}


def make_job(db, recruiter, skills=None, status="published", deadline=None, **extra):
    now = datetime.utcnow()
    doc = {
        "title": "Backend Engineer",
        "description": "Build APIs",
        "requirements": [],
        "responsibilities": [],
        "location": "Berlin",
        "type": "full-time",
        "experience_level": "mid",
        "salary": {"min": 50000, "max": 80000, "currency": "USD", "period": "yearly"},
        "company": {"name": "Acme", "logo": "", "description": ""},
        "recruiter_id": recruiter["_id"],
        "category": "Engineering",
        "skills": ["Python", "React"] if skills is None else skills,
        "application_deadline": deadline,
        "status": status,
        "views": 0,
        "applicant_count": 0,
        "created_at": now,
        "updated_at": now,
    }
    doc.update(extra)
    doc["_id"] = db.jobs.insert_one(doc).inserted_id
    return doc


def make_company(db, recruiter, name="Acme", industry="Software", is_active=True):
    now = datetime.utcnow()
    doc = {
        "name": name,
        "description": f"{name} builds things",
        "industry": industry,
        "location": "Berlin",
        "logo": "",
        "website": "",
        "employee_count": "11-50",
        "recruiter_id": recruiter["_id"],
        "is_active": is_active,
        "created_at": now,
        "updated_at": now,
    }
    doc["_id"] = db.companies.insert_one(doc).inserted_id
    return doc


def make_resume(db, user, skills=None, primary=True, uploaded_at=None):
    now = uploaded_at or datetime.utcnow()
    doc = {
        "user_id": user["_id"],
        "file_name": "cv.pdf",
        "file_size": 100,
        "file_type": PDF,
        "file_url": "/uploads/cv.pdf",
        "extracted_text": "resume text",
        "parsed_data": {"skills": skills or []},
        "is_parsed": True,
        "ai_suggestions": [],
        "uploaded_at": now,
        "updated_at": now,
    }
    doc["_id"] = db.resumes.insert_one(doc).inserted_id
    if primary:
        db.users.update_one({"_id": user["_id"]}, {"$set": {"primary_resume_id": doc["_id"]}})
        user["primary_resume_id"] = doc["_id"]
    return doc


def upload(client, user, content=RESUME_TEXT, filename="cv.pdf", content_type=PDF):
    return client.post(
        "/api/resume/upload",
        files={"file": (filename, io.BytesIO(content), content_type)},
        headers=auth_header(user),
    )


def past(days=1):
    return datetime.utcnow() - timedelta(days=days)


def future(days=30):
    return datetime.utcnow() + timedelta(days=days)
