"""
MongoDB Connection Utility

MongoDB stores every HireHub entity:
- users, companies, jobs, applications, resumes, notifications

The connection is an explicitly created handle kept on `app.state`.
The pymongo client is only opened on first use and pymongo pools
connections internally, so one handle serves the whole process.
"""
from typing import Optional

from fastapi import Request
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from hirehub.core.config import Settings
from hirehub.core.logging import get_logger

logger = get_logger(__name__)


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "companies": "companies",
    "jobs": "jobs",
    "applications": "applications",
    "resumes": "resumes",
    "notifications": "notifications",
}


class MongoConnection:
    """Lazily-opened MongoDB client + database handle."""

    def __init__(self, uri: str, db_name: str, client: Optional[MongoClient] = None):
        self.uri = uri
        self.db_name = db_name
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoConnection":
        return cls(settings.mongodb_uri, settings.mongodb_db)

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            self._client = MongoClient(self.uri)
            logger.info("mongo_client_created", db=self.db_name)
        return self._client

    @property
    def db(self) -> Database:
        return self.client[self.db_name]

    def ping(self) -> bool:
        """
        Test if MongoDB is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("mongo_ping_failed", error=str(e))
            return False

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def get_connection(request: Request) -> MongoConnection:
    """Dependency - the connection handle created at startup."""
    return request.app.state.mongo


def get_database(request: Request) -> Database:
    """
    Dependency for FastAPI route injection.
    Usage:
        @router.get("/jobs")
        def list_jobs(db: Database = Depends(get_database)):
            ...
    """
    return get_connection(request).db


def init_indexes(db: Database) -> None:
    """
    Create indexes and uniqueness constraints.
    Call this once during app startup.
    """
    db[COLLECTIONS["users"]].create_index("email", unique=True)

    # One application per (job, candidate): first writer wins
    applications = db[COLLECTIONS["applications"]]
    applications.create_index([("job_id", ASCENDING), ("candidate_id", ASCENDING)], unique=True)
    applications.create_index([("candidate_id", ASCENDING), ("status", ASCENDING)])
    applications.create_index([("job_id", ASCENDING), ("status", ASCENDING)])
    applications.create_index([("matching_score", DESCENDING)])

    jobs = db[COLLECTIONS["jobs"]]
    jobs.create_index("recruiter_id")
    jobs.create_index("company_id")
    jobs.create_index([("status", ASCENDING), ("application_deadline", ASCENDING)])

    companies = db[COLLECTIONS["companies"]]
    companies.create_index("recruiter_id")
    companies.create_index([("is_active", ASCENDING), ("name", ASCENDING)])

    db[COLLECTIONS["resumes"]].create_index([("user_id", ASCENDING), ("uploaded_at", DESCENDING)])
    db[COLLECTIONS["notifications"]].create_index([("user_id", ASCENDING), ("read", ASCENDING)])

    logger.info("mongo_indexes_created")
