"""
Schemas module - Request/Response schemas for API endpoints.

- Request schemas (what API accepts)
- Response schemas (what API returns)
"""

from hirehub.schemas.schemas import ApplicationStatus, JobStatus, UserRole

__all__ = ["ApplicationStatus", "JobStatus", "UserRole"]
