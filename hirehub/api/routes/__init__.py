"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from hirehub.api.routes.auth_routes import router as auth_router
from hirehub.api.routes.user_routes import router as user_router
from hirehub.api.routes.company_routes import router as company_router
from hirehub.api.routes.job_routes import router as job_router
from hirehub.api.routes.application_routes import router as application_router
from hirehub.api.routes.resume_routes import router as resume_router
from hirehub.api.routes.notification_routes import router as notification_router
from hirehub.api.routes.dashboard_routes import router as dashboard_router
from hirehub.api.routes.recruiter_routes import router as recruiter_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(company_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(resume_router)
api_router.include_router(notification_router)
api_router.include_router(dashboard_router)
api_router.include_router(recruiter_router)
