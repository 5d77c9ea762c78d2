"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional, List, Any
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    candidate = "candidate"
    recruiter = "recruiter"


class JobType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    contract = "contract"
    internship = "internship"
    remote = "remote"


class ExperienceLevel(str, Enum):
    entry = "entry"
    mid = "mid"
    senior = "senior"
    executive = "executive"


class SalaryPeriod(str, Enum):
    hourly = "hourly"
    monthly = "monthly"
    yearly = "yearly"


class JobStatus(str, Enum):
    draft = "draft"
    published = "published"
    closed = "closed"
    archived = "archived"


class ApplicationStatus(str, Enum):
    applied = "applied"
    reviewed = "reviewed"
    shortlisted = "shortlisted"
    interview = "interview"
    rejected = "rejected"
    hired = "hired"
    withdrawn = "withdrawn"


TERMINAL_STATUSES = {ApplicationStatus.hired, ApplicationStatus.rejected, ApplicationStatus.withdrawn}


class InterviewType(str, Enum):
    phone = "phone"
    video = "video"
    in_person = "in-person"


class EmployeeCount(str, Enum):
    micro = "1-10"
    small = "11-50"
    medium = "51-200"
    large = "201-1000"
    enterprise = "1000+"


class NotificationType(str, Enum):
    application = "application"
    job = "job"
    message = "message"
    system = "system"
    alert = "alert"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str

class TokenRequest(BaseModel):
    token: str

class ForgotPasswordRequest(BaseModel):
    email: EmailStr

class ResetPasswordRequest(BaseModel):
    token: str
    password: str = Field(..., min_length=8)


# ============================================================
# USER SCHEMAS
# ============================================================

class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    title: Optional[str] = ""
    location: Optional[str] = ""
    bio: Optional[str] = ""
    company: Optional[str] = ""
    skills: List[str] = []
    experience: List[dict] = []
    education: List[dict] = []
    is_verified: bool = False
    primary_resume_id: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: datetime

class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    title: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    company: Optional[str] = None
    skills: Optional[List[str]] = None
    experience: Optional[List[dict]] = None
    education: Optional[List[dict]] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class Salary(BaseModel):
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    currency: str = "USD"
    period: SalaryPeriod = SalaryPeriod.yearly

    @model_validator(mode="after")
    def check_range(self):
        if self.min > self.max:
            raise ValueError("salary min must not exceed max")
        return self

class CompanySummary(BaseModel):
    name: str = Field(..., min_length=1)
    logo: Optional[str] = ""
    description: Optional[str] = ""

class JobCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=1)
    requirements: List[str] = []
    responsibilities: List[str] = []
    location: str = Field(..., min_length=1)
    type: JobType
    experience_level: ExperienceLevel
    salary: Salary
    # either an inline summary or one of the recruiter's companies
    company: Optional[CompanySummary] = None
    company_id: Optional[str] = None
    category: str = Field(..., min_length=1)
    skills: List[str] = []
    application_deadline: Optional[datetime] = None
    status: JobStatus = JobStatus.draft

    @model_validator(mode="after")
    def check_company(self):
        if self.company is None and not self.company_id:
            raise ValueError("company or company_id is required")
        return self

class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None
    requirements: Optional[List[str]] = None
    responsibilities: Optional[List[str]] = None
    location: Optional[str] = None
    type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    salary: Optional[Salary] = None
    company: Optional[CompanySummary] = None
    company_id: Optional[str] = None
    category: Optional[str] = None
    skills: Optional[List[str]] = None
    application_deadline: Optional[datetime] = None
    status: Optional[JobStatus] = None

class JobResponse(BaseModel):
    id: str
    title: str
    description: str
    requirements: List[str] = []
    responsibilities: List[str] = []
    location: str
    type: str
    experience_level: str
    salary: dict
    company: dict
    company_id: Optional[str] = None
    recruiter_id: str
    category: str
    skills: List[str] = []
    application_deadline: Optional[datetime] = None
    status: str
    views: int = 0
    applicant_count: int = 0
    match_score: Optional[int] = None
    created_at: datetime
    updated_at: datetime


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    industry: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    logo: Optional[str] = ""
    website: Optional[str] = ""
    employee_count: Optional[EmployeeCount] = None

class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    employee_count: Optional[EmployeeCount] = None
    is_active: Optional[bool] = None

class CompanyResponse(BaseModel):
    id: str
    name: str
    description: str
    industry: str
    location: str
    logo: Optional[str] = ""
    website: Optional[str] = ""
    employee_count: Optional[str] = None
    is_active: bool = True
    open_positions: Optional[int] = None
    created_at: datetime
    updated_at: datetime


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class InterviewSchedule(BaseModel):
    date: datetime
    time: str
    type: InterviewType
    location: Optional[str] = None
    link: Optional[str] = None

class ApplicationCreate(BaseModel):
    job_id: str
    resume_id: Optional[str] = None
    cover_letter: Optional[str] = None

class ApplicationStatusUpdate(BaseModel):
    # validated in the service so a bad value is a plain 400 message
    status: str

class ApplicationUpdate(BaseModel):
    status: Optional[str] = None
    recruiter_notes: Optional[str] = None
    interview_schedule: Optional[InterviewSchedule] = None

class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    candidate_id: str
    resume_id: str
    cover_letter: str = ""
    status: str
    matching_score: int = 0
    applied_at: datetime
    reviewed_at: Optional[datetime] = None
    recruiter_notes: Optional[str] = None
    interview_schedule: Optional[dict] = None
    job: Optional[dict] = None
    candidate: Optional[dict] = None
    updated_at: datetime


# ============================================================
# RECRUITER CANDIDATE SCHEMAS
# ============================================================

class AppliedJob(BaseModel):
    application_id: str
    job_id: str
    job_title: str
    company: dict = {}
    status: str
    matching_score: int = 0
    applied_at: datetime

class CandidateSummary(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    title: Optional[str] = ""
    location: Optional[str] = ""
    skills: List[str] = []
    experience: List[dict] = []
    education: List[dict] = []
    applied_jobs: List[AppliedJob] = []
    match_score: int = 0
    last_applied: datetime
    resume_url: Optional[str] = None

class CandidateDetail(UserResponse):
    resume: Optional[dict] = None
    applications: List[AppliedJob] = []


# ============================================================
# RESUME SCHEMAS
# ============================================================

class ResumeResponse(BaseModel):
    id: str
    user_id: str
    file_name: str
    file_size: int
    file_type: str
    file_url: str
    extracted_text: Optional[str] = None
    parsed_data: dict = {}
    is_parsed: bool = True
    is_primary: bool = False
    ai_suggestions: List[dict] = []
    uploaded_at: datetime
    updated_at: datetime

class ResumeUploadResponse(BaseModel):
    success: bool = True
    message: str
    resume: ResumeResponse
    suggestions: Optional[dict] = None
    skills_added: int = 0

class ResumeUpdate(BaseModel):
    is_primary: Optional[bool] = None
    parsed_data: Optional[dict] = None
    ai_suggestion: Optional[dict] = None

class SuggestionRequest(BaseModel):
    target_job_title: Optional[str] = None


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class NotificationResponse(BaseModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: Optional[Any] = None
    read: bool = False
    action_url: Optional[str] = None
    created_at: datetime


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class PaginationInfo(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

class JobListResponse(BaseModel):
    success: bool = True
    data: List[JobResponse]
    pagination: PaginationInfo

class CompanyListResponse(BaseModel):
    success: bool = True
    data: List[CompanyResponse]
    pagination: PaginationInfo

class ApplicationListResponse(BaseModel):
    success: bool = True
    data: List[ApplicationResponse]
    pagination: PaginationInfo

class MessageResponse(BaseModel):
    message: str
    success: bool = True
