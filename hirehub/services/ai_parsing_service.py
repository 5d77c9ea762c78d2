"""
AI Parsing Service - the resume intelligence collaborator.

PURPOSE:
AI is used ONLY for:
1. Resume parsing (file -> extracted text + structured JSON)
2. Resume improvement suggestions (text -> suggestions JSON)

The rest of the system only sees the `ResumeAI` interface:
    extract(data, filename) -> ExtractionResult
    suggest(resume_text, target_job_title=None) -> dict

Implementations:
- DeepSeekResumeAI: local text extraction + DeepSeek structuring
- MockResumeAI: deterministic keyword extraction (development and tests)

Selected by settings.ai_provider.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from hirehub.core.config import get_settings
from hirehub.core.logging import get_logger
from hirehub.services.deepseek_client import DeepSeekClient
from hirehub.utils.file_upload import extract_text

logger = get_logger(__name__)


# ============================================================
# JSON VALIDATION HELPERS
# ============================================================

def _str_list(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def _dict_list(value, fields: List[str]) -> List[dict]:
    if not isinstance(value, list):
        return []
    items = []
    for entry in value:
        if isinstance(entry, dict):
            items.append({f: entry.get(f) for f in fields})
    return items


def validate_parsed_resume(data: dict) -> dict:
    """
    Validate and sanitize parsed resume data.
    Ensures all required fields exist with correct types.
    """
    if not isinstance(data, dict):
        data = {}

    return {
        "name": str(data.get("name") or "").strip(),
        "email": data.get("email") or None,
        "phone": data.get("phone") or None,
        "summary": str(data.get("summary") or "").strip(),
        "skills": _str_list(data.get("skills")),
        "experience": _dict_list(
            data.get("experience"),
            ["title", "company", "start_date", "end_date", "current", "description"],
        ),
        "education": _dict_list(
            data.get("education"),
            ["degree", "institution", "field_of_study", "start_date", "end_date", "current"],
        ),
        "certifications": _dict_list(data.get("certifications"), ["name", "issuer", "date"]),
        "languages": _dict_list(data.get("languages"), ["language", "proficiency"]),
    }


def validate_suggestions(data: dict) -> dict:
    """
    Validate suggestion output; score is clamped to 0-100.
    """
    if not isinstance(data, dict):
        data = {}

    try:
        score = int(round(float(data.get("score", 0))))
    except (TypeError, ValueError):
        score = 0

    return {
        "improvements": _str_list(data.get("improvements")),
        "missing_keywords": _str_list(data.get("missing_keywords")),
        "format_suggestions": _str_list(data.get("format_suggestions")),
        "content_suggestions": _str_list(data.get("content_suggestions")),
        "score": max(0, min(100, score)),
        "industry_insights": _str_list(data.get("industry_insights")),
    }


# ============================================================
# CAPABILITY INTERFACE
# ============================================================

@dataclass
class ExtractionResult:
    extracted_text: str
    structured_data: dict = field(default_factory=dict)


class ResumeAIError(Exception):
    """Raised by any ResumeAI implementation when the collaborator fails."""


class ResumeAI:
    """Resume intelligence collaborator."""

    def extract(self, data: bytes, filename: str) -> ExtractionResult:
        raise NotImplementedError

    def suggest(self, resume_text: str, target_job_title: Optional[str] = None) -> dict:
        raise NotImplementedError


class DeepSeekResumeAI(ResumeAI):
    """
    Extract text locally (PDF/DOCX/DOC), let DeepSeek structure it.
    """

    def __init__(self, client: Optional[DeepSeekClient] = None):
        self.client = client or DeepSeekClient()

    def extract(self, data: bytes, filename: str) -> ExtractionResult:
        try:
            text = extract_text(data, filename)
        except Exception as e:
            raise ResumeAIError(f"Could not read {filename}: {e}") from e

        if not text.strip():
            raise ResumeAIError("Could not extract text from file. File may be empty or corrupted.")

        try:
            parsed = self.client.parse_resume(text)
        except Exception as e:
            raise ResumeAIError(f"Failed to parse resume: {e}") from e

        return ExtractionResult(extracted_text=text, structured_data=validate_parsed_resume(parsed))

    def suggest(self, resume_text: str, target_job_title: Optional[str] = None) -> dict:
        try:
            raw = self.client.suggest_improvements(resume_text, target_job_title)
        except Exception as e:
            raise ResumeAIError(f"Failed to get resume suggestions: {e}") from e
        return validate_suggestions(raw)


# Vocabulary for the offline implementation
KNOWN_SKILLS = [
    "Python", "Java", "JavaScript", "TypeScript", "React", "Node", "SQL",
    "MongoDB", "PostgreSQL", "Docker", "Kubernetes", "AWS", "GCP", "Azure",
    "Django", "FastAPI", "Flask", "Go", "Rust", "C++", "Machine Learning",
    "Git", "Linux", "GraphQL", "HTML", "CSS",
]

ATS_KEYWORDS = ["Agile", "CI/CD", "Testing", "Leadership", "Communication"]


class MockResumeAI(ResumeAI):
    """
    Deterministic stand-in: finds known skill names in the raw text.
    """

    def extract(self, data: bytes, filename: str) -> ExtractionResult:
        text = data.decode("utf-8", errors="ignore")
        skills = [
            skill for skill in KNOWN_SKILLS
            if re.search(r"(?<![\w+])" + re.escape(skill) + r"(?![\w+])", text, re.IGNORECASE)
        ]
        structured = validate_parsed_resume({"name": filename.rsplit(".", 1)[0], "skills": skills})
        return ExtractionResult(extracted_text=text, structured_data=structured)

    def suggest(self, resume_text: str, target_job_title: Optional[str] = None) -> dict:
        lowered = resume_text.lower()
        missing = [kw for kw in ATS_KEYWORDS if kw.lower() not in lowered]
        improvements = ["Quantify achievements with concrete numbers"]
        if target_job_title:
            improvements.append(f"Tailor the summary to the {target_job_title} role")
        return validate_suggestions({
            "improvements": improvements,
            "missing_keywords": missing,
            "score": 100 - 10 * len(missing),
        })


def get_resume_ai() -> ResumeAI:
    """Dependency - the configured ResumeAI implementation."""
    provider = get_settings().ai_provider.lower()
    if provider == "mock":
        return MockResumeAI()
    if provider == "deepseek":
        return DeepSeekResumeAI()
    raise ValueError(f"Unknown ai_provider '{provider}'")
