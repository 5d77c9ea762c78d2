"""
DeepSeek API Client

DeepSeek uses OpenAI-compatible API, so we use the openai library.

COST OPTIMIZATION:
- Use deepseek-chat model (cheapest)
- Keep prompts short and structured
- Low temperature for structured output

Calls are bounded by `ai_timeout_seconds` and retried at most
`ai_max_retries` times by the openai client itself.
"""
import json
from typing import Optional

from openai import OpenAI

from hirehub.core.config import Settings, get_settings


RESUME_PARSER_PROMPT = """You are a resume parsing assistant. Extract information and return ONLY valid JSON.
Output format:
{
  "name": "string",
  "email": "string or null",
  "phone": "string or null",
  "summary": "string",
  "skills": ["skill1", "skill2"],
  "experience": [{"title": "string", "company": "string", "start_date": "string",
                  "end_date": "string or null", "current": boolean, "description": "string"}],
  "education": [{"degree": "string", "institution": "string", "field_of_study": "string",
                 "start_date": "string", "end_date": "string or null", "current": boolean}],
  "certifications": [{"name": "string", "issuer": "string", "date": "string"}],
  "languages": [{"language": "string", "proficiency": "string"}]
}
Return ONLY the JSON, no explanation."""


SUGGESTIONS_PROMPT = """You are a professional resume writer and career coach.
Analyze the resume and return ONLY valid JSON:
{
  "improvements": ["string"],
  "missing_keywords": ["string"],
  "format_suggestions": ["string"],
  "content_suggestions": ["string"],
  "score": number between 0 and 100,
  "industry_insights": ["string"]
}
Missing keywords are terms an Applicant Tracking System would look for.
Return ONLY the JSON, no explanation."""


class DeepSeekClient:
    """
    Wrapper for DeepSeek API with cost-optimized methods.
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.client = OpenAI(
            api_key=settings.deepseek_api_key,
            base_url=settings.deepseek_base_url,
            timeout=settings.ai_timeout_seconds,
            max_retries=settings.ai_max_retries,
        )
        self.model = settings.deepseek_model

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 1000,
                  temperature: float = 0.1) -> str:
        """
        Internal method to call DeepSeek API.
        Returns raw text response.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            max_tokens=max_tokens,
            temperature=temperature
        )
        return response.choices[0].message.content or ""

    def _extract_json(self, text: str) -> dict:
        """
        Extract JSON from API response.
        Handles cases where model wraps JSON in markdown code blocks.
        """
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        return json.loads(text.strip())

    def parse_resume(self, resume_text: str) -> dict:
        """
        Parse resume text and extract structured data.
        """
        response = self._call_api(RESUME_PARSER_PROMPT, resume_text, max_tokens=2000)
        return self._extract_json(response)

    def suggest_improvements(self, resume_text: str, target_job_title: Optional[str] = None) -> dict:
        """
        Ask for resume improvement suggestions, optionally for a target role.
        """
        content = f"Resume:\n{resume_text}"
        if target_job_title:
            content += f"\n\nTarget Job Title: {target_job_title}"

        response = self._call_api(SUGGESTIONS_PROMPT, content, max_tokens=2000, temperature=0.3)
        return self._extract_json(response)
