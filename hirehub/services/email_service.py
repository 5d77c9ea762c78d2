"""
Email Service - outbound mail through the Resend HTTP API.

Callers treat every send as fire-and-forget: `send` raises on failure,
`fire_and_forget` catches and logs instead.
"""

from html import escape
from typing import List, Optional, Union

import httpx

from hirehub.core.config import Settings, get_settings
from hirehub.core.logging import get_logger

logger = get_logger(__name__)


class EmailDeliveryError(Exception):
    pass


def _layout(heading: str, body: str, color: str = "#0077b5") -> str:
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h1 style="color: {color};">{heading}</h1>{body}</div>'
    )


def _button(url: str, label: str) -> str:
    return (
        f'<a href="{escape(url)}" style="display: inline-block; padding: 12px 24px; '
        f'background-color: #0077b5; color: white; text-decoration: none; border-radius: 4px;">{label}</a>'
    )


class EmailService:
    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.Client] = None):
        self.settings = settings or get_settings()
        self._client = client

    def send(self, to: Union[str, List[str]], subject: str, html: str) -> Optional[dict]:
        """
        Send one email. Without an API key the message is only logged.

        Raises:
            EmailDeliveryError when the provider rejects or is unreachable
        """
        recipients = to if isinstance(to, list) else [to]

        if not self.settings.resend_api_key:
            logger.info("email_skipped_no_api_key", to=recipients, subject=subject)
            return None

        payload = {
            "from": self.settings.email_sender,
            "to": recipients,
            "subject": subject,
            "html": html,
        }
        headers = {"Authorization": f"Bearer {self.settings.resend_api_key}"}

        try:
            if self._client is not None:
                resp = self._client.post(self.settings.resend_api_url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=self.settings.email_timeout_seconds) as client:
                    resp = client.post(self.settings.resend_api_url, json=payload, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"Failed to send email to {recipients}: {e}") from e

        logger.info("email_sent", to=recipients, subject=subject)
        return resp.json()

    # ------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------

    def send_verification_email(self, email: str, token: str):
        url = f"{self.settings.app_url}/auth/verify-email?token={token}"
        html = _layout(
            "Verify Your Email",
            "<p>Please click the button below to verify your email address:</p>"
            + _button(url, "Verify Email")
            + "<p>If you didn't create an account, you can safely ignore this email.</p>",
        )
        return self.send(email, "Verify Your Email - HireHub", html)

    def send_password_reset_email(self, email: str, token: str):
        url = f"{self.settings.app_url}/auth/reset-password?token={token}"
        html = _layout(
            "Reset Your Password",
            "<p>Please click the button below to reset your password:</p>"
            + _button(url, "Reset Password")
            + "<p>This link will expire in 1 hour.</p>",
        )
        return self.send(email, "Reset Your Password - HireHub", html)

    def send_application_confirmation(self, email: str, job_title: str):
        html = _layout(
            "Application Submitted",
            f"<p>Your application for <strong>{escape(job_title)}</strong> has been successfully submitted.</p>"
            "<p>You can track your application status from your dashboard.</p>",
        )
        return self.send(email, f"Application Submitted: {job_title}", html)

    def send_shortlisted_email(self, email: str, job_title: str, company: str):
        html = _layout(
            "Congratulations! You've been shortlisted",
            f"<p>Your application for <strong>{escape(job_title)}</strong> at "
            f"<strong>{escape(company)}</strong> has been shortlisted.</p>"
            "<p>The recruiter will contact you soon for the next steps.</p>",
            color="#00a866",
        )
        return self.send(email, f"Congratulations! Shortlisted for {job_title}", html)


def fire_and_forget(action: str, fn, *args, **kwargs) -> bool:
    """Run a send, log any failure, never raise. Returns True on success."""
    try:
        fn(*args, **kwargs)
        return True
    except Exception as e:
        logger.error("email_failed", action=action, error=str(e))
        return False


def get_email_service() -> EmailService:
    """Dependency - the outbound email service."""
    return EmailService()
