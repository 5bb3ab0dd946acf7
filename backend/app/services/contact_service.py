"""
MedAI Backend — Contact Form Service
======================================

What:  Validates, sanitizes and records a contact form submission.
Why:   The form is the only write-shaped input the site accepts, so it gets
       the strictest handling: schema check, markup stripping, and a log
       line that never contains the full message or the client's address.
How:   validate_contact_form() → sanitize free-text fields → log summary.
Who:   Called by POST /api/contact (rate limiting happens in middleware).

Submissions are not persisted and no mail is sent; the log line is the
only record. A delivery backend would hook in at `_deliver()`.
"""

import logging
import re
from typing import Any, Optional

from app.schemas.content import ContactFormData
from app.schemas.envelope import ContactResponse
from app.services.validators import validate_contact_form

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = (
    "Your message has been sent successfully. We will get back to you within 24-48 hours."
)

_SCRIPT_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)
_PHONE_DISALLOWED = re.compile(r"[^\d\s\-()+.]")


def sanitize_text(value: str) -> str:
    """Removes angle brackets, `javascript:` and inline event handlers."""
    value = value.replace("<", "").replace(">", "")
    value = _SCRIPT_PROTOCOL.sub("", value)
    value = _EVENT_HANDLER.sub("", value)
    return value.strip()


def sanitize_phone(value: str) -> str:
    return _PHONE_DISALLOWED.sub("", value).strip()


def mask_ip(client_ip: str) -> str:
    return client_ip[:10] + "..." if len(client_ip) > 10 else client_ip


def _truncate(value: Optional[str], length: int) -> Optional[str]:
    if value is None or len(value) <= length:
        return value
    return value[:length] + "..."


class ContactService:
    def sanitize(self, form: ContactFormData) -> ContactFormData:
        return form.model_copy(
            update={
                "name": sanitize_text(form.name),
                "subject": sanitize_text(form.subject),
                "message": sanitize_text(form.message),
                "organization": sanitize_text(form.organization) if form.organization else None,
                "phone": sanitize_phone(form.phone) if form.phone else None,
            }
        )

    async def submit(
        self,
        payload: Any,
        client_ip: str = "unknown",
        user_agent: Optional[str] = None,
    ) -> ContactResponse:
        """
        Raises:
            ValidationError: payload does not satisfy ContactFormData
                (`context["issues"]` lists every offending field)
        """
        form = self.sanitize(validate_contact_form(payload))

        logger.info(
            "Contact form submission from %s <%s> [%s]: subject=%r message=%r",
            form.name,
            form.email,
            mask_ip(client_ip),
            form.subject,
            _truncate(form.message, 100),
            extra={
                "contact_name": form.name,
                "contact_email": form.email,
                "contact_subject": form.subject,
                "contact_message": _truncate(form.message, 100),
                "contact_organization": form.organization,
                "client_ip": mask_ip(client_ip),
                "user_agent": _truncate(user_agent, 50),
            },
        )
        await self._deliver(form)
        return ContactResponse(success=True, message=SUCCESS_MESSAGE)

    async def _deliver(self, form: ContactFormData) -> None:
        logger.debug("Contact submission from %s accepted for delivery", form.email)


# Singleton instance
contact_service = ContactService()
