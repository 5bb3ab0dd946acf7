"""
MedAI Backend — Contact Service Unit Tests
============================================

What:  Tests for contact form sanitizing, masking and submission.
Why:   The form is the only user-supplied text the service handles; markup
       must never survive and the log must never hold a full client address.

Test Strategy:
    ✅ Markup, javascript: and inline handlers stripped
    ✅ Phone keeps only dialable characters
    ✅ IP addresses masked in logs
    ✅ Invalid payload raises ValidationError with per-field issues
"""

import logging

import pytest
from unittest.mock import AsyncMock, patch

from app.exceptions import ValidationError
from app.services.contact_service import (
    SUCCESS_MESSAGE,
    ContactService,
    mask_ip,
    sanitize_phone,
    sanitize_text,
)


class TestSanitizers:
    def test_sanitize_text_strips_markup(self):
        assert sanitize_text("<script>alert(1)</script>Hello") == "scriptalert(1)/scriptHello"

    def test_sanitize_text_strips_handlers_and_protocol(self):
        assert sanitize_text("JavaScript:go() onclick=x") == "go() x"

    def test_sanitize_phone(self):
        assert sanitize_phone("+1 (504) 555-0101 ext<9>") == "+1 (504) 555-0101 9"

    def test_mask_ip(self):
        assert mask_ip("203.0.113.254") == "203.0.113...."
        assert mask_ip("10.0.0.1") == "10.0.0.1"


class TestContactService:
    def setup_method(self):
        self.service = ContactService()
        self.payload = {
            "name": "Jordan <b>Lee</b>",
            "email": "jordan.lee@example.com",
            "subject": "Admissions",
            "message": "Is the MS program open to part-time students?",
            "phone": "504-555-0199",
        }

    @pytest.mark.asyncio
    async def test_submit_success(self):
        response = await self.service.submit(self.payload, client_ip="203.0.113.254")
        assert response.success is True
        assert response.message == SUCCESS_MESSAGE

    @pytest.mark.asyncio
    async def test_submit_delivers_sanitized_form(self):
        with patch.object(self.service, "_deliver", new_callable=AsyncMock) as deliver:
            await self.service.submit(self.payload)
        form = deliver.await_args.args[0]
        assert form.name == "Jordan bLee/b"
        assert form.phone == "504-555-0199"

    @pytest.mark.asyncio
    async def test_submit_logs_masked_ip(self, caplog):
        with caplog.at_level(logging.INFO, logger="app.services.contact_service"):
            await self.service.submit(self.payload, client_ip="203.0.113.254")
        assert "203.0.113...." in caplog.text
        assert "203.0.113.254" not in caplog.text

    @pytest.mark.asyncio
    async def test_submit_invalid_payload(self):
        self.payload["email"] = "nope"
        self.payload["message"] = "short"
        with pytest.raises(ValidationError) as exc_info:
            await self.service.submit(self.payload)
        fields = [issue["field"] for issue in exc_info.value.context["issues"]]
        assert fields == ["email", "message"]

    @pytest.mark.asyncio
    async def test_submit_non_object(self):
        with pytest.raises(ValidationError):
            await self.service.submit("hello")
