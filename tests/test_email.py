"""Unit tests for the SendGrid email helper utilities."""

from __future__ import annotations

import json
import types

import pytest
from pydantic import ValidationError

from campusshare.config import Settings
from campusshare.infrastructure import email as email_module


def _configured_settings() -> Settings:
    return Settings(sendgrid_api_key="SG.fake", sendgrid_sender="sender@example.com")


class RecordingClient:
    """Stand-in for ``SendGridAPIClient`` returning a fixed response."""

    response = types.SimpleNamespace(status_code=202, body=None)
    messages: list = []

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def send(self, message):
        self.messages.append(message)
        return self.response


def test_send_email_without_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    """When SendGrid settings are missing the helper should exit early."""

    monkeypatch.setattr(email_module, "get_settings", lambda: Settings())

    result = email_module.send_email("user@example.com", "Subject", "Body")

    assert not result
    assert result.reason == "email delivery is not configured"


def test_send_email_success(monkeypatch: pytest.MonkeyPatch) -> None:
    """A 2xx SendGrid response should be reported as sent."""

    class SuccessfulClient(RecordingClient):
        messages: list = []

    monkeypatch.setattr(email_module, "get_settings", _configured_settings)
    monkeypatch.setattr(email_module, "SendGridAPIClient", SuccessfulClient)

    result = email_module.send_email("user@example.com", "Subject", "Plain body")

    assert result
    assert result.reason is None
    assert len(SuccessfulClient.messages) == 1
    payload = SuccessfulClient.messages[0].get()
    assert payload["subject"] == "Subject"
    assert payload["from"]["email"] == "sender@example.com"
    assert payload["content"] == [{"type": "text/plain", "value": "Plain body"}]


def test_send_email_reports_rejected_response(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    class RejectingClient(RecordingClient):
        response = types.SimpleNamespace(
            status_code=400,
            body=json.dumps({"errors": [{"message": "Invalid to address"}]}),
        )

    monkeypatch.setattr(email_module, "get_settings", _configured_settings)
    monkeypatch.setattr(email_module, "SendGridAPIClient", RejectingClient)

    with caplog.at_level("ERROR"):
        result = email_module.send_email("user@example.com", "Subject", "Body")

    assert not result
    assert result.reason == "SendGrid responded with status 400: Invalid to address"
    assert "Invalid to address" in caplog.text


def test_send_email_logs_forbidden_error(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    """Forbidden responses from SendGrid should surface meaningful log details."""

    class FakeForbiddenError(Exception):
        status_code = 403
        body = json.dumps(
            {"errors": [{"message": "The provided authorization grant is invalid."}]}
        ).encode()

    class FailingClient(RecordingClient):
        def send(self, message):
            raise FakeForbiddenError()

    monkeypatch.setattr(email_module, "get_settings", _configured_settings)
    monkeypatch.setattr(email_module, "SendGridAPIClient", FailingClient)

    with caplog.at_level("ERROR"):
        result = email_module.send_email("user@example.com", "Subject", "Body")

    assert result.sent is False
    assert "status 403" in caplog.text
    assert "authorization grant is invalid" in caplog.text


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        (None, None),
        (b"", None),
        ("plain failure", "plain failure"),
        ({"errors": [{"message": "a"}, {"message": "b"}]}, "a; b"),
        (["x", "y"], "x; y"),
    ],
)
def test_extract_sendgrid_error_details(body, expected) -> None:
    assert email_module._extract_sendgrid_error_details(body) == expected


def test_sendgrid_settings_must_be_provided_together() -> None:
    with pytest.raises(ValidationError):
        Settings(sendgrid_api_key="SG.fake")
    with pytest.raises(ValidationError):
        Settings(sendgrid_api_key="SG.fake", sendgrid_sender="not-an-address")
