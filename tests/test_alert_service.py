import asyncio
import json
from datetime import datetime, timezone

import httpx

from petspa.services.alert_service import (
    build_alert_blocks,
    mask_contact_fields,
    send_error_alert,
    send_form_error_alert,
)

WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


def test_mask_contact_fields():
    masked = mask_contact_fields(
        {"email": "jane@example.com", "customerPhone": "727-555-0100", "petName": "Biscuit", "phone": ""}
    )

    assert masked == {
        "email": "***@***.***",
        "customerPhone": "***-***-****",
        "petName": "Biscuit",
        "phone": "",
    }


def test_alert_blocks_include_context():
    payload = build_alert_blocks(
        "/api/booking", "boom", {"petName": "Biscuit"}, timestamp=datetime(2026, 10, 19, 16, 0, tzinfo=timezone.utc)
    )

    text = json.dumps(payload)
    assert "`/api/booking`" in text
    assert "10/19/2026, 12:00:00 PM EDT" in text
    assert "Biscuit" in text


def test_send_error_alert_posts_to_webhook():
    captured = []

    def handler(request):
        captured.append(json.loads(request.content))
        return httpx.Response(200, text="ok")

    sent = asyncio.run(
        send_form_error_alert(
            "leads",
            "database down",
            {"email": "jane@example.com"},
            webhook_url=WEBHOOK,
            transport=httpx.MockTransport(handler),
        )
    )

    assert sent is True
    text = json.dumps(captured[0])
    assert "/api/leads" in text
    assert "jane@example.com" not in text


def test_send_error_alert_without_webhook():
    assert asyncio.run(send_error_alert("/api/leads", "boom")) is False


def test_send_error_alert_network_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused")

    sent = asyncio.run(send_error_alert("/api/leads", "boom", webhook_url=WEBHOOK, transport=httpx.MockTransport(handler)))

    assert sent is False
