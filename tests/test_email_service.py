import asyncio

import pytest

from petspa import email_service
from petspa.config import EmailConfig
from petspa.email_service import ResendEmailSender, compile_mjml_to_html
from petspa.email_templates import contact_notification_template
from petspa.shared.errors import ChannelDeliveryError

MJML = "<mjml><mj-body><mj-section><mj-column><mj-text>Hello</mj-text></mj-column></mj-section></mj-body></mjml>"


def test_send_builds_resend_payload(email_sender, email_api):
    response = asyncio.run(email_sender.send(to="jane@example.com", subject="Hi", mjml_content=MJML))

    assert response == {"id": "email_1"}
    sent = email_api.sent[0]
    assert sent["to"] == ["jane@example.com"]
    assert sent["from"] == email_sender.config.from_address
    assert sent["reply_to"] == email_sender.config.reply_to
    assert "Hello" in sent["html"]


def test_send_without_api_key():
    sender = ResendEmailSender(EmailConfig(api_key=None), send_func=lambda data: {"id": "never"})

    with pytest.raises(ChannelDeliveryError) as excinfo:
        asyncio.run(sender.send(to="jane@example.com", subject="Hi", mjml_content=MJML, channel="customer_email"))

    assert excinfo.value.channel == "customer_email"
    assert excinfo.value.reason == "Email service not configured"


def test_send_wraps_provider_errors(email_sender, email_api):
    email_api.fail_for.add("jane@example.com")

    with pytest.raises(ChannelDeliveryError) as excinfo:
        asyncio.run(email_sender.send(to="jane@example.com", subject="Hi", mjml_content=MJML))

    assert "422 invalid recipient" in excinfo.value.reason


def test_compile_real_template_to_html():
    mjml_content = contact_notification_template(
        name="Jane <b>Doe</b>",
        email="jane@example.com",
        service="Dog Grooming",
        contact_method="Email",
        message="Do you have openings next week?",
    )

    html = compile_mjml_to_html(mjml_content)

    assert "<html" in html.lower()
    assert "Do you have openings next week?" in html
    assert "Jane &lt;b&gt;Doe&lt;/b&gt;" in html
    assert "<mj-" not in html


def test_compile_accepts_dict_results(monkeypatch):
    monkeypatch.setattr(email_service, "mjml_to_html", lambda content: {"html": "<p>ok</p>", "errors": []})

    assert compile_mjml_to_html(MJML) == "<p>ok</p>"


def test_render_failure_is_a_channel_error(email_sender, email_api, monkeypatch):
    def broken(content):
        raise RuntimeError("unexpected tag")

    monkeypatch.setattr(email_service, "mjml_to_html", broken)

    with pytest.raises(ChannelDeliveryError) as excinfo:
        asyncio.run(email_sender.send(to="jane@example.com", subject="Hi", mjml_content=MJML, channel="contact_email"))

    assert excinfo.value.channel == "contact_email"
    assert "unexpected tag" in excinfo.value.reason
    assert email_api.sent == []
