import asyncio
import json

import httpx
import pytest

from petspa.config import SmsConfig
from petspa.services.sms_service import SlickTextSmsSender, is_authorization_rejection, to_e164
from petspa.shared.errors import ChannelDeliveryError

CONFIG = SmsConfig(api_key="sk_test", brand_id="brand_1", base_url="https://api.slicktext.test/v1")
MESSAGES_URL = "https://api.slicktext.test/v1/brands/brand_1/messages"


class SlickTextStub:
    """Scripted SlickText API: contact lookup result plus one response per message POST"""

    def __init__(self, contact_id=None, message_responses=()):
        self.contact_id = contact_id
        self.message_responses = list(message_responses)
        self.message_bodies = []
        self.auth_headers = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.auth_headers.append(request.headers.get("Authorization"))
        if request.url.path.endswith("/contacts"):
            data = [{"contact_id": self.contact_id}] if self.contact_id else []
            return httpx.Response(200, json={"data": data})

        self.message_bodies.append(json.loads(request.content))
        response = self.message_responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def send(stub, phone="727-555-0100"):
    sender = SlickTextSmsSender(CONFIG, transport=httpx.MockTransport(stub))
    return asyncio.run(sender.send(phone, "Hello from the spa", channel="customer_sms"))


def test_known_contact_uses_contact_id_shape():
    stub = SlickTextStub(contact_id="c_42", message_responses=[httpx.Response(201, json={"id": "m_1"})])

    result = send(stub)

    assert result == {"shape": "contact_id", "response": {"id": "m_1"}}
    assert stub.message_bodies == [{"contact_id": "c_42", "body": "Hello from the spa", "channel": "sms"}]
    assert set(stub.auth_headers) == {"Bearer sk_test"}


def test_unknown_contact_goes_straight_to_mobile_number_shape():
    stub = SlickTextStub(message_responses=[httpx.Response(200, json={"id": "m_2"})])

    result = send(stub)

    assert result["shape"] == "mobile_number"
    assert stub.message_bodies == [{"to": "+17275550100", "body": "Hello from the spa", "channel": "sms"}]


@pytest.mark.parametrize(
    "rejection",
    [
        httpx.Response(401, json={"error": "Unauthorized"}),
        httpx.Response(403, text="Forbidden"),
        httpx.Response(400, json={"message": "Invalid API key for this endpoint"}),
        httpx.Response(422, text="Missing Authorization scope"),
    ],
)
def test_authorization_rejection_falls_through_to_next_shape(rejection):
    stub = SlickTextStub(contact_id="c_42", message_responses=[rejection, httpx.Response(200, json={"id": "m_3"})])

    result = send(stub)

    assert result["shape"] == "mobile_number"
    assert len(stub.message_bodies) == 2


def test_transport_error_falls_through_to_next_shape():
    stub = SlickTextStub(
        contact_id="c_42",
        message_responses=[httpx.ConnectError("connection reset"), httpx.Response(200, json={})],
    )

    assert send(stub)["shape"] == "mobile_number"


def test_other_errors_are_terminal():
    stub = SlickTextStub(
        contact_id="c_42",
        message_responses=[httpx.Response(500, text="Internal Server Error"), httpx.Response(200, json={})],
    )

    with pytest.raises(ChannelDeliveryError) as exc_info:
        send(stub)

    assert exc_info.value.channel == "customer_sms"
    assert "500" in exc_info.value.reason
    assert len(stub.message_bodies) == 1


def test_every_shape_rejected_raises():
    stub = SlickTextStub(
        contact_id="c_42",
        message_responses=[httpx.Response(401, text="no"), httpx.Response(401, text="still no")],
    )

    with pytest.raises(ChannelDeliveryError) as exc_info:
        send(stub)

    assert "401" in exc_info.value.reason


def test_unconfigured_sender_never_calls_the_api():
    calls = []
    sender = SlickTextSmsSender(SmsConfig(), transport=httpx.MockTransport(lambda r: calls.append(r)))

    with pytest.raises(ChannelDeliveryError, match="not configured"):
        asyncio.run(sender.send("7275550100", "hi"))
    assert calls == []


def test_is_authorization_rejection():
    assert is_authorization_rejection(httpx.Response(401))
    assert is_authorization_rejection(httpx.Response(400, text="Bad API Key"))
    assert not is_authorization_rejection(httpx.Response(400, text="Invalid phone number"))
    assert not is_authorization_rejection(httpx.Response(503))


def test_to_e164():
    assert to_e164("(727) 555-0100") == "+17275550100"
    assert to_e164("1-727-555-0100") == "+17275550100"
    assert to_e164("+44 20 7946 0958") == "+442079460958"
