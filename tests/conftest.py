import os

# Must be set before petspa.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_PASSWORD"] = "letmein"
os.environ["SLACK_ERROR_WEBHOOK"] = ""
os.environ["SLACK_ANALYTICS_WEBHOOK"] = ""
os.environ["BUSINESS_TIMEZONE"] = "America/New_York"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from petspa.config import EmailConfig, NotificationConfig, SmsConfig
from petspa.database import Base, get_db
from petspa.domain.leads.router import get_notification_dispatcher
from petspa.email_service import ResendEmailSender, get_email_sender
from petspa.main import app
from petspa.services.notification_service import LeadNotificationDispatcher
from petspa.shared.errors import ChannelDeliveryError

engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_EMAIL = "frontdesk@pupperazipetspa.com"
BUSINESS_PHONE = "+16173472721"


class FakeSmsSender:
    """Records texts instead of calling SlickText; can fail chosen channels"""

    def __init__(self, fail_channels=()):
        self.sent = []
        self.fail_channels = set(fail_channels)

    async def send(self, phone, message, channel="sms"):
        if channel in self.fail_channels:
            raise ChannelDeliveryError(channel, "SMS failed: 500 - provider down")
        self.sent.append({"phone": phone, "message": message, "channel": channel})
        return {"shape": "mobile_number", "response": {"id": len(self.sent)}}


class RecordingEmailApi:
    """Stands in for resend.Emails.send; raises for chosen recipients"""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def __call__(self, email_data):
        if self.fail_for & set(email_data["to"]):
            raise RuntimeError("Resend API error: 422 invalid recipient")
        self.sent.append(email_data)
        return {"id": f"email_{len(self.sent)}"}

    def to(self, address):
        return [e for e in self.sent if address in e["to"]]


@pytest.fixture
def notification_config():
    return NotificationConfig(
        sms=SmsConfig(api_key="sk_test", brand_id="brand_1", business_phone=BUSINESS_PHONE),
        email=EmailConfig(api_key="re_test", admin_email=ADMIN_EMAIL),
    )


@pytest.fixture
def sms_sender():
    return FakeSmsSender()


@pytest.fixture
def email_api():
    return RecordingEmailApi()


@pytest.fixture
def email_sender(notification_config, email_api):
    return ResendEmailSender(notification_config.email, send_func=email_api)


@pytest.fixture
def dispatcher(notification_config, sms_sender, email_sender):
    return LeadNotificationDispatcher(notification_config, sms_sender=sms_sender, email_sender=email_sender)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session, dispatcher, email_sender):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/admin/auth", json={"password": "letmein"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def lead_payload():
    return {
        "nameAndPhone": "Jane Doe - 727-555-0100",
        "email": "Jane.Doe@Example.com",
        "newCustomer": "yes",
        "petsNameAndBreed": "Biscuit, Golden Retriever",
        "dateTimeRequested": "Saturday morning",
        "message": "Biscuit needs a full groom before our vacation.",
    }
