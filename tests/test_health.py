from petspa.config import EmailConfig
from petspa.email_service import ResendEmailSender, get_email_sender
from petspa.main import app
from petspa.routes import health as health_route
from petspa.routes.health import check_slack_webhook, overall_status
from petspa.services.alert_service import get_alert_webhook

WEBHOOK = "https://hooks.slack.com/services/T000/B000/ALERTS"


def test_health_all_ok(client):
    app.dependency_overrides[get_alert_webhook] = lambda: WEBHOOK

    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"]["database"]["status"] == "ok"
    assert body["checks"]["email"]["status"] == "ok"
    assert body["checks"]["slackWebhook"] == {"status": "ok", "message": "Slack webhook configured"}
    assert "responseTime" in body


def test_health_without_slack_webhook_is_degraded(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["checks"]["slackWebhook"]["status"] == "warning"


def test_health_without_email_is_unhealthy(client, monkeypatch):
    alerts = []

    async def fake_alert(endpoint, error, context=None, webhook_url=None):
        alerts.append((endpoint, error, webhook_url))
        return True

    monkeypatch.setattr(health_route, "send_error_alert", fake_alert)
    app.dependency_overrides[get_email_sender] = lambda: ResendEmailSender(EmailConfig(api_key=None))
    app.dependency_overrides[get_alert_webhook] = lambda: WEBHOOK

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
    assert response.json()["checks"]["email"]["message"] == "Resend API key not configured"
    assert alerts == [("/health", "Form health check failed: email", WEBHOOK)]


def test_healthy_check_sends_no_alert(client, monkeypatch):
    alerts = []

    async def fake_alert(*args, **kwargs):
        alerts.append(args)
        return True

    monkeypatch.setattr(health_route, "send_error_alert", fake_alert)
    app.dependency_overrides[get_alert_webhook] = lambda: WEBHOOK

    assert client.get("/health").json()["status"] == "healthy"
    assert alerts == []


def test_check_slack_webhook():
    assert check_slack_webhook(None)["message"] == "Slack webhook not configured (alerts won't be sent)"
    assert check_slack_webhook("")["status"] == "warning"
    assert check_slack_webhook(WEBHOOK)["status"] == "ok"


def test_overall_status():
    ok = {"status": "ok"}
    assert overall_status({"a": ok, "b": ok}) == "healthy"
    assert overall_status({"a": ok, "b": {"status": "warning"}}) == "degraded"
    assert overall_status({"a": {"status": "warning"}, "b": {"status": "error"}}) == "unhealthy"
