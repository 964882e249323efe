"""Health check - database reachability, email and Slack alert configuration"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..email_service import ResendEmailSender, get_email_sender
from ..services.alert_service import get_alert_webhook, send_error_alert

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

SLOW_DATABASE_MS = 1000


def check_database(db: Session) -> dict:
    start = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        latency = round((time.perf_counter() - start) * 1000)
        logger.error(f"❌ Health check database error: {e}")
        return {"status": "error", "message": f"Database unreachable: {e}", "latency": latency}

    latency = round((time.perf_counter() - start) * 1000)
    if latency > SLOW_DATABASE_MS:
        return {"status": "warning", "message": "Database slow", "latency": latency}
    return {"status": "ok", "message": "Connected", "latency": latency}


def check_email(email_sender: ResendEmailSender) -> dict:
    if not email_sender.configured:
        return {"status": "error", "message": "Resend API key not configured"}
    return {"status": "ok", "message": "Email service configured"}


def check_slack_webhook(webhook_url: Optional[str]) -> dict:
    if not webhook_url:
        return {"status": "warning", "message": "Slack webhook not configured (alerts won't be sent)"}
    return {"status": "ok", "message": "Slack webhook configured"}


def overall_status(checks: dict) -> str:
    statuses = [check["status"] for check in checks.values()]
    if "error" in statuses:
        return "unhealthy"
    if "warning" in statuses:
        return "degraded"
    return "healthy"


@router.get("/health")
async def health(
    db: Session = Depends(get_db),
    email_sender: ResendEmailSender = Depends(get_email_sender),
    webhook_url: Optional[str] = Depends(get_alert_webhook),
):
    start = time.perf_counter()
    checks = {
        "site": {"status": "ok", "message": "Site responding"},
        "database": check_database(db),
        "email": check_email(email_sender),
        "slackWebhook": check_slack_webhook(webhook_url),
    }
    status = overall_status(checks)
    if status == "unhealthy":
        failed = ", ".join(name for name, check in checks.items() if check["status"] == "error")
        logger.error(f"❌ Health check failed: {failed}")
        await send_error_alert("/health", f"Form health check failed: {failed}", {"checks": checks}, webhook_url=webhook_url)
    body = {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
        "responseTime": round((time.perf_counter() - start) * 1000),
    }
    return JSONResponse(status_code=503 if status == "unhealthy" else 200, content=body)
