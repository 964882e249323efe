import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./petspa.db")

# SlickText SMS Configuration
SLICKTEXT_API_KEY = os.getenv("SLICKTEXT_API_KEY")
SLICKTEXT_BRAND_ID = os.getenv("SLICKTEXT_BRAND_ID")
SLICKTEXT_BASE_URL = os.getenv("SLICKTEXT_BASE_URL", "https://dev.slicktext.com/v1")

# Business line that receives every new-lead text (617-347-2721)
BUSINESS_PHONE = os.getenv("BUSINESS_PHONE", "+16173472721")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Pupperazi Pet Spa <contact@krezzo.com>")
EMAIL_REPLY_TO = os.getenv("EMAIL_REPLY_TO", "contact@krezzo.com")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")

# Slack webhooks for error alerts and the weekly leads report
SLACK_ANALYTICS_WEBHOOK = os.getenv("SLACK_ANALYTICS_WEBHOOK")
SLACK_ERROR_WEBHOOK = os.getenv("SLACK_ERROR_WEBHOOK") or SLACK_ANALYTICS_WEBHOOK

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
ADMIN_TOKEN_EXPIRE_HOURS = int(os.getenv("ADMIN_TOKEN_EXPIRE_HOURS", "24"))

# Analytics buckets are computed in the shop's local time
BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "America/New_York")

SITE_URL = os.getenv("SITE_URL", "https://pupperazipetspa.com")


class SmsConfig(BaseModel):
    """SlickText credentials and routing"""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    brand_id: Optional[str] = None
    base_url: str = "https://dev.slicktext.com/v1"
    business_phone: str = "+16173472721"

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.brand_id)


class EmailConfig(BaseModel):
    """Resend credentials and addressing"""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    from_address: str = "Pupperazi Pet Spa <contact@krezzo.com>"
    reply_to: str = "contact@krezzo.com"
    admin_email: Optional[str] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


class NotificationConfig(BaseModel):
    """Everything the lead notification dispatcher needs, built once at startup"""

    model_config = ConfigDict(frozen=True)

    sms: SmsConfig
    email: EmailConfig


def load_notification_config() -> NotificationConfig:
    return NotificationConfig(
        sms=SmsConfig(
            api_key=SLICKTEXT_API_KEY,
            brand_id=SLICKTEXT_BRAND_ID,
            base_url=SLICKTEXT_BASE_URL,
            business_phone=BUSINESS_PHONE,
        ),
        email=EmailConfig(
            api_key=RESEND_API_KEY,
            from_address=EMAIL_FROM_ADDRESS,
            reply_to=EMAIL_REPLY_TO,
            admin_email=ADMIN_EMAIL,
        ),
    )


# CORS Configuration
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "https://pupperazipetspa.com,https://www.pupperazipetspa.com,http://localhost:3000",
).split(",")
