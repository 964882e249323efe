"""
Email Service using Resend
Compiles MJML templates to HTML and hands them to the Resend API
"""

import asyncio
import logging
from typing import Callable, Optional, Union

import resend
from mjml import mjml_to_html

from .config import EmailConfig, load_notification_config
from .shared.errors import ChannelDeliveryError

logger = logging.getLogger(__name__)


def compile_mjml_to_html(mjml_content: str) -> str:
    """Render an MJML document to inline-styled HTML"""
    try:
        compiled = mjml_to_html(mjml_content)
    except Exception as e:
        logger.error(f"❌ MJML compile failed: {e}")
        raise ValueError(f"Invalid MJML template: {e}") from e

    # mjml returns a ParseResult(html, errors); some builds hand back a dict
    if isinstance(compiled, dict):
        html, errors = compiled.get("html", ""), compiled.get("errors")
    else:
        html, errors = compiled.html, compiled.errors
    if errors:
        logger.warning(f"⚠️ MJML warnings: {errors}")
    return html or ""


class ResendEmailSender:
    """Sends templated email through Resend with a fixed sender address"""

    def __init__(self, config: EmailConfig, send_func: Optional[Callable[[dict], dict]] = None):
        self.config = config
        self._send_func = send_func

    @property
    def configured(self) -> bool:
        return self.config.configured

    def _dispatch(self, email_data: dict) -> dict:
        if self._send_func is not None:
            return self._send_func(email_data)
        resend.api_key = self.config.api_key
        return resend.Emails.send(email_data)

    async def send(
        self,
        to: Union[str, list[str]],
        subject: str,
        mjml_content: str,
        reply_to: Optional[str] = None,
        channel: str = "email",
    ) -> dict:
        """
        Send an email; raises ChannelDeliveryError on any failure.

        Args:
            to: Recipient email(s)
            subject: Email subject line
            mjml_content: MJML template content (will be compiled to HTML)
            reply_to: Reply-To address, defaults to the shop inbox
            channel: Channel name used in errors and logs

        Returns:
            Resend response dict
        """
        if not self.configured:
            logger.warning(f"⚠️ RESEND_API_KEY missing - skipping {channel}")
            raise ChannelDeliveryError(channel, "Email service not configured")

        recipients = [to] if isinstance(to, str) else to
        try:
            html = compile_mjml_to_html(mjml_content)
        except Exception as e:
            raise ChannelDeliveryError(channel, f"Failed to render email: {e}") from e

        email_data = {
            "from": self.config.from_address,
            "to": recipients,
            "subject": subject,
            "html": html,
            "reply_to": reply_to or self.config.reply_to,
        }

        try:
            logger.info(f"📧 Sending {channel} via Resend to: {recipients}")
            # The Resend SDK is synchronous; keep the event loop free for the other channels
            response = await asyncio.to_thread(self._dispatch, email_data)
        except Exception as e:
            logger.error(f"❌ Email send error to {recipients}: {e}")
            raise ChannelDeliveryError(channel, f"Failed to send email: {e}") from e

        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response


def get_email_sender() -> ResendEmailSender:
    """FastAPI dependency for the configured Resend sender"""
    return ResendEmailSender(load_notification_config().email)
