"""
SlickText SMS Service
Sends lead notifications and customer acknowledgements by text message
"""

import logging
from typing import Optional

import httpx

from ..config import SmsConfig
from ..shared.errors import ChannelDeliveryError
from ..shared.validators import digits_only, validate_us_phone

logger = logging.getLogger(__name__)

# Response text that means "this request shape is not authorized", not a real outage
AUTHORIZATION_HINTS = ("api key", "authorization")


def to_e164(phone: str) -> str:
    """Normalize to +1XXXXXXXXXX where possible, else +<digits>"""
    try:
        return validate_us_phone(phone)
    except ValueError:
        return f"+{digits_only(phone)}"


def is_authorization_rejection(response: httpx.Response) -> bool:
    """True when a non-2xx response says the request shape was not accepted for auth reasons"""
    if response.status_code in (401, 403):
        return True
    text = response.text.lower()
    return any(hint in text for hint in AUTHORIZATION_HINTS)


class SlickTextSmsSender:
    """
    SlickText v1 messages API client.

    Two request shapes are tried in order: addressed to an existing contact id
    (only when the number is already a contact), then addressed to the raw
    mobile number. The next shape is tried only after an authorization-style
    rejection or a transport error; any other non-2xx is final.
    """

    def __init__(
        self,
        config: SmsConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.config = config
        self._transport = transport
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return self.config.configured

    @property
    def _brand_url(self) -> str:
        return f"{self.config.base_url}/brands/{self.config.brand_id}"

    @property
    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    async def _find_contact_id(self, client: httpx.AsyncClient, phone: str) -> Optional[str]:
        try:
            response = await client.get(
                f"{self._brand_url}/contacts",
                params={"mobile_number": phone},
                headers=self._headers,
            )
            if response.is_success:
                contacts = response.json().get("data") or []
                if contacts:
                    contact_id = contacts[0].get("contact_id")
                    logger.debug(f"Found SlickText contact {contact_id} for {phone}")
                    return contact_id
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"⚠️ SlickText contact lookup failed for {phone}: {e}")
        return None

    def _request_shapes(self, contact_id: Optional[str], phone: str, message: str) -> list[tuple[str, dict]]:
        shapes = []
        if contact_id:
            shapes.append(("contact_id", {"contact_id": contact_id, "body": message, "channel": "sms"}))
        shapes.append(("mobile_number", {"to": phone, "body": message, "channel": "sms"}))
        return shapes

    async def send(self, phone: str, message: str, channel: str = "sms") -> dict:
        """
        Send one text message; raises ChannelDeliveryError if it cannot be delivered.

        Returns:
            Dict with the request shape that succeeded and the provider response
        """
        if not self.configured:
            logger.warning(f"⚠️ SlickText API key/brand id not configured - skipping {channel}")
            raise ChannelDeliveryError(channel, "SMS service not configured")

        to_phone = to_e164(phone)
        last_error = "No SMS request shape attempted"

        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            contact_id = await self._find_contact_id(client, to_phone)

            for shape, body in self._request_shapes(contact_id, to_phone, message):
                logger.info(f"📱 Sending {channel} to {to_phone} using {shape} shape")
                try:
                    response = await client.post(
                        f"{self._brand_url}/messages", json=body, headers=self._headers
                    )
                except httpx.HTTPError as e:
                    logger.warning(f"⚠️ SlickText {shape} request failed: {e}")
                    last_error = str(e)
                    continue

                if response.is_success:
                    logger.info(f"✅ {channel} sent to {to_phone} ({shape})")
                    try:
                        payload = response.json()
                    except ValueError:
                        payload = {}
                    return {"shape": shape, "response": payload}

                last_error = f"SMS failed: {response.status_code} - {response.text}"
                if is_authorization_rejection(response):
                    logger.warning(f"⚠️ SlickText rejected {shape} shape ({response.status_code}), trying next")
                    continue

                logger.error(f"❌ SlickText error for {channel}: {last_error}")
                raise ChannelDeliveryError(channel, last_error)

        raise ChannelDeliveryError(channel, last_error)
