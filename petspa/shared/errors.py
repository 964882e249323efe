"""Error taxonomy shared by the intake routes and notification channels"""


class ValidationError(Exception):
    """A submission failed field-level checks.

    ``details`` holds one ``{"field": ..., "message": ...}`` entry per failing
    field, in schema order.
    """

    def __init__(self, details: list[dict], message: str = "Please check your form data."):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> dict:
        return {"error": self.message, "details": self.details}


class ChannelDeliveryError(Exception):
    """A single notification channel could not deliver (credentials, HTTP status, network)"""

    def __init__(self, channel: str, reason: str):
        super().__init__(f"{channel}: {reason}")
        self.channel = channel
        self.reason = reason
