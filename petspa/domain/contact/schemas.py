"""Contact domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email

SERVICE_LABELS = {
    "general": "General Inquiry",
    "grooming": "Dog Grooming",
    "boarding": "Pet Boarding",
    "other": "Other Services",
}

CONTACT_METHOD_LABELS = {
    "phone": "Phone Call",
    "email": "Email",
    "either": "Either Phone or Email",
}


class ContactSubmission(BaseModel):
    """Contact page form"""

    name: str
    email: str
    phone: Optional[str] = None
    service: str
    contactMethod: str
    message: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        if len(v) > 100:
            raise ValueError("Name is too long")
        return v

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        try:
            normalized = validate_email(v)
        except ValueError:
            raise ValueError("Please enter a valid email address") from None
        if not normalized:
            raise ValueError("Please enter a valid email address")
        return normalized

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v is None:
            return v
        return v.strip() or None

    @field_validator("service")
    @classmethod
    def validate_service(cls, v):
        if v not in SERVICE_LABELS:
            raise ValueError("Please select a service type")
        return v

    @field_validator("contactMethod")
    @classmethod
    def validate_contact_method(cls, v):
        if v not in CONTACT_METHOD_LABELS:
            raise ValueError("Please select a preferred contact method")
        return v

    @field_validator("message")
    @classmethod
    def validate_message(cls, v):
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Message must be at least 10 characters")
        if len(v) > 2000:
            raise ValueError("Message is too long")
        return v

    @property
    def service_label(self) -> str:
        return SERVICE_LABELS[self.service]

    @property
    def contact_method_label(self) -> str:
        return CONTACT_METHOD_LABELS[self.contactMethod]


class ContactResponse(BaseModel):
    success: bool = True
    message: str
    id: Optional[str] = None
