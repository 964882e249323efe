"""
MJML Email Templates
Customer confirmations and staff notifications for the intake forms
"""

from typing import Optional

from .config import EMAIL_REPLY_TO, SITE_URL
from .utils.sanitization import sanitize_dict, sanitize_string

# Pupperazi brand colors - Indigo/Violet
THEME = {
    "primary": "#667eea",
    "primary_dark": "#764ba2",
    "primary_light": "#e8eaf6",
    "background": "#f7fafc",
    "card_bg": "#ffffff",
    "text_primary": "#2d3748",
    "text_secondary": "#4a5568",
    "text_muted": "#718096",
    "border": "#e1e5e9",
    "success": "#48bb78",
    "accent": "#805ad5",
    "danger": "#e53e3e",
}

BUSINESS_NAME = "Pupperazi Pet Spa"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    footer_note: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="#ffffff" padding="0 40px 32px 40px">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="6px"
              padding="0"
              inner-padding="12px 30px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    footer_text = ""
    if footer_note:
        footer_text = f"""
        <mj-text align="center" font-size="12px" color="#a0aec0" padding="12px 0 0 0">
          {footer_note}
        </mj-text>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{THEME['primary']}" padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="26px" font-weight="700" color="#ffffff" padding="0">
              {title}
            </mj-text>
            <mj-text align="center" font-size="14px" color="{THEME['primary_light']}" padding="8px 0 0 0">
              {BUSINESS_NAME}
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="32px 40px 16px 40px">
          <mj-column>
            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="14px" color="{THEME['text_muted']}" padding="0">
              {BUSINESS_NAME} &middot; {EMAIL_REPLY_TO}
            </mj-text>
            {footer_text}
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _detail_row(label: str, value: Optional[str]) -> str:
    if not value:
        return ""
    return f"""
    <mj-text padding="0 0 8px 0">
      <strong>{label}:</strong> {value}
    </mj-text>
    """


def _quote_block(text: str) -> str:
    return f"""
    <mj-text padding="8px 0 16px 0" container-background-color="{THEME['background']}">
      <em>"{text}"</em>
    </mj-text>
    """


def lead_confirmation_template(
    customer_name: str,
    customer_type: str,
    pets: str,
    message: str,
    email: str,
    date_time_requested: Optional[str] = None,
) -> str:
    """Thank-you email sent to the person who filled in the lead popup"""
    content = f"""
    <mj-text font-size="20px" font-weight="600" color="{THEME['text_primary']}">
      Hi {sanitize_string(customer_name) or 'Valued Customer'}!
    </mj-text>
    <mj-text>
      Thank you for reaching out to {BUSINESS_NAME}! We're excited to help you and your furry friend(s).
    </mj-text>
    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="16px 0 8px 0">
      Your Information:
    </mj-text>
    {_detail_row("Customer Type", customer_type)}
    {_detail_row("Pet(s)", sanitize_string(pets))}
    {_detail_row("Requested Date/Time", sanitize_string(date_time_requested))}
    <mj-text padding="8px 0 0 0"><strong>Your Message:</strong></mj-text>
    {_quote_block(sanitize_string(message))}
    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="8px 0">
      What Happens Next?
    </mj-text>
    <mj-text>
      Our team will review your inquiry and get back to you within 24 hours.
      You may also receive a text message confirmation.
    </mj-text>
    """

    return get_base_template(
        title=f"Welcome to {BUSINESS_NAME}!",
        preview_text="Thank you for your interest in our services",
        content_sections=content,
        cta_url=SITE_URL,
        cta_label="Visit Our Website",
        footer_note=(
            f"This email was sent to {sanitize_string(email)}. If you no longer wish to "
            'receive emails, please reply with "unsubscribe".'
        ),
    )


def new_lead_notification_template(
    name_and_phone: str,
    email: str,
    customer_type: str,
    pets: str,
    message: str,
    customer_phone_digits: str = "",
    date_time_requested: Optional[str] = None,
    submitted_at: Optional[str] = None,
) -> str:
    """Internal notification for staff when a lead comes in"""
    safe_email = sanitize_string(email)

    if customer_phone_digits:
        phone_actions = f"""
        <mj-button href="sms:{customer_phone_digits}" background-color="{THEME['success']}" inner-padding="10px 24px">
          Text Customer
        </mj-button>
        <mj-button href="tel:{customer_phone_digits}" background-color="{THEME['accent']}" inner-padding="10px 24px">
          Call Customer
        </mj-button>
        """
    else:
        phone_actions = f"""
        <mj-text align="center" color="{THEME['text_muted']}"><em>No phone number provided</em></mj-text>
        """

    content = f"""
    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="0 0 12px 0">
      Lead Details
    </mj-text>
    {_detail_row("Name &amp; Phone", sanitize_string(name_and_phone))}
    {_detail_row("Email", f'<a href="mailto:{safe_email}" style="color: {THEME["primary"]};">{safe_email}</a>')}
    {_detail_row("Customer Type", customer_type)}
    {_detail_row("Pet(s) Name &amp; Breed(s)", sanitize_string(pets))}
    {_detail_row("Date &amp; Time Requested", sanitize_string(date_time_requested))}
    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="16px 0 8px 0">
      Customer Message:
    </mj-text>
    {_quote_block(sanitize_string(message))}
    <mj-button href="mailto:{safe_email}" background-color="{THEME['primary']}" inner-padding="10px 24px">
      Email Customer
    </mj-button>
    {phone_actions}
    """

    return get_base_template(
        title="New Lead Received!",
        preview_text="Someone is interested in our services",
        content_sections=content,
        footer_note=f"This lead was submitted on {submitted_at}" if submitted_at else None,
    )


def contact_notification_template(
    name: str,
    email: str,
    service: str,
    contact_method: str,
    message: str,
    phone: Optional[str] = None,
    submitted_at: Optional[str] = None,
) -> str:
    """Contact-page submission forwarded to the shop inbox"""
    safe_email = sanitize_string(email)
    safe_phone = sanitize_string(phone)
    phone_row = _detail_row("Phone", f'<a href="tel:{safe_phone}">{safe_phone}</a>') if phone else ""

    content = f"""
    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="0 0 12px 0">
      Contact Information
    </mj-text>
    {_detail_row("Name", sanitize_string(name))}
    {_detail_row("Email", f'<a href="mailto:{safe_email}">{safe_email}</a>')}
    {phone_row}
    {_detail_row("Service Interest", service)}
    {_detail_row("Preferred Contact Method", contact_method)}
    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="16px 0 8px 0">
      Message:
    </mj-text>
    {_quote_block(sanitize_string(message))}
    """

    return get_base_template(
        title="New Contact Form Submission",
        preview_text=f"{sanitize_string(name)} sent a message",
        content_sections=content,
        footer_note=(
            f"This message was sent from the {BUSINESS_NAME} contact form"
            + (f"<br>Timestamp: {submitted_at}" if submitted_at else "")
        ),
    )


def _services_rows(services: list[dict]) -> str:
    return "".join(
        f"""
        <mj-text padding="0 0 6px 0">
          &bull; {sanitize_string(s['name'])} ({sanitize_string(s['price'])}) - {s['duration']}min
        </mj-text>
        """
        for s in services
    )


def booking_confirmation_template(
    booking_id: str,
    first_name: str,
    pet_name: str,
    services: list[dict],
    date: str,
    time: str,
    total_duration: int,
) -> str:
    """Appointment confirmation for the customer"""
    content = f"""
    <mj-text font-size="20px" font-weight="600" color="{THEME['text_primary']}">
      Hi {sanitize_string(first_name)}!
    </mj-text>
    <mj-text>
      Your appointment for {sanitize_string(pet_name)} is confirmed. Here are the details:
    </mj-text>
    {_detail_row("Booking ID", booking_id)}
    {_detail_row("Date", sanitize_string(date))}
    {_detail_row("Time", sanitize_string(time))}
    {_detail_row("Estimated Duration", f"{total_duration} minutes")}
    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="16px 0 8px 0">
      Services:
    </mj-text>
    {_services_rows(services)}
    <mj-text padding="16px 0 0 0">
      Need to reschedule? Just reply to this email or give us a call.
    </mj-text>
    """

    return get_base_template(
        title="Appointment Confirmed!",
        preview_text=f"Booking {booking_id} is confirmed",
        content_sections=content,
        cta_url=SITE_URL,
        cta_label="Visit Our Website",
    )


def new_booking_notification_template(
    booking_id: str,
    owner: dict,
    pet: dict,
    services: list[dict],
    date: str,
    time: str,
    total_duration: int,
    preferences: dict,
) -> str:
    """Staff notification for a booking made through the wizard"""
    owner = sanitize_dict(owner)
    pet = sanitize_dict(pet)
    preferences = sanitize_dict(preferences)

    content = f"""
    {_detail_row("Booking ID", booking_id)}
    {_detail_row("Date", sanitize_string(date))}
    {_detail_row("Time", sanitize_string(time))}
    {_detail_row("Duration", f"{total_duration} minutes")}
    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="16px 0 8px 0">
      Owner
    </mj-text>
    {_detail_row("Name", f"{owner.get('firstName', '')} {owner.get('lastName', '')}")}
    {_detail_row("Email", owner.get("email"))}
    {_detail_row("Phone", owner.get("phone"))}
    {_detail_row("Address", owner.get("address"))}
    {_detail_row("Emergency Contact", owner.get("emergencyContact"))}
    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="16px 0 8px 0">
      Pet
    </mj-text>
    {_detail_row("Name", pet.get("name"))}
    {_detail_row("Breed", pet.get("breed"))}
    {_detail_row("Size", pet.get("size"))}
    {_detail_row("Notes", pet.get("notes"))}
    <mj-text font-weight="600" color="{THEME['text_primary']}" padding="16px 0 8px 0">
      Services
    </mj-text>
    {_services_rows(services)}
    {_detail_row("Contact Method", preferences.get("contactMethod"))}
    {_detail_row("Reminders", preferences.get("reminderPreference"))}
    {_detail_row("Marketing Consent", "Yes" if preferences.get("marketingConsent") else "No")}
    """

    return get_base_template(
        title="New Appointment Booked",
        preview_text=f"Booking {booking_id}",
        content_sections=content,
    )
