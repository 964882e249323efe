import pytest

from petspa.domain.booking.catalog import DEFAULT_SERVICES, seed_services
from petspa.domain.booking.service import generate_booking_id, to_base36
from petspa.models import Appointment, AppointmentService, Customer, Pet, Service
from tests.conftest import ADMIN_EMAIL


@pytest.fixture
def booking_payload():
    return {
        "selectedServices": [
            {
                "id": "full-glam",
                "name": "Full Glam Groom",
                "duration": 120,
                "price": "$65+",
                "description": "Bath, haircut, nails and ears",
                "category": "grooming",
            },
            {
                "id": "nail-trim",
                "name": "Nail Trim",
                "duration": 15,
                "price": "$15",
                "description": "Quick nail trim",
                "category": "addon",
            },
        ],
        "selectedDate": "2026-11-07",
        "selectedTime": "10:00 AM",
        "petInfo": {"name": "Biscuit", "breed": "Golden Retriever", "size": "large", "notes": "Nervous with dryers"},
        "ownerInfo": {
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "Jane.Doe@Example.com",
            "phone": "727-555-0100",
            "address": "12 Harbor St",
        },
        "preferences": {"contactMethod": "email", "reminderPreference": "both", "marketingConsent": True},
    }


def test_base36_booking_ids():
    assert to_base36(0) == "0"
    assert to_base36(35) == "Z"
    assert to_base36(36) == "10"
    assert generate_booking_id(1700000000000) == f"PP-{to_base36(1700000000000)}"


def test_booking_creates_customer_pet_and_appointment(client, db_session, booking_payload, email_api):
    response = client.post("/api/booking", json=booking_payload)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Appointment booked successfully! Check your email for confirmation."
    booking_id = body["bookingId"]
    assert booking_id.startswith("PP-")
    assert body["appointmentDetails"]["duration"] == 135

    appointment = db_session.query(Appointment).filter(Appointment.id == booking_id).one()
    assert appointment.status == "confirmed"
    assert appointment.total_duration == 135
    assert appointment.customer.email == "jane.doe@example.com"
    assert appointment.customer.contact_method == "email"
    assert appointment.pet.size == "large"
    assert sorted(link.service_id for link in appointment.services) == ["full-glam", "nail-trim"]

    assert len(email_api.to("jane.doe@example.com")) == 1
    business = email_api.to(ADMIN_EMAIL)
    assert len(business) == 1
    assert business[0]["reply_to"] == "jane.doe@example.com"


def test_repeat_booking_reuses_customer_and_pet(client, db_session, booking_payload):
    first = client.post("/api/booking", json=booking_payload).json()["bookingId"]
    booking_payload["selectedDate"] = "2026-12-05"
    second = client.post("/api/booking", json=booking_payload).json()["bookingId"]

    assert first != second
    assert db_session.query(Customer).count() == 1
    assert db_session.query(Pet).count() == 1
    assert db_session.query(Appointment).count() == 2


def test_new_pet_for_existing_customer(client, db_session, booking_payload):
    client.post("/api/booking", json=booking_payload)
    booking_payload["petInfo"] = {"name": "Pepper", "breed": "Poodle"}
    client.post("/api/booking", json=booking_payload)

    pets = db_session.query(Pet).order_by(Pet.id).all()
    assert [(p.name, p.size) for p in pets] == [("Biscuit", "large"), ("Pepper", "medium")]


def test_unknown_services_are_added_to_catalog(client, db_session, booking_payload):
    client.post("/api/booking", json=booking_payload)

    stored = db_session.query(Service).filter(Service.id == "full-glam").one()
    assert stored.price == "$65+"
    assert db_session.query(AppointmentService).count() == 2


def test_booking_succeeds_when_emails_fail(client, booking_payload, email_api):
    email_api.fail_for.update({"jane.doe@example.com", ADMIN_EMAIL})

    response = client.post("/api/booking", json=booking_payload)

    assert response.status_code == 200
    assert response.json()["bookingId"].startswith("PP-")


def test_booking_validation_errors(client, booking_payload):
    booking_payload["selectedServices"] = []
    booking_payload["ownerInfo"]["email"] = "not-an-email"
    booking_payload["petInfo"]["name"] = "  "

    response = client.post("/api/booking", json=booking_payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Please check your booking information."
    messages = {d["field"]: d["message"] for d in body["details"]}
    assert messages["selectedServices"] == "At least one service must be selected"
    assert messages["petInfo.name"] == "Pet name is required"
    assert messages["ownerInfo.email"] == "Valid email is required"


def test_list_services_after_seeding(client, db_session):
    assert seed_services(db_session) == len(DEFAULT_SERVICES)
    assert seed_services(db_session) == 0

    response = client.get("/api/services")

    assert response.status_code == 200
    services = response.json()
    assert len(services) == len(DEFAULT_SERVICES)
    assert {"id", "name", "duration", "price", "category"} <= set(services[0])


def test_service_picked_twice_is_one_row_with_quantity(client, db_session, booking_payload):
    nail_trim = booking_payload["selectedServices"][1]
    booking_payload["selectedServices"] = [nail_trim, dict(nail_trim)]

    response = client.post("/api/booking", json=booking_payload)

    assert response.status_code == 200
    links = db_session.query(AppointmentService).all()
    assert [(link.service_id, link.quantity) for link in links] == [("nail-trim", 2)]
    appointment = db_session.query(Appointment).one()
    assert appointment.total_duration == 30
