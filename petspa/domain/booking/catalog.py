"""Default service catalog offered by the booking wizard"""

import logging

from sqlalchemy.orm import Session

from ...models import Service

logger = logging.getLogger(__name__)

DEFAULT_SERVICES = [
    ("bath-bliss", "Bath Time Bliss", 60, "$45-65", "Full service bath with premium shampoo and conditioning", "bath"),
    ("mini-makeover", "Mini Makeover", 30, "$25-35", "Quick grooming touch-up for your pet", "grooming"),
    ("full-glam", "Full Glam Groom", 120, "$65-95", "Complete grooming package with styling and nail trim", "grooming"),
    ("wash-small", "Wash N Go - Small Dog", 30, "$15", "Quick wash for small dogs (under 25 lbs)", "bath"),
    ("wash-medium", "Wash N Go - Medium Dog", 45, "$17", "Quick wash for medium dogs (25-50 lbs)", "bath"),
    ("wash-large", "Wash N Go - Large Dog", 60, "$20", "Quick wash for large dogs (over 50 lbs)", "bath"),
    ("nail-trim", "Nail Trim", 15, "$15", "Professional nail trimming", "addon"),
    ("ear-cleaning", "Ear Cleaning", 15, "$10", "Gentle ear cleaning and inspection", "addon"),
    ("teeth-brushing", "Teeth Brushing", 20, "$12", "Dental hygiene with pet-safe toothpaste", "addon"),
    ("flea-treatment", "Flea Treatment", 30, "$20", "Flea shampoo and treatment", "addon"),
    ("de-shedding", "De-shedding Treatment", 45, "$25", "Reduce shedding with special treatment", "addon"),
]


def seed_services(db: Session) -> int:
    """Insert any default service that is not in the catalog yet. Returns the number added."""
    existing = {service_id for (service_id,) in db.query(Service.id).all()}
    added = 0
    for service_id, name, duration, price, description, category in DEFAULT_SERVICES:
        if service_id in existing:
            continue
        db.add(
            Service(
                id=service_id,
                name=name,
                description=description,
                duration=duration,
                price=price,
                category=category,
            )
        )
        added += 1
    db.commit()
    logger.info(f"Seeded {added} services ({len(existing)} already present)")
    return added
