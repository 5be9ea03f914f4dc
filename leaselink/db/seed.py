"""Demo data for local development.

Run with ``python -m leaselink.db.seed``. The demo staff accounts are stored
with plaintext credentials, the same shape as rows created before password
hashing existed; ``--hash-legacy`` rewrites them in place.
"""

from __future__ import annotations

import argparse
import logging
from typing import Dict

from sqlalchemy.orm import Session

from leaselink.core.config import Settings
from leaselink.core.database import Base, build_engine, build_session_factory
from leaselink.core.logging_setup import configure_logging
import leaselink.models  # noqa: F401
from leaselink.models.comment import Comment
from leaselink.models.property import Property
from leaselink.models.tenant import Tenant
from leaselink.models.ticket import Ticket
from leaselink.models.unit import Unit
from leaselink.models.user import User
from leaselink.services.passwords import hash_password, looks_hashed

logger = logging.getLogger(__name__)
SEED_PREFIX = "[SEED]"

DEMO_USERS = (
    ("admin@leaselink.com", "hashed_password_123", "ADMIN"),
    ("manager@leaselink.com", "hashed_password_456", "MANAGER"),
    ("staff@leaselink.com", "hashed_password_789", "STAFF"),
)


def seed_demo_data(db: Session) -> bool:
    """Insert the demo dataset. Returns ``False`` when users already exist."""
    if db.query(User).count() > 0:
        logger.info("%s skipped: users already present", SEED_PREFIX)
        return False

    users: Dict[str, User] = {}
    for email, password, role in DEMO_USERS:
        users[role] = User(email=email, password=password, role=role)
    db.add_all(users.values())

    sunset = Property(name="Sunset Villas", address="123 Main St", city="San Antonio", state="TX", zip="78249")
    riverwalk = Property(
        name="Riverwalk Lofts", address="500 Riverwalk Ave", city="San Antonio", state="TX", zip="78205"
    )
    unit_101 = Unit(property=sunset, unit_number="101", status="OCCUPIED", beds=2, baths=1, sqft=850)
    unit_102 = Unit(property=sunset, unit_number="102", status="VACANT", beds=1, baths=1, sqft=650)
    unit_201 = Unit(property=riverwalk, unit_number="201", status="VACANT", beds=1, baths=1, sqft=700)
    db.add_all([sunset, riverwalk, unit_101, unit_102, unit_201])

    john = Tenant(name="John Doe", email="john.doe@email.com", phone="210-555-0101", unit=unit_101)
    jane = Tenant(name="Jane Smith", email="jane.smith@email.com", phone="210-555-0102", unit=unit_201)
    db.add_all([john, jane])
    db.flush()

    faucet = Ticket(
        unit_id=unit_101.id,
        tenant_id=john.id,
        title="Leaking faucet in kitchen",
        description="The kitchen faucet has been dripping constantly for the past week. "
        "Water pressure seems low as well.",
        priority="HIGH",
        status="OPEN",
        assigned_to_id=users["STAFF"].id,
    )
    ac = Ticket(
        unit_id=unit_101.id,
        tenant_id=john.id,
        title="AC not cooling properly",
        description="Air conditioner is running but not cooling the apartment. Temperature is above 80°F.",
        priority="URGENT",
        status="IN_PROGRESS",
        assigned_to_id=users["MANAGER"].id,
    )
    lightbulb = Ticket(
        unit_id=unit_201.id,
        tenant_id=jane.id,
        title="Request for lightbulb replacement",
        description="Need replacement lightbulbs for living room ceiling fixture.",
        priority="LOW",
        status="OPEN",
    )
    db.add_all([faucet, ac, lightbulb])
    db.flush()

    db.add_all(
        [
            Comment(ticket_id=faucet.id, author_id=users["STAFF"].id, body="I will check this out tomorrow morning."),
            Comment(ticket_id=ac.id, author_id=users["MANAGER"].id, body="HVAC technician scheduled for today at 2 PM."),
            Comment(
                ticket_id=ac.id,
                author_id=users["MANAGER"].id,
                body="Technician replaced the compressor. Testing now.",
            ),
        ]
    )
    db.commit()

    logger.info(
        "%s created users=%s properties=%s tenants=%s tickets=3",
        SEED_PREFIX,
        ",".join(user.email for user in users.values()),
        ",".join((sunset.name, riverwalk.name)),
        ",".join((john.name, jane.name)),
    )
    return True


def hash_legacy_passwords(db: Session) -> int:
    """Replace every plaintext credential with a bcrypt hash. Returns the count."""
    updated = 0
    for user in db.query(User).order_by(User.id.asc()).all():
        if looks_hashed(user.password):
            continue
        user.password = hash_password(user.password)
        updated += 1
    if updated:
        db.commit()
    logger.info("%s hashed legacy credentials count=%s", SEED_PREFIX, updated)
    return updated


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed LeaseLink demo data.")
    parser.add_argument(
        "--hash-legacy",
        action="store_true",
        help="Hash plaintext credentials after seeding",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    engine = build_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    db = build_session_factory(engine)()
    try:
        created = seed_demo_data(db)
        if args.hash_legacy:
            hash_legacy_passwords(db)
    finally:
        db.close()
        engine.dispose()

    print("Seeded demo data" if created else "Demo data already present")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
