"""
Demo data
Run with ``python -m deskbook.seed``; only fills empty tables
"""
import logging

from sqlalchemy.orm import Session

from deskbook.config import settings
from deskbook.database import SessionLocal, init_db
from deskbook.models.resource import Desk, ParkingSpot
from deskbook.models.user import User, UserRole
from deskbook.security.auth import hash_password
from deskbook.utils.log import setup_logging

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

USERS = [
    ("Admin User", "admin@company.com", UserRole.ADMIN),
    ("Jan Kowalski", "jan@company.com", UserRole.USER),
    ("Anna Nowak", "anna@company.com", UserRole.USER),
]

DESKS = [
    # reporting department, 2x4
    ("A-01", "Reporting"), ("A-02", "Reporting"), ("A-03", "Reporting"), ("A-04", "Reporting"),
    ("B-01", "Reporting"), ("B-02", "Reporting"), ("C-01", "Reporting"), ("C-02", "Reporting"),
    # open space, 1x3
    ("O-01", "Open Space"), ("O-02", "Open Space"), ("O-03", "Open Space"),
]

PARKING_SPOTS = ["P-01", "P-02", "P-03", "P-04"]


def seed(db: Session) -> None:
    if not db.query(User).first():
        password_hash = hash_password(DEMO_PASSWORD)
        for name, email, role in USERS:
            db.add(User(name=name, email=email, password_hash=password_hash, role=role))
        logger.info("seeded %d users", len(USERS))

    if not db.query(Desk).first():
        for code, location in DESKS:
            db.add(Desk(code=code, name=f"Desk {code}", location_label=location))
        logger.info("seeded %d desks", len(DESKS))

    if not db.query(ParkingSpot).first():
        for code in PARKING_SPOTS:
            db.add(ParkingSpot(code=code, name=f"Spot {code}"))
        logger.info("seeded %d parking spots", len(PARKING_SPOTS))

    db.commit()


def main() -> None:
    setup_logging(settings.log_level)
    init_db()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
