"""Seed default site settings and an optional first admin account.

Usage:
    python -m scripts.seed_settings [admin_email admin_username]
"""
import logging
import sys

from sqlalchemy.orm import Session

from quickfix.app.logging_config import setup_logging
from quickfix.db.base import SessionLocal
from quickfix.models.enums import UserRole
from quickfix.models.user import User
from quickfix.repositories.settings_repo import SiteSettingRepository
from quickfix.schemas.settings import SiteSettings

logger = logging.getLogger(__name__)

DESCRIPTIONS = {
    "upiIdForPremium": "UPI ID shown on the premium page",
    "basicPlanPrice": "Basic plan price (INR)",
    "advancedPlanPrice": "Advanced plan price (INR)",
    "proPlanPrice": "Pro plan price (INR)",
    "contactEmail": "Address that receives payment review emails",
    "enableEmailVerification": "Require a verified email before buying premium",
}


def seed_settings(db: Session) -> int:
    repo = SiteSettingRepository(db)
    defaults = SiteSettings().model_dump(by_alias=True)
    created = 0

    for name, value in defaults.items():
        if repo.get_by_name(name):
            logger.info(f"Setting already exists: {name}")
            continue
        row = repo.upsert(name, value)
        row.description = DESCRIPTIONS.get(name)
        created += 1
        logger.info(f"Created setting: {name} = {value!r}")

    db.commit()
    return created


def seed_admin(db: Session, email: str, username: str) -> None:
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        existing.role = UserRole.admin
        logger.info(f"Promoted existing user to admin: {email}")
    else:
        db.add(User(email=email, username=username, role=UserRole.admin, email_verified=True))
        logger.info(f"Created admin: {email}")
    db.commit()


if __name__ == "__main__":
    setup_logging()
    db: Session = SessionLocal()
    try:
        seed_settings(db)
        if len(sys.argv) == 3:
            seed_admin(db, sys.argv[1], sys.argv[2])
    finally:
        db.close()
