from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.models import User

logger = logging.getLogger(__name__)


def seed_admin(db: Session) -> bool:
    """Create or promote the bootstrap admin from ADMIN_EMAIL / ADMIN_PASSWORD_HASH."""
    email = settings.admin_email
    password_hash = settings.admin_password_hash.get_secret_value()
    if not email or not password_hash:
        return False

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        db.add(
            User(
                email=email,
                password_hash=password_hash,
                role="admin",
                approved=True,
            )
        )
        db.commit()
        logger.info("Seeded admin %s", email)
        return True

    if user.role != "admin" or not user.approved:
        user.role = "admin"
        user.approved = True
        db.commit()
        logger.info("Promoted %s to admin", email)
        return True
    return False
