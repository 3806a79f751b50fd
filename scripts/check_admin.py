"""
Print the admin accounts in the configured database.

Usage:
  python scripts/check_admin.py
"""
from app.database import SessionLocal
from app.models import User


def main() -> None:
    db = SessionLocal()
    try:
        admins = db.query(User).filter(User.role == "admin").order_by(User.created_at).all()
        if not admins:
            print("No admin user found. Set ADMIN_EMAIL and ADMIN_PASSWORD_HASH and start the API.")
            return
        for admin in admins:
            print(f"Admin user: {admin.email} (approved={admin.approved}, created={admin.created_at})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
