#!/usr/bin/env python3
"""
Create the first admin account.

Run from the project root:
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=admin123 python scripts/create_admin.py
"""
import os
import sys

# Make the app package importable
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from sqlalchemy.exc import OperationalError

from app.config.database import Base, SessionLocal, engine
from app.core.auth.repository import UserRepository
from app.core.auth.service import AuthService
from app.core.exceptions import AlreadyExists
from app.shared.constants import UserRole


def main() -> bool:
    print("🚀 Delivery Tracker - creating admin account...")

    load_dotenv()

    email = os.getenv("ADMIN_EMAIL", "admin@example.com").strip().lower()
    password = os.getenv("ADMIN_PASSWORD")
    if not password or len(password) < 6:
        print("❌ ERROR: ADMIN_PASSWORD must be set (at least 6 characters)")
        return False

    try:
        Base.metadata.create_all(bind=engine)
    except OperationalError as e:
        print(f"❌ Error connecting to the database: {e}")
        print("💡 Check DATABASE_URL in .env")
        return False

    db = SessionLocal()
    try:
        UserRepository(db).add(
            email=email,
            password_hash=AuthService.get_password_hash(password),
            role=UserRole.ADMIN.value
        )
        db.commit()
    except AlreadyExists:
        print(f"⏭️  User {email} already exists")
        return True
    finally:
        db.close()

    print(f"✅ Admin created: {email}")
    print("\n💡 Next step, start the API with:")
    print("   python -m app.main")
    return True


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
