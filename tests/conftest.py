import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['APP_ENV'] = 'test'
os.environ['EXPIRY_SWEEP_ENABLED'] = 'false'
os.environ.setdefault('SECRET_KEY', 'test-secret')
os.environ['ADMIN_EMAIL'] = ''
os.environ['ADMIN_PASSWORD_HASH'] = ''
os.environ['FRONTEND_DIR'] = ''

from fastapi.testclient import TestClient  # noqa: E402

from app.core.security import create_access_token, hash_password  # noqa: E402
from app.database import SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Base, Game, Slip, User  # noqa: E402

PASSWORD = 'secret123'
# Low iteration count keeps fixtures fast; verify_password reads it from the hash.
PASSWORD_HASH = hash_password(PASSWORD, iterations=1000)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make(
        email,
        role='user',
        approved=True,
        plan='free',
        premium=False,
        expires_at=None,
    ):
        user = User(
            email=email,
            password_hash=PASSWORD_HASH,
            role=role,
            approved=approved,
            plan=plan,
            premium=premium,
            expires_at=expires_at,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user('admin@tipstorm.test', role='admin')


@pytest.fixture
def make_slip(db):
    def _make(access='free', odds=(1.5, 2.0), date='2026-10-19'):
        slip = Slip(date=date, access=access)
        for i, odd in enumerate(odds):
            slip.games.append(Game(position=i, home=f'Home {i}', away=f'Away {i}', odd=odd))
        slip.total = 1.0
        for odd in odds:
            slip.total *= odd
        slip.total = round(slip.total, 2)
        db.add(slip)
        db.commit()
        db.refresh(slip)
        return slip

    return _make


@pytest.fixture
def headers_for():
    def _headers(user):
        token = create_access_token(user.email, {"role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _headers
