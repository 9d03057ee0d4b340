"""
Pytest configuration for vault integration tests
Uses SQLite by default; set TEST_DATABASE_URL to run against PostgreSQL
"""

import base64
import os

import pytest

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test_vault.db")

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.pop("INVITE_ISSUER_TOKEN", None)

from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.database import Base, build_engine, get_db  # noqa: E402
from app.schemas import SignupRequest  # noqa: E402
from app.utils.accounts import create_account  # noqa: E402
from app.utils.invites import issue_invite  # noqa: E402


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine - drops/creates tables for each test"""
    engine = build_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a fresh database session for each test"""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def signup_payload():
    """Factory for a well-formed signup JSON body"""
    def _build(invite_code: str, email: str = "alice@example.com", name: str = "Alice", **overrides):
        payload = {
            "invite_code": invite_code,
            "email": email,
            "name": name,
            "password_hash": b64(b"client-derived-password-hash-32b"),
            "password_salt": b64(os.urandom(16)),
            "public_key": b64(b"public-key-bytes"),
            "encrypted_private_key": b64(b"encrypted-private-key-bytes"),
            "private_key_nonce": b64(b"pk-nonce-12b"),
            "wrapped_personal_key": b64(b"wrapped-personal-team-key"),
            "personal_key_nonce": b64(b"tk-nonce-12b"),
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def make_user(db_session, signup_payload):
    """Factory creating a complete account through the bootstrap transaction"""
    def _make(email: str, name: str = "User"):
        code = issue_invite(db_session)
        return create_account(db_session, SignupRequest(**signup_payload(code, email=email, name=name)))

    return _make
