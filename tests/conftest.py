"""
Shared fixtures: a throwaway SQLite database per test, seeded with roles,
a branch and invitation codes in every state the onboarding flow cares about.
"""
import os
from datetime import timedelta

# Settings are read when admin_portal is first imported
os.environ["ENVIRONMENT"] = "testing"
os.environ.setdefault("DB_USERNAME", "test")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
# Low cost factor keeps the suite fast; production uses 12
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import httpx
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from admin_portal.database import Base
from admin_portal.init_db import get_db
from admin_portal.main import app
from admin_portal.models import Admin, Branch, InvitationCode, Role
from admin_portal.schemas.admin import AdminOnboardRequest
from admin_portal.utils.time_utils import utc_now

PRESIDENT_ROLE_ID = 1
MEMBER_ROLE_ID = 2
BRANCH_ID = 1


@pytest.fixture()
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False)


@pytest.fixture()
async def seeded(session_factory):
    now = utc_now()
    async with session_factory() as session:
        session.add_all([
            Role(id=PRESIDENT_ROLE_ID, name="President", access_level=10),
            Role(id=MEMBER_ROLE_ID, name="Member", access_level=1),
            Branch(id=BRANCH_ID, name="Computer Science"),
        ])
        await session.flush()
        session.add_all([
            InvitationCode(code="INVITE2024ABC", role_id=PRESIDENT_ROLE_ID),
            InvitationCode(code="INVITE2024DEF", role_id=PRESIDENT_ROLE_ID),
            InvitationCode(code="MEMBER2024XYZ", role_id=MEMBER_ROLE_ID),
            InvitationCode(code="FUTURE2024OK", role_id=PRESIDENT_ROLE_ID, expires_at=now + timedelta(days=7)),
            InvitationCode(code="INACTIVE2024", role_id=PRESIDENT_ROLE_ID, is_active=False),
            InvitationCode(code="USED2024CODE", role_id=PRESIDENT_ROLE_ID, is_used=True),
            InvitationCode(code="EXPIRED2024", role_id=PRESIDENT_ROLE_ID, expires_at=now - timedelta(days=1)),
            # Fails several checks at once; only the first in order may be reported
            InvitationCode(
                code="INACTIVEUSED01", role_id=PRESIDENT_ROLE_ID,
                is_active=False, is_used=True, expires_at=now - timedelta(days=1),
            ),
            InvitationCode(
                code="USEDEXPIRED01", role_id=PRESIDENT_ROLE_ID,
                is_used=True, expires_at=now - timedelta(days=1),
            ),
        ])
        await session.commit()


@pytest.fixture()
async def db(session_factory, seeded):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def candidate_data():
    return {
        "studentID": "CS2024001",
        "fullName": "John Doe",
        "email": "john@example.com",
        "password": "SecurePass@123",
        "phone": "+919876543210",
        "roleID": PRESIDENT_ROLE_ID,
        "branchID": BRANCH_ID,
        "graduationYear": 2026,
        "invitationCode": "INVITE2024ABC",
    }


@pytest.fixture()
def make_candidate(candidate_data):
    def _make(**overrides) -> AdminOnboardRequest:
        return AdminOnboardRequest(**{**candidate_data, **overrides})
    return _make


@pytest.fixture()
def fetch_code(session_factory):
    async def _fetch(code: str) -> InvitationCode:
        async with session_factory() as session:
            result = await session.execute(select(InvitationCode).where(InvitationCode.code == code))
            return result.scalar_one()
    return _fetch


@pytest.fixture()
def count_admins(session_factory):
    async def _count() -> int:
        async with session_factory() as session:
            return (await session.execute(select(func.count()).select_from(Admin))).scalar_one()
    return _count


@pytest.fixture()
async def client(session_factory, seeded):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
