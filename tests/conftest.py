"""
Pytest configuration and fixtures.
Provides the test app client, an in-memory database and client-layer fakes.
"""

import asyncio
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_API_TOKEN"] = "test-admin-token"
os.environ["PUBLIC_ORIGIN"] = "https://studio.test"

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import agency.models  # noqa: F401
from agency.client.cache import LocalCache
from agency.client.state import AgencyState
from agency.client.store import EntityStore
from agency.client.sync import SyncProtocol
from agency.core.exceptions import RemotePersistenceError
from agency.db.base import Base
from agency.db.session import get_db
from agency.models.account import BriefStatus
from agency.schemas.account import (
    AccountResponse,
    BriefIntake,
    TransactionMutationResponse,
    TransactionResponse,
)
from agency.schemas.project import ProjectResponse, ProjectSyncReport
from agency.schemas.proposal import ProposalResponse
from agency.main import app


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_HEADERS = {"Authorization": "Bearer test-admin-token"}


@pytest.fixture(scope="function")
async def test_session_maker():
    """
    Create a test sessionmaker bound to a fresh in-memory database.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture(scope="function")
async def test_client(test_session_maker):
    """
    Create a test HTTP client whose requests use the test database.
    """
    async def override_get_db():
        async with test_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def cache():
    return LocalCache()


@pytest.fixture
def state(gateway, cache):
    """AgencyState over an empty store, a memory cache and the fake gateway."""
    store = EntityStore()
    sync = SyncProtocol(store, cache)
    return AgencyState(store, cache, gateway, sync)


class FakeGateway:
    """
    In-memory stand-in for RemotePersistenceGateway.

    fail(method) makes a method raise; hold(method) parks calls to it until
    the returned event is set, so tests can observe in-flight state.
    """

    def __init__(self):
        self.calls = []
        self.failures = {}
        self.gates = {}
        self.remote = {"projects": [], "accounts": [], "proposals": []}
        self._sequence = 0

    def fail(self, method, error=None):
        self.failures[method] = error or RemotePersistenceError("Server error", status_code=500)

    def hold(self, method):
        self.gates[method] = asyncio.Event()
        return self.gates[method]

    async def _enter(self, method, *args):
        self.calls.append((method,) + args)
        if method in self.gates:
            await self.gates[method].wait()
        if method in self.failures:
            raise self.failures[method]

    def _next_id(self, prefix):
        self._sequence += 1
        return f"{prefix}-{self._sequence}"

    async def list_projects(self, include_content=False):
        await self._enter("list_projects")
        return list(self.remote["projects"])

    async def create_project(self, project):
        await self._enter("create_project", project)
        return ProjectResponse.model_validate(project)

    async def update_project(self, project_id, changes):
        await self._enter("update_project", project_id, changes)
        return None

    async def delete_project(self, project_id):
        await self._enter("delete_project", project_id)

    async def sync_projects(self, records):
        await self._enter("sync_projects", records)
        return ProjectSyncReport(synced=len(records), inserted=len(records), total=len(records))

    async def list_accounts(self):
        await self._enter("list_accounts")
        return list(self.remote["accounts"])

    async def create_account(self, account):
        await self._enter("create_account", account)
        form_type = account.get("brief_form_type")
        return AccountResponse(
            id=self._next_id("acc"),
            name=account["name"],
            company=account["company"],
            email=account["email"],
            username=account.get("username"),
            brief=BriefIntake(
                token="server-brief-token",
                form_type=form_type,
                status=BriefStatus.PENDING if form_type else BriefStatus.NONE,
            ),
        )

    async def update_account(self, account_id, changes):
        await self._enter("update_account", account_id, changes)
        return None

    async def delete_account(self, account_id):
        await self._enter("delete_account", account_id)

    async def approve_brief(self, account_id):
        await self._enter("approve_brief", account_id)
        return AccountResponse(
            id=account_id,
            name="Remote",
            company="Remote",
            brief=BriefIntake(form_type="logo", status=BriefStatus.APPROVED),
        )

    async def create_transaction(self, transaction):
        await self._enter("create_transaction", transaction)
        return TransactionMutationResponse(
            transaction=TransactionResponse(
                id=self._next_id("txn"),
                account_id=transaction["account_id"],
                type=transaction["type"],
                amount=transaction["amount"],
                description=transaction.get("description", ""),
                date=transaction["date"],
            ),
            total_debt=0.0,
            total_paid=0.0,
            balance=0.0,
        )

    async def list_proposals(self):
        await self._enter("list_proposals")
        return list(self.remote["proposals"])

    async def create_proposal(self, proposal):
        await self._enter("create_proposal", proposal)
        return ProposalResponse.model_validate(proposal)

    async def update_proposal(self, proposal_id, changes):
        await self._enter("update_proposal", proposal_id, changes)
        return None

    async def delete_proposal(self, proposal_id):
        await self._enter("delete_proposal", proposal_id)
