"""
Shared fixtures: in-memory repositories, services and an API client wired to them
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.api import dependencies
from app.models import Profile, Role
from app.services.event_service import EventService
from app.services.profile_service import ProfileService
from app.services.ticket_service import KeyedLock, TicketService
from app.utils.security import CurrentUser, TokenService
from main import app
from tests.fakes import (
    FakeEventRepo,
    FakeIdentityProvider,
    FakeProfileRepo,
    FakeTicketCategoryRepo,
    FakeTicketRepo,
    InMemoryStore,
    seed_category,
    seed_event,
)

TEST_SECRET = "test-secret"


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def event_repo(store):
    return FakeEventRepo(store)


@pytest.fixture
def category_repo(store):
    return FakeTicketCategoryRepo(store)


@pytest.fixture
def ticket_repo(store):
    return FakeTicketRepo(store)


@pytest.fixture
def profile_repo(store):
    return FakeProfileRepo(store)


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def token_service():
    return TokenService(secret_key=TEST_SECRET, algorithm="HS256", expiry_minutes=30)


@pytest.fixture
def ticket_service(event_repo, category_repo, ticket_repo):
    return TicketService(event_repo, category_repo, ticket_repo, locks=KeyedLock())


@pytest.fixture
def event_service(event_repo, ticket_service):
    return EventService(event_repo, ticket_service)


@pytest.fixture
def profile_service(profile_repo):
    return ProfileService(profile_repo)


@pytest.fixture
def admin(store):
    """An admin with a stored profile"""
    store.profiles["admin-1"] = _profile("admin-1", "Alice Admin", Role.ADMIN)
    return CurrentUser(id="admin-1", email="alice@example.com", role=Role.ADMIN)


@pytest.fixture
def other_admin(store):
    store.profiles["admin-2"] = _profile("admin-2", "Oscar Other", Role.ADMIN)
    return CurrentUser(id="admin-2", email="oscar@example.com", role=Role.ADMIN)


@pytest.fixture
def user(store):
    store.profiles["user-1"] = _profile("user-1", "Uma User", Role.USER)
    return CurrentUser(id="user-1", email="uma@example.com", role=Role.USER)


@pytest.fixture
def other_user(store):
    store.profiles["user-2"] = _profile("user-2", "Victor User", Role.USER)
    return CurrentUser(id="user-2", email="victor@example.com", role=Role.USER)


@pytest.fixture
def auth_headers(token_service):
    """Build bearer headers for a CurrentUser"""
    def build(current_user: CurrentUser) -> dict:
        token = token_service.issue(current_user.id, current_user.email, current_user.role)
        return {"Authorization": f"Bearer {token}"}
    return build


@pytest.fixture
def client(event_repo, category_repo, ticket_repo, profile_repo, identity, token_service):
    """API client with every repository and the identity provider replaced"""
    app.dependency_overrides[dependencies.get_event_repo] = lambda: event_repo
    app.dependency_overrides[dependencies.get_category_repo] = lambda: category_repo
    app.dependency_overrides[dependencies.get_ticket_repo] = lambda: ticket_repo
    app.dependency_overrides[dependencies.get_profile_repo] = lambda: profile_repo
    app.dependency_overrides[dependencies.get_identity_provider] = lambda: identity
    app.dependency_overrides[dependencies.get_token_service] = lambda: token_service
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_event(store, admin):
    """An event owned by ``admin``"""
    return seed_event(store, admin.id)


@pytest.fixture
def sample_category(store, sample_event):
    """A category of ``sample_event`` with stock 3 and no tickets"""
    return seed_category(store, sample_event.id, stock=3)


def _profile(profile_id: str, name: str, role: Role) -> Profile:
    stamp = datetime(2024, 12, 1, tzinfo=timezone.utc)
    return Profile(id=profile_id, name=name, role=role, created_at=stamp, updated_at=stamp)
