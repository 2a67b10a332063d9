"""Shared fixtures: an in-memory store wired into the menu services."""

import pytest
from fastapi.testclient import TestClient

from qrmenu.services import (
    EmptinessOracle,
    MenuAggregator,
    MenuRepository,
    SnapshotCache,
    TenantPaths,
    get_aggregator,
    get_repository,
)
from qrmenu.services.fallback import FailClosedPolicy, FailOpenPolicy
from qrmenu.services.store import MemoryDocumentStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_services(store, policy, clock, timeout_seconds=None):
    """Wire repository and aggregator the way qrmenu.services does."""
    paths = TenantPaths("test-restaurant")
    cache = SnapshotCache(ttl_seconds=1.0, clock=clock)
    oracle = EmptinessOracle(store, policy, paths=paths, timeout_seconds=timeout_seconds)
    repository = MenuRepository(
        store, oracle, cache, policy, paths=paths, timeout_seconds=timeout_seconds
    )
    return repository, MenuAggregator(repository, cache, policy)


@pytest.fixture
def store():
    return MemoryDocumentStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def paths():
    return TenantPaths("test-restaurant")


@pytest.fixture
def services(store, clock):
    return build_services(store, FailOpenPolicy(), clock)


@pytest.fixture
def repository(services):
    return services[0]


@pytest.fixture
def aggregator(services):
    return services[1]


@pytest.fixture
def closed_services(store, clock):
    return build_services(store, FailClosedPolicy(), clock)


@pytest.fixture
def client(repository, aggregator):
    """API client backed by the in-memory fixtures."""
    from qrmenu.main import app

    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_aggregator] = lambda: aggregator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    """API client with an open admin session."""
    response = client.post("/api/admin/login", json={"password": "admin123"})
    assert response.status_code == 200
    return client


@pytest.fixture
def service_factory():
    """build_services, for tests that need a custom store or timeout."""
    return build_services
