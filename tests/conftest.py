"""
Pytest configuration and fixtures for fund ledger tests.

This module provides:
- Fixed clocks in UTC+8 market time
- In-memory and SQLite key-value store fixtures
- Deterministic stub quote providers
- Service fixtures wired the way AppContext wires them
- A FastAPI test client over an in-memory store
"""

import itertools
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from fund_ledger.main import app
from fund_ledger.app_context import AppContext, set_app_context
from fund_ledger.config.settings import Settings, reset_settings
from fund_ledger.core.timezone import MARKET_TZ, FixedClock
from fund_ledger.domain.models import ContributionConfig, Holding
from fund_ledger.domain.views import Quote
from fund_ledger.interchange import JsonExporter, JsonImporter
from fund_ledger.repositories import InMemoryKeyValueStore, PortfolioStore
from fund_ledger.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from fund_ledger.repositories.sqlalchemy import orm_models  # noqa: F401
from fund_ledger.repositories.sqlalchemy import SqlAlchemyKeyValueStore
from fund_ledger.services import (
    AnalysisService,
    ContributionPlanner,
    HoldingCreate,
    LedgerEngine,
    MarketDataService,
    PortfolioService,
    ValuationSnapshotTracker,
)


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def market_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in UTC+8 market time."""
    return MARKET_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return market_datetime(2026, 3, 16, 14, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    """Clock pinned to fixed_now; tests advance it with clock.set()."""
    return FixedClock(fixed_now)


def sequential_ids(prefix: str = "txn") -> Callable[[], str]:
    """Return an id factory producing txn-1, txn-2, ..."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    """Provide an empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def portfolio_store(kv_store, clock) -> PortfolioStore:
    """Provide a PortfolioStore without transaction retention."""
    return PortfolioStore(kv_store, retention_days=None, clock=clock)


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_kv_store(test_session) -> SqlAlchemyKeyValueStore:
    """Provide a SQLAlchemy key-value store over in-memory SQLite."""
    return SqlAlchemyKeyValueStore(test_session)


# =============================================================================
# QUOTE PROVIDER FIXTURES
# =============================================================================


class DeterministicQuoteProvider:
    """
    Deterministic quote provider for testing.

    Provides fixed quotes with no randomness; unknown ids return None.
    """

    FIXED_QUOTES = {
        "000001": ("Alpha Growth", Decimal("1.10"), Decimal("1.00"), Decimal("10.00")),
        "000002": ("Beta Bond", Decimal("2.00"), Decimal("2.10"), Decimal("-4.76")),
        "000003": ("Gamma Index", Decimal("0.95"), None, None),  # no previous close
    }

    # ISO timestamp, converted to "2026-03-16 15:00" in market time
    AS_OF = "2026-03-16T07:00:00.000Z"

    def __init__(self, as_of: Optional[str] = None):
        self._as_of = as_of or self.AS_OF
        self.calls: list[str] = []

    def get_quote(self, fund_id: str) -> Optional[Quote]:
        self.calls.append(fund_id)
        if fund_id not in self.FIXED_QUOTES:
            return None
        name, current, previous, change = self.FIXED_QUOTES[fund_id]
        return Quote(
            fund_id=fund_id,
            name=name,
            current_price=current,
            previous_close=previous,
            change_percent=change,
            as_of=self._as_of,
        )


class FailingQuoteProvider:
    """Quote provider that always raises an exception."""

    def get_quote(self, fund_id: str) -> Optional[Quote]:
        raise ConnectionError("Network unavailable")


class SelectiveFailingProvider:
    """Deterministic provider that raises for the given ids."""

    def __init__(self, failing_ids: set[str]):
        self._inner = DeterministicQuoteProvider()
        self._failing = failing_ids

    def get_quote(self, fund_id: str) -> Optional[Quote]:
        if fund_id in self._failing:
            raise TimeoutError(f"Quote for {fund_id} timed out")
        return self._inner.get_quote(fund_id)


@pytest.fixture
def deterministic_provider() -> DeterministicQuoteProvider:
    """Provide deterministic quote provider."""
    return DeterministicQuoteProvider()


@pytest.fixture
def failing_provider() -> FailingQuoteProvider:
    """Provide a quote provider that always fails."""
    return FailingQuoteProvider()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def ledger_engine(clock) -> LedgerEngine:
    """Provide LedgerEngine with sequential transaction ids."""
    return LedgerEngine(clock=clock, id_factory=sequential_ids())


@pytest.fixture
def tracker(portfolio_store, clock) -> ValuationSnapshotTracker:
    """Provide ValuationSnapshotTracker."""
    return ValuationSnapshotTracker(portfolio_store, clock=clock)


@pytest.fixture
def market_data_service(deterministic_provider) -> MarketDataService:
    """Provide MarketDataService with deterministic provider."""
    return MarketDataService(
        provider=deterministic_provider,
        max_workers=4,
        timeout_seconds=5.0,
    )


@pytest.fixture
def planner() -> ContributionPlanner:
    return ContributionPlanner()


@pytest.fixture
def portfolio_service(
    portfolio_store,
    ledger_engine,
    tracker,
    market_data_service,
    planner,
    clock,
) -> PortfolioService:
    """Provide PortfolioService over the in-memory store."""
    return PortfolioService(
        store=portfolio_store,
        engine=ledger_engine,
        tracker=tracker,
        market_data=market_data_service,
        planner=planner,
        clock=clock,
    )


@pytest.fixture
def analysis_service(portfolio_store) -> AnalysisService:
    """Provide AnalysisService."""
    return AnalysisService(portfolio_store)


@pytest.fixture
def json_exporter(portfolio_store) -> JsonExporter:
    return JsonExporter(portfolio_store)


@pytest.fixture
def json_importer(portfolio_store, tracker) -> JsonImporter:
    return JsonImporter(portfolio_store, tracker=tracker)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


def make_holding(
    fund_id: str = "000001",
    shares: str = "1000",
    cost_basis: str = "1.0",
    current_price: str = "1.0",
    previous_price: Optional[str] = None,
    initial_price: Optional[str] = None,
    tag: Optional[str] = None,
    contribution: Optional[ContributionConfig] = None,
    name: Optional[str] = None,
) -> Holding:
    """Build a Holding directly, bypassing the service."""
    return Holding(
        fund_id=fund_id,
        name=name or f"Fund {fund_id}",
        shares=Decimal(shares),
        cost_basis=Decimal(cost_basis),
        current_price=Decimal(current_price),
        previous_price=Decimal(previous_price) if previous_price is not None else None,
        initial_price=Decimal(initial_price) if initial_price is not None else None,
        tag=tag,
        contribution=contribution,
    )


@pytest.fixture
def holding_factory(portfolio_service) -> Callable[..., Holding]:
    """Factory for adding holdings through the service."""

    def _create_holding(
        fund_id: str = "000001",
        shares: str = "1000",
        cost_basis: str = "1.0",
        current_price: Optional[str] = None,
        name: Optional[str] = None,
        tag: Optional[str] = None,
        contribution: Optional[ContributionConfig] = None,
    ) -> Holding:
        return portfolio_service.add_holding(
            HoldingCreate(
                fund_id=fund_id,
                name=name or f"Fund {fund_id}",
                shares=Decimal(shares),
                cost_basis=Decimal(cost_basis),
                current_price=Decimal(current_price) if current_price is not None else None,
                tag=tag,
                contribution=contribution,
            )
        )

    return _create_holding


@pytest.fixture
def sample_holding(holding_factory) -> Holding:
    """A holding of 1000 shares at cost 1.0, priced at 1.0."""
    return holding_factory(fund_id="000001", shares="1000", cost_basis="1.0")


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(tmp_path, clock) -> TestClient:
    """Provide FastAPI test client over an in-memory store."""
    settings = Settings(
        data_dir=tmp_path,
        store_backend="memory",
        transaction_retention_days=None,
        seed_demo_holdings=False,
    )
    context = AppContext(
        settings=settings,
        provider=DeterministicQuoteProvider(),
        clock=clock,
    )
    set_app_context(context)
    with TestClient(app) as c:
        yield c
    set_app_context(None)
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.0001"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(Decimal(str(actual)) - Decimal(str(expected)))
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
