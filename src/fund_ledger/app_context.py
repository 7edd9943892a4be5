"""Application context for in-process service management.

Builds the configured key-value store once and hands out services that
share it. The API and scripts both go through the global context.
"""

import threading
from typing import Optional

from sqlalchemy.orm import Session

from fund_ledger.config.settings import Settings, get_settings, set_settings
from fund_ledger.core.timezone import Clock, SystemClock
from fund_ledger.interchange import JsonExporter, JsonImporter
from fund_ledger.providers import QuoteProvider, StubQuoteProvider
from fund_ledger.repositories import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    PortfolioStore,
)
from fund_ledger.repositories.sqlalchemy import (
    SqlAlchemyKeyValueStore,
    init_db,
    open_session,
    reset_database,
)
from fund_ledger.services import (
    AnalysisService,
    ContributionPlanner,
    LedgerEngine,
    MarketDataService,
    PortfolioService,
    ValuationSnapshotTracker,
)


class AppContext:
    """
    Application context providing access to all services.

    Services are created lazily and share one store. Mutating callers on
    several threads hold ``lock`` for the duration of a call.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider: Optional[QuoteProvider] = None,
        clock: Optional[Clock] = None,
        kv_store: Optional[KeyValueStore] = None,
    ):
        self._settings = settings
        self._provider = provider
        self._clock = clock or SystemClock()
        self._kv_store = kv_store
        self._session: Optional[Session] = None
        self._initialized = False
        self.lock = threading.Lock()

        # Service instances (lazy initialized)
        self._portfolio_store: Optional[PortfolioStore] = None
        self._tracker: Optional[ValuationSnapshotTracker] = None
        self._market_data_service: Optional[MarketDataService] = None
        self._portfolio_service: Optional[PortfolioService] = None
        self._analysis_service: Optional[AnalysisService] = None
        self._json_exporter: Optional[JsonExporter] = None
        self._json_importer: Optional[JsonImporter] = None

    def initialize(self) -> None:
        """Open the configured store; safe to call more than once."""
        if self._initialized:
            return
        if self._settings is not None:
            set_settings(self._settings)
        if self._kv_store is None:
            self._kv_store = self._build_store(get_settings())
        self._initialized = True

    def _build_store(self, settings: Settings) -> KeyValueStore:
        if settings.store_backend == "memory":
            return InMemoryKeyValueStore()
        if settings.store_backend == "json":
            return JsonFileKeyValueStore(settings.get_json_store_path())

        reset_database()
        init_db()
        self._session = open_session()
        return SqlAlchemyKeyValueStore(self._session)

    @property
    def settings(self) -> Settings:
        return get_settings()

    # Store accessors
    @property
    def store(self) -> PortfolioStore:
        """Get the PortfolioStore over the configured key-value store."""
        if self._portfolio_store is None:
            self.initialize()
            self._portfolio_store = PortfolioStore(
                self._kv_store,
                retention_days=self.settings.transaction_retention_days,
                clock=self._clock,
            )
        return self._portfolio_store

    # Service accessors
    @property
    def tracker(self) -> ValuationSnapshotTracker:
        if self._tracker is None:
            self._tracker = ValuationSnapshotTracker(self.store, clock=self._clock)
        return self._tracker

    @property
    def market_data(self) -> MarketDataService:
        """Get the MarketDataService instance."""
        if self._market_data_service is None:
            settings = self.settings
            self._market_data_service = MarketDataService(
                provider=self._provider or StubQuoteProvider(),
                max_workers=settings.quote_fetch_workers,
                timeout_seconds=settings.quote_fetch_timeout_seconds,
            )
        return self._market_data_service

    @property
    def portfolio(self) -> PortfolioService:
        """Get the PortfolioService instance."""
        if self._portfolio_service is None:
            self._portfolio_service = PortfolioService(
                store=self.store,
                engine=LedgerEngine(clock=self._clock),
                tracker=self.tracker,
                market_data=self.market_data,
                planner=ContributionPlanner(),
                clock=self._clock,
            )
        return self._portfolio_service

    @property
    def analysis(self) -> AnalysisService:
        """Get the AnalysisService instance."""
        if self._analysis_service is None:
            self._analysis_service = AnalysisService(self.store)
        return self._analysis_service

    # JSON interchange
    @property
    def json_exporter(self) -> JsonExporter:
        if self._json_exporter is None:
            self._json_exporter = JsonExporter(self.store)
        return self._json_exporter

    @property
    def json_importer(self) -> JsonImporter:
        if self._json_importer is None:
            self._json_importer = JsonImporter(self.store, tracker=self.tracker)
        return self._json_importer

    def close(self) -> None:
        """Clean up resources."""
        if self._session:
            self._session.close()
            self._session = None


# Global application context
_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
    return _app_context


def set_app_context(context: Optional[AppContext]) -> None:
    """Set (or clear) the global application context."""
    global _app_context
    _app_context = context
