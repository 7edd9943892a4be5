"""Market data service for fund quotes."""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Optional

from fund_ledger.domain.views import Quote
from fund_ledger.providers.quote_provider import QuoteProvider

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8
DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0


@dataclass
class QuoteBatch:
    """Quotes fetched for a batch of fund ids plus the ids that failed."""

    quotes: dict[str, Quote] = field(default_factory=dict)
    failed_ids: list[str] = field(default_factory=list)


class MarketDataService:
    """
    Service for fetching quotes from a provider.

    Fetches fan out over a thread pool; a provider error, a None result or
    a fetch still running at the timeout marks that id as failed without
    affecting the others.
    """

    def __init__(
        self,
        provider: QuoteProvider,
        max_workers: int = DEFAULT_MAX_WORKERS,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
    ):
        self._provider = provider
        self._max_workers = max(1, max_workers)
        self._timeout = timeout_seconds

    def get_quote(self, fund_id: str) -> Optional[Quote]:
        """Fetch one quote; failures are logged and return None."""
        try:
            return self._provider.get_quote(fund_id)
        except Exception:
            logger.warning("Quote fetch failed for %s", fund_id, exc_info=True)
            return None

    def fetch_quotes(self, fund_ids: list[str]) -> QuoteBatch:
        """Fetch quotes for fund_ids concurrently."""
        batch = QuoteBatch()
        # Preserve order, drop duplicates
        fund_ids = list(dict.fromkeys(fund_ids))
        if not fund_ids:
            return batch

        executor = ThreadPoolExecutor(max_workers=min(self._max_workers, len(fund_ids)))
        try:
            futures = {executor.submit(self._provider.get_quote, fid): fid for fid in fund_ids}
            done, not_done = wait(futures, timeout=self._timeout)

            for future in not_done:
                logger.warning("Quote fetch timed out for %s", futures[future])

            results: dict[str, Quote] = {}
            for future in done:
                fund_id = futures[future]
                try:
                    quote = future.result()
                except Exception:
                    logger.warning("Quote fetch failed for %s", fund_id, exc_info=True)
                    continue
                if quote is None:
                    logger.info("No quote available for %s", fund_id)
                    continue
                results[fund_id] = quote
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for fund_id in fund_ids:
            if fund_id in results:
                batch.quotes[fund_id] = results[fund_id]
            else:
                batch.failed_ids.append(fund_id)
        return batch
