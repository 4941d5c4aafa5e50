"""Dashboard client — fetches one month of report data and keeps paginated view state."""

import asyncio
import calendar
import logging
import math
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Optional

import httpx

from . import config
from .schemas import CategoryCountSchema, PriceBucketSchema, StatisticsSchema, TransactionSchema

logger = logging.getLogger(__name__)

DEFAULT_MONTH = 5
DEFAULT_PER_PAGE = 4
FETCH_ERROR = "Error fetching data"


@dataclass
class DashboardState:
    month: int = DEFAULT_MONTH
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    transactions: list[TransactionSchema] = field(default_factory=list)
    statistics: Optional[StatisticsSchema] = None
    price_ranges: list[PriceBucketSchema] = field(default_factory=list)
    categories: list[CategoryCountSchema] = field(default_factory=list)
    loading: bool = False
    error: str = ""

    @property
    def total_count(self) -> int:
        s = self.statistics
        return s.total_sold + s.total_not_sold if s else 0

    @property
    def total_pages(self) -> int:
        # An empty month still shows "page 1 of 1".
        return max(1, math.ceil(self.total_count / self.per_page))

    @property
    def month_label(self) -> str:
        return calendar.month_name[self.month] if 1 <= self.month <= 12 else ""


class DashboardClient:
    """Talks to the reporting API on behalf of one dashboard view.

    Listing is paged server-side: changing page fetches only that page, and
    the page count comes from the month's statistics, which use the same
    month filter as the listing.
    """

    def __init__(
        self,
        base_url: str = config.API_URL,
        *,
        month: int = DEFAULT_MONTH,
        per_page: int = DEFAULT_PER_PAGE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.state = DashboardState(month=month, per_page=per_page)
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self._in_flight = 0

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    @asynccontextmanager
    async def _busy(self) -> AsyncIterator[None]:
        # Overlapping loads keep the flag up until the last one settles.
        self._in_flight += 1
        self.state.loading = True
        try:
            yield
        finally:
            self._in_flight -= 1
            self.state.loading = self._in_flight > 0

    # ── Fetching ──────────────────────────────────────────────────────────────

    def _is_stale(self, params: dict) -> bool:
        s = self.state
        return params["month"] != s.month or params.get("page", s.page) != s.page

    async def _fetch_into(self, path: str, params: dict, apply: Callable[[Any], None]) -> bool:
        """GET ``path`` and hand the JSON body to ``apply``.

        A response for a month or page the view has since left is dropped.
        """
        try:
            r = await self._client.get(path, params=params)
            if self._is_stale(params):
                return True
            r.raise_for_status()
            apply(r.json())
        except (httpx.HTTPError, ValueError) as exc:
            if self._is_stale(params):
                return True
            logger.warning("Fetching %s failed: %s", path, exc)
            self.state.error = FETCH_ERROR
            return False
        return True

    def _set_transactions(self, data: Any) -> None:
        self.state.transactions = [TransactionSchema.model_validate(t) for t in data]

    def _set_statistics(self, data: Any) -> None:
        # The API answers null for a month with no sales.
        self.state.statistics = StatisticsSchema.model_validate(data) if data else None

    def _set_price_ranges(self, data: Any) -> None:
        self.state.price_ranges = [PriceBucketSchema.model_validate(b) for b in data]

    def _set_categories(self, data: Any) -> None:
        self.state.categories = [CategoryCountSchema.model_validate(c) for c in data]

    def _fetch_page(self):
        s = self.state
        return self._fetch_into(
            "/api/transactions",
            {"month": s.month, "page": s.page, "perPage": s.per_page},
            self._set_transactions,
        )

    async def load(self) -> bool:
        """Fetch the current page, statistics and both charts concurrently.

        Each response updates state as it arrives; a failed request leaves
        earlier data in place. Returns True when all four succeeded.
        """
        s = self.state
        s.error = ""
        params = {"month": s.month}
        async with self._busy():
            results = await asyncio.gather(
                self._fetch_page(),
                self._fetch_into("/api/statistics", params, self._set_statistics),
                self._fetch_into("/api/bar-chart", params, self._set_price_ranges),
                self._fetch_into("/api/pie-chart", params, self._set_categories),
            )
        return all(results)

    # ── Navigation ────────────────────────────────────────────────────────────

    async def select_month(self, month: int) -> bool:
        self.state.month = month
        self.state.page = 1
        return await self.load()

    async def go_to_page(self, page: int) -> bool:
        s = self.state
        target = min(max(page, 1), s.total_pages)
        if target == s.page:
            return True
        s.page = target
        s.error = ""
        async with self._busy():
            return await self._fetch_page()

    async def next_page(self) -> bool:
        return await self.go_to_page(self.state.page + 1)

    async def prev_page(self) -> bool:
        return await self.go_to_page(self.state.page - 1)
