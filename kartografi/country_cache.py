from __future__ import annotations

import logging
import threading
import time
import typing as t
from concurrent.futures import Future

from kartografi.restcountries import BULK_FIELDS, JsonDict, RestCountriesClient

log = logging.getLogger(__name__)

DEFAULT_TTL_S = 60 * 60


class CountryCache:
    """Process-wide copy of the bulk country listing.

    Refreshes lazily once older than `ttl_s`. Concurrent callers that find the
    cache stale share a single upstream fetch: the first one performs it, the
    rest block on its Future and get the same list (or the same exception).
    """

    def __init__(
        self,
        client: RestCountriesClient,
        ttl_s: float = DEFAULT_TTL_S,
        clock: t.Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.ttl_s = ttl_s
        self._clock = clock
        self._lock = threading.Lock()
        self._countries: list[JsonDict] | None = None
        self._fetched_at = 0.0
        self._inflight: Future[list[JsonDict]] | None = None

    def _is_fresh(self, now: float) -> bool:
        return self._countries is not None and now - self._fetched_at <= self.ttl_s

    def get_countries(self) -> list[JsonDict]:
        with self._lock:
            if self._is_fresh(self._clock()):
                return t.cast(list[JsonDict], self._countries)
            flight = self._inflight
            leader = flight is None
            if leader:
                flight = self._inflight = Future()

        if not leader:
            return flight.result()

        started = self._clock()
        try:
            countries = self.client.all_countries(BULK_FIELDS)
        except BaseException as e:
            with self._lock:
                self._inflight = None
            flight.set_exception(e)
            log.error("Country cache refresh failed: %s", e)
            raise

        with self._lock:
            self._countries = countries
            self._fetched_at = self._clock()
            self._inflight = None
        flight.set_result(countries)
        log.info("Country cache refreshed: %d countries in %.2fs", len(countries), self._clock() - started)
        return countries

    def invalidate(self) -> None:
        with self._lock:
            self._countries = None
            self._fetched_at = 0.0
