"""
Data source selection: persisted store or static catalog.

DataSourceContext holds the result of the store connectivity probe. The probe
runs once at startup and again whenever the cached result is older than the
TTL, so a store that comes back (or goes away) is picked up without a restart.
"""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session, sessionmaker

from app.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


class DataSourceContext:
    def __init__(
        self,
        probe: Callable[[], bool],
        mock_only: bool = False,
        ttl_seconds: float = 30,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._probe = probe
        self.mock_only = mock_only
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._available: Optional[bool] = None
        self._checked_at: float = 0.0
        self._lock = threading.Lock()

    def _is_fresh(self, now: float) -> bool:
        return self._available is not None and (now - self._checked_at) < self.ttl_seconds

    def refresh(self) -> bool:
        """Run the probe now and cache its result."""
        with self._lock:
            return self._run_probe(self._clock())

    def _run_probe(self, now: float) -> bool:
        try:
            available = bool(self._probe())
        except Exception as exc:
            logger.warning(f"Store connectivity probe raised {type(exc).__name__}: {exc}")
            available = False

        if available != self._available:
            if available:
                logger.info("Catalog store reachable; using persisted catalog")
            else:
                logger.warning("Catalog store unreachable; using static catalog")
        self._available = available
        self._checked_at = now
        return available

    def is_store_available(self) -> bool:
        """Cached probe result, re-probed once the TTL has expired."""
        if self.mock_only:
            return False

        now = self._clock()
        if self._is_fresh(now):
            return bool(self._available)

        with self._lock:
            now = self._clock()
            if self._is_fresh(now):
                return bool(self._available)
            return self._run_probe(now)

    @property
    def mock_mode(self) -> bool:
        return not self.is_store_available()

    def health(self) -> dict:
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "mockMode": self.mock_mode,
        }


def session_probe(session_factory: sessionmaker) -> Callable[[], bool]:
    """Build a probe that opens a short-lived session and pings the store."""

    def probe() -> bool:
        db: Session = session_factory()
        try:
            return CatalogService(db).ping()
        finally:
            db.close()

    return probe
