import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta

from domain.models.basket import AssetClass, RateSnapshot

logger = logging.getLogger(__name__)

Refresher = Callable[[], Awaitable[RateSnapshot]]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
	return datetime.now(UTC)


class RateCache:
	"""Owns the current snapshot of one asset class and refreshes it when stale.

	Refreshes are single-flight: callers arriving while a refresh is running wait for
	it and receive its snapshot instead of starting another one.
	"""

	def __init__(
		self,
		asset_class: AssetClass,
		refresher: Refresher,
		ttl: timedelta = timedelta(seconds=60),
		clock: Clock = utc_now,
	):
		self.asset_class = asset_class
		self.ttl = ttl
		self._refresher = refresher
		self._clock = clock
		self._lock = asyncio.Lock()
		self._snapshot: RateSnapshot | None = None
		self.last_refresh: datetime | None = None

	def peek(self) -> RateSnapshot | None:
		return self._snapshot

	def is_stale(self) -> bool:
		if self._snapshot is None or self.last_refresh is None:
			return True
		return self._clock() - self.last_refresh >= self.ttl

	async def get(self) -> RateSnapshot:
		snapshot = self._snapshot
		if snapshot is not None and not self.is_stale():
			logger.debug(f'{self.asset_class.value} cache HIT (fetched at {snapshot.fetched_at})')
			return snapshot

		async with self._lock:
			# another caller may have refreshed while we waited for the lock
			if self._snapshot is not None and not self.is_stale():
				return self._snapshot
			logger.debug(f'{self.asset_class.value} cache MISS, refreshing')
			return await self._refresh_locked()

	async def refresh(self) -> RateSnapshot:
		async with self._lock:
			return await self._refresh_locked()

	async def _refresh_locked(self) -> RateSnapshot:
		snapshot = await self._refresher()
		previous = self._snapshot
		if previous is not None and snapshot.fetched_at < previous.fetched_at:
			snapshot = dataclasses.replace(snapshot, fetched_at=previous.fetched_at)

		self._snapshot = snapshot
		self.last_refresh = self._clock()
		return snapshot
