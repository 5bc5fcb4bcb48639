import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from application.services.averager import weighted_average
from application.services.reconciler import Reconciler
from application.services.retry import with_retry
from domain.exceptions.index import SourceError
from domain.models.basket import AssetConfig, Baseline, RatedAsset, RateSnapshot
from infrastructure.cache.rate_cache import RateCache
from infrastructure.providers.base import RateSource

logger = logging.getLogger(__name__)


class BasketService:
	"""Entry point for one basket: cached, reconciled rates and their weighted average."""

	def __init__(
		self,
		source: RateSource,
		assets: list[AssetConfig],
		baseline: Baseline,
		cache_ttl: timedelta = timedelta(seconds=60),
		retry_attempts: int = 3,
		retry_delay: float = 1.0,
		clock: Callable[[], datetime] | None = None,
	):
		self.source = source
		self.asset_class = source.asset_class
		self.assets = assets
		self.baseline = baseline
		self.retry_attempts = retry_attempts
		self.retry_delay = retry_delay
		self._clock = clock or (lambda: datetime.now(UTC))
		self.reconciler = Reconciler(self.asset_class)
		self.cache = RateCache(self.asset_class, self._refresh, ttl=cache_ttl, clock=self._clock)

	async def _fetch_and_reconcile(self) -> RateSnapshot:
		fetched = await self.source.fetch(self.assets)
		return self.reconciler.reconcile(self.assets, fetched, self.baseline, self._clock())

	async def _refresh(self) -> RateSnapshot:
		try:
			snapshot = await with_retry(
				self._fetch_and_reconcile, attempts=self.retry_attempts, delay=self.retry_delay
			)
		except SourceError as e:
			logger.error(f'Failed to fetch {self.asset_class.value} rates from {self.source.name}: {e}')
			logger.info(f'Using baseline {self.asset_class.value} rates due to API failure')
			return self.reconciler.reconcile(self.assets, None, self.baseline, self._clock())

		logger.info(f'Successfully loaded {len(snapshot.rates)} {self.asset_class.value} rates')
		return snapshot

	async def get_snapshot(self) -> RateSnapshot:
		return await self.cache.get()

	async def refresh(self) -> RateSnapshot:
		return await self.cache.refresh()

	async def get_rates_with_weights(self) -> list[RatedAsset]:
		snapshot = await self.cache.get()
		return snapshot.assets

	async def get_weighted_average(self) -> Decimal:
		snapshot = await self.cache.get()
		return weighted_average(snapshot)

	def get_missing_codes(self) -> list[str]:
		snapshot = self.cache.peek()
		return snapshot.missing if snapshot is not None else []
