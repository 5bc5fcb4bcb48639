import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from redis.exceptions import RedisError

from application.services.averager import usd_value, weighted_average
from application.services.basket_service import BasketService
from application.services.composer import FIAT_BLEND_WEIGHT, compose_index
from domain.exceptions.index import CacheError, InvalidTimeframe
from domain.models.basket import Baseline, IndexPoint, IndexValue, RateSnapshot
from infrastructure.cache.history_store import HistoryStore

logger = logging.getLogger(__name__)

TIMEFRAMES = {
	'24h': timedelta(hours=24),
	'7d': timedelta(days=7),
	'30d': timedelta(days=30),
}
CHANGE_WINDOW = timedelta(hours=24)
# A prior point older than CHANGE_WINDOW plus this slack is not a 24h comparison.
CHANGE_SLACK = timedelta(hours=1)
HISTORY_ERRORS = (CacheError, RedisError)


class AvgxIndexService:
	def __init__(
		self,
		fiat: BasketService,
		crypto: BasketService,
		history: HistoryStore,
		baseline: Baseline,
		fiat_blend_weight: Decimal = FIAT_BLEND_WEIGHT,
		history_interval: timedelta = timedelta(minutes=5),
		clock: Callable[[], datetime] | None = None,
	):
		self.fiat = fiat
		self.crypto = crypto
		self.history = history
		self.baseline = baseline
		self.fiat_blend_weight = fiat_blend_weight
		self.history_interval = history_interval
		self._clock = clock or (lambda: datetime.now(UTC))

	async def _snapshots(self) -> tuple[RateSnapshot, RateSnapshot]:
		return await asyncio.gather(self.fiat.get_snapshot(), self.crypto.get_snapshot())

	async def _prior_value(self, now: datetime) -> Decimal | None:
		try:
			prior = await self.history.latest_before(now - CHANGE_WINDOW)
		except HISTORY_ERRORS as e:
			logger.warning(f'History lookup failed, change24h unavailable: {e}')
			return None
		if prior is None:
			return None
		if now - prior.timestamp > CHANGE_WINDOW + max(CHANGE_SLACK, self.history_interval):
			logger.debug(f'Latest history point {prior.timestamp} is too old for change24h')
			return None
		return prior.avgx_usd

	async def _compose(self, fiat_snapshot: RateSnapshot, crypto_snapshot: RateSnapshot) -> IndexValue:
		fiat_average = weighted_average(fiat_snapshot)
		crypto_average = weighted_average(crypto_snapshot)
		now = self._clock()

		index = compose_index(
			fiat_average,
			crypto_average,
			prior_value=await self._prior_value(now),
			timestamp=now,
			fiat_blend_weight=self.fiat_blend_weight,
		)
		await self._record(index)
		return index

	async def get_current_index(self) -> IndexValue:
		return await self._compose(*await self._snapshots())

	async def _record(self, index: IndexValue) -> None:
		try:
			latest = await self.history.latest()
			if latest is not None and index.timestamp - latest.timestamp < self.history_interval:
				return
			await self.history.append(IndexPoint(timestamp=index.timestamp, avgx_usd=index.avgx_usd))
		except HISTORY_ERRORS as e:
			logger.warning(f'Failed to record AVGX history point: {e}')
			return
		logger.debug(f'Recorded AVGX history point {index.avgx_usd} at {index.timestamp}')

	@staticmethod
	def _basket_breakdown(snapshot: RateSnapshot) -> list[dict]:
		convention = snapshot.asset_class.convention
		reference_code = snapshot.asset_class.reference_code
		return [
			{
				'code': asset.code,
				'name': asset.display_name,
				'weight': asset.weight,
				'rate': asset.rate,
				'usd_value': usd_value(asset, convention, reference_code),
				'origin': snapshot.sourced[asset.code].value,
			}
			for asset in snapshot.rates.values()
		]

	async def get_detailed_breakdown(self) -> dict:
		fiat_snapshot, crypto_snapshot = await self._snapshots()
		index = await self._compose(fiat_snapshot, crypto_snapshot)
		return {
			'avgx': index,
			'fiat_basket': self._basket_breakdown(fiat_snapshot),
			'crypto_basket': self._basket_breakdown(crypto_snapshot),
		}

	async def get_historical_data(self, timeframe: str = '24h') -> list[IndexPoint]:
		window = TIMEFRAMES.get(timeframe)
		if window is None:
			raise InvalidTimeframe(f'Invalid timeframe. Use: {", ".join(TIMEFRAMES)}')
		return await self.history.since(self._clock() - window)

	def get_baseline_status(self) -> dict:
		return {
			'baseline_timestamp': self.baseline.timestamp,
			'config': {
				'total_fiats': len(self.fiat.assets),
				'total_cryptos': len(self.crypto.assets),
			},
			'missing_data': {
				'fiat_currencies': self.fiat.get_missing_codes(),
				'cryptocurrencies': self.crypto.get_missing_codes(),
			},
			'baseline_values': {
				'avgx_value': self.baseline.avgx_value,
				'wf_value': self.baseline.wf_value,
				'wc_value': self.baseline.wc_value,
			},
		}
