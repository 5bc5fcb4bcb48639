import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from decimal import Decimal

from domain.models.basket import (
	AssetClass,
	AssetConfig,
	Baseline,
	RatedAsset,
	RateOrigin,
	RateSnapshot,
)
from domain.models.defaults import default_rate_for

logger = logging.getLogger(__name__)

REFERENCE_RATE = Decimal('1')


class Reconciler:
	"""Builds a complete snapshot for one basket from live, baseline and default rates.

	For each configured asset, in list order:

	1. the reference asset (USD on the fiat basket) is fixed at 1, LIVE;
	2. a positive fetched rate is used as-is, LIVE;
	3. a positive baseline rate is used, BASELINE;
	4. the static default table is used (1 for unlisted codes), DEFAULT.

	``fetched=None`` means the fetch failed and step 2 is skipped for every asset.
	"""

	def __init__(
		self,
		asset_class: AssetClass,
		default_rate: Callable[[AssetClass, str], Decimal] = default_rate_for,
	):
		self.asset_class = asset_class
		self.reference_code = asset_class.reference_code
		self._default_rate = default_rate

	@staticmethod
	def _positive(value: Decimal | None) -> bool:
		return value is not None and value > 0

	def reconcile(
		self,
		configs: list[AssetConfig],
		fetched: Mapping[str, Decimal] | None,
		baseline: Baseline,
		fetched_at: datetime,
	) -> RateSnapshot:
		baseline_rates = baseline.rates_for(self.asset_class)
		rates: dict[str, RatedAsset] = {}
		sourced: dict[str, RateOrigin] = {}

		for config in configs:
			if config.code == self.reference_code:
				rate, origin = REFERENCE_RATE, RateOrigin.LIVE
			elif fetched is not None and self._positive(fetched.get(config.code)):
				rate, origin = fetched[config.code], RateOrigin.LIVE
			elif self._positive(baseline_rates.get(config.code)):
				rate, origin = baseline_rates[config.code], RateOrigin.BASELINE
				logger.warning(f'Using baseline rate for {config.code}: {rate}')
			else:
				rate, origin = self._default_rate(self.asset_class, config.code), RateOrigin.DEFAULT
				logger.warning(f'Using default rate for {config.code}: {rate}')

			rates[config.code] = RatedAsset.from_config(config, rate)
			sourced[config.code] = origin

		snapshot = RateSnapshot(
			asset_class=self.asset_class, rates=rates, fetched_at=fetched_at, sourced=sourced
		)
		if snapshot.missing:
			logger.warning(
				f'Missing {self.asset_class.value} rates for: {", ".join(snapshot.missing)}'
			)
		logger.info(f'Reconciled {len(rates)} {self.asset_class.value} rates')
		return snapshot
