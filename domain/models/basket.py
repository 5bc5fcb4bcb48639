from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class RateConvention(Enum):
	UNITS_PER_USD = 'units_per_usd'  # 1 USD buys `rate` units of the asset
	USD_PER_UNIT = 'usd_per_unit'  # 1 unit of the asset costs `rate` USD


class AssetClass(Enum):
	FIAT = 'fiat'
	CRYPTO = 'crypto'

	@property
	def convention(self) -> RateConvention:
		if self is AssetClass.FIAT:
			return RateConvention.UNITS_PER_USD
		return RateConvention.USD_PER_UNIT

	@property
	def reference_code(self) -> str | None:
		return 'USD' if self is AssetClass.FIAT else None


class RateOrigin(Enum):
	LIVE = 'LIVE'
	BASELINE = 'BASELINE'
	DEFAULT = 'DEFAULT'


@dataclass(frozen=True)
class AssetConfig:
	code: str
	display_name: str
	weight: Decimal
	source_id: str | None = None

	@property
	def provider_id(self) -> str:
		return self.source_id or self.code.lower()


@dataclass(frozen=True)
class RatedAsset:
	code: str
	display_name: str
	weight: Decimal
	rate: Decimal

	@classmethod
	def from_config(cls, config: AssetConfig, rate: Decimal) -> 'RatedAsset':
		return cls(code=config.code, display_name=config.display_name, weight=config.weight, rate=rate)


@dataclass(frozen=True)
class RateSnapshot:
	asset_class: AssetClass
	rates: dict[str, RatedAsset]
	fetched_at: datetime
	sourced: dict[str, RateOrigin]

	@property
	def assets(self) -> list[RatedAsset]:
		return list(self.rates.values())

	@property
	def missing(self) -> list[str]:
		"""Codes that fell through to the static default table."""
		return [code for code, origin in self.sourced.items() if origin is RateOrigin.DEFAULT]

	@property
	def used_baseline(self) -> list[str]:
		return [code for code, origin in self.sourced.items() if origin is RateOrigin.BASELINE]


@dataclass(frozen=True)
class Baseline:
	timestamp: str | None = None
	avgx_value: Decimal | None = None
	wf_value: Decimal | None = None
	wc_value: Decimal | None = None
	fiat_rates: dict[str, Decimal] = field(default_factory=dict)
	crypto_prices: dict[str, Decimal] = field(default_factory=dict)

	def rates_for(self, asset_class: AssetClass) -> dict[str, Decimal]:
		if asset_class is AssetClass.FIAT:
			return self.fiat_rates
		return self.crypto_prices


@dataclass(frozen=True)
class IndexValue:
	avgx_usd: Decimal
	wf_value: Decimal
	wc_value: Decimal
	timestamp: datetime
	change24h: Decimal | None = None


@dataclass(frozen=True)
class IndexPoint:
	timestamp: datetime
	avgx_usd: Decimal
