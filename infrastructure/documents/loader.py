import json
import logging
from decimal import Decimal
from pathlib import Path

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError, field_validator

from domain.exceptions.index import ConfigMissing
from domain.models.basket import AssetClass, AssetConfig, Baseline

logger = logging.getLogger(__name__)

ASSET_FILES = {
	AssetClass.FIAT: 'fiats.json',
	AssetClass.CRYPTO: 'cryptos.json',
}
BASELINE_FILE = 'baseline.json'


class AssetDocument(BaseModel):
	code: str = Field(..., min_length=1, validation_alias=AliasChoices('code', 'symbol'))
	name: str
	weight: Decimal = Field(..., ge=0)
	source_id: str | None = Field(
		default=None, validation_alias=AliasChoices('source_id', 'coingecko_id')
	)

	@field_validator('code')
	@classmethod
	def uppercase_code(cls, v: str):
		return v.upper()

	def to_domain(self) -> AssetConfig:
		return AssetConfig(
			code=self.code, display_name=self.name, weight=self.weight, source_id=self.source_id
		)


class BaselineDocument(BaseModel):
	timestamp: str | None = None
	avgx_value: Decimal | None = None
	wf_value: Decimal | None = None
	wc_value: Decimal | None = None
	fiat_rates: dict[str, Decimal] = Field(default_factory=dict)
	crypto_prices: dict[str, Decimal] = Field(default_factory=dict)

	def to_domain(self) -> Baseline:
		return Baseline(
			timestamp=self.timestamp,
			avgx_value=self.avgx_value,
			wf_value=self.wf_value,
			wc_value=self.wc_value,
			fiat_rates={code.upper(): rate for code, rate in self.fiat_rates.items()},
			crypto_prices={code.upper(): rate for code, rate in self.crypto_prices.items()},
		)


_asset_list_adapter = TypeAdapter(list[AssetDocument])


class DocumentLoader:
	"""Reads the static asset lists and the baseline snapshot from a data directory."""

	def __init__(self, data_dir: Path | str):
		self.data_dir = Path(data_dir)

	def _read_json(self, filename: str):
		path = self.data_dir / filename
		try:
			with path.open(encoding='utf-8') as fh:
				return json.load(fh, parse_float=Decimal)
		except FileNotFoundError as e:
			raise ConfigMissing(f'{path} not found') from e
		except (OSError, json.JSONDecodeError) as e:
			raise ConfigMissing(f'{path} could not be read: {e}') from e

	def load_assets_strict(self, asset_class: AssetClass) -> list[AssetConfig]:
		filename = ASSET_FILES[asset_class]
		raw = self._read_json(filename)
		try:
			documents = _asset_list_adapter.validate_python(raw)
		except ValidationError as e:
			raise ConfigMissing(f'{filename} is invalid: {e.error_count()} error(s)') from e

		codes = [doc.code for doc in documents]
		duplicates = sorted({code for code in codes if codes.count(code) > 1})
		if duplicates:
			raise ConfigMissing(f'{filename} has duplicate codes: {", ".join(duplicates)}')

		assets = [doc.to_domain() for doc in documents]
		provider_ids = [asset.provider_id for asset in assets]
		duplicates = sorted({pid for pid in provider_ids if provider_ids.count(pid) > 1})
		if duplicates:
			raise ConfigMissing(f'{filename} has duplicate provider ids: {", ".join(duplicates)}')

		return assets

	def load_assets(self, asset_class: AssetClass) -> list[AssetConfig]:
		try:
			assets = self.load_assets_strict(asset_class)
		except ConfigMissing as e:
			logger.error(f'Failed to load {asset_class.value} asset list, using empty basket: {e}')
			return []

		logger.info(f'Loaded {len(assets)} {asset_class.value} assets from config')
		return assets

	def load_baseline(self) -> Baseline:
		try:
			raw = self._read_json(BASELINE_FILE)
			baseline = BaselineDocument.model_validate(raw).to_domain()
		except ConfigMissing as e:
			logger.warning(f'Baseline unavailable, fallbacks will use default rates only: {e}')
			return Baseline()
		except ValidationError as e:
			logger.warning(f'Baseline is invalid, fallbacks will use default rates only: {e}')
			return Baseline()

		logger.info(
			f'Loaded baseline from {baseline.timestamp}: '
			f'{len(baseline.fiat_rates)} fiat rates, {len(baseline.crypto_prices)} crypto prices'
		)
		return baseline
