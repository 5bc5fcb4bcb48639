import logging
from decimal import Decimal

from domain.exceptions.index import MalformedResponse
from domain.models.basket import AssetClass, AssetConfig
from infrastructure.providers.base import RateSource

logger = logging.getLogger(__name__)


class ExchangeRateAPIProvider(RateSource):
	BASE_URL = 'https://api.exchangerate-api.com/v4/latest/USD'

	def __init__(self, base_url: str = BASE_URL, **kwargs):
		super().__init__(base_url, **kwargs)

	@property
	def name(self) -> str:
		return 'exchangerate-api'

	@property
	def asset_class(self) -> AssetClass:
		return AssetClass.FIAT

	def _headers(self) -> dict[str, str]:
		headers = super()._headers()
		if self.api_key:
			headers['Authorization'] = f'Bearer {self.api_key}'
		return headers

	async def fetch(self, assets: list[AssetConfig]) -> dict[str, Decimal]:
		data = await self._request(self.base_url)

		if not isinstance(data, dict) or not isinstance(data.get('rates'), dict):
			raise MalformedResponse(f'{self.name} response has no rates object')

		rates: dict[str, Decimal] = {}
		for code, value in data['rates'].items():
			rate = self._as_rate(value)
			if rate is None:
				logger.warning(f'Ignoring non-numeric rate for {code} from {self.name}: {value!r}')
				continue
			rates[code.upper()] = rate

		logger.info(f'Found {len(rates)} rates in {self.name} response')
		return rates
