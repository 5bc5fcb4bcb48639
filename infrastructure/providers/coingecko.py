import logging
from decimal import Decimal

from domain.exceptions.index import MalformedResponse
from domain.models.basket import AssetClass, AssetConfig
from infrastructure.providers.base import RateSource

logger = logging.getLogger(__name__)


class CoinGeckoProvider(RateSource):
	BASE_URL = 'https://api.coingecko.com/api/v3'
	VS_CURRENCY = 'usd'

	def __init__(self, base_url: str = BASE_URL, **kwargs):
		super().__init__(base_url, **kwargs)

	@property
	def name(self) -> str:
		return 'coingecko'

	@property
	def asset_class(self) -> AssetClass:
		return AssetClass.CRYPTO

	def _headers(self) -> dict[str, str]:
		headers = super()._headers()
		if self.api_key:
			headers['x-cg-demo-api-key'] = self.api_key
		return headers

	async def fetch(self, assets: list[AssetConfig]) -> dict[str, Decimal]:
		if not assets:
			return {}

		ids = {asset.provider_id: asset.code for asset in assets}
		data = await self._request(
			f'{self.base_url}/simple/price',
			{'ids': ','.join(ids), 'vs_currencies': self.VS_CURRENCY},
		)

		if not isinstance(data, dict):
			raise MalformedResponse(f'{self.name} response is not a price object')

		prices: dict[str, Decimal] = {}
		for provider_id, quote in data.items():
			code = ids.get(provider_id)
			if code is None:
				continue
			if not isinstance(quote, dict):
				raise MalformedResponse(f'{self.name} quote for {provider_id} is not an object')

			price = self._as_rate(quote.get(self.VS_CURRENCY))
			if price is None:
				logger.warning(f'Ignoring non-numeric price for {code} from {self.name}: {quote!r}')
				continue
			prices[code] = price

		logger.info(f'Found {len(prices)} prices in {self.name} response')
		return prices
