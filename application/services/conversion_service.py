from decimal import Decimal

from application.services.basket_service import BasketService
from application.services.index_service import AvgxIndexService
from domain.exceptions.index import UnknownAssetError


class ConversionService:
	def __init__(self, index_service: AvgxIndexService, fiat: BasketService, crypto: BasketService):
		self.index_service = index_service
		self.fiat = fiat
		self.crypto = crypto

	async def convert_to_all_currencies(self, avgx_usd: Decimal | None = None) -> list[dict]:
		"""Value of 1 AVGX in every fiat currency of the basket."""
		if avgx_usd is None:
			avgx_usd = (await self.index_service.get_current_index()).avgx_usd
		fiats = await self.fiat.get_rates_with_weights()
		return [
			{'code': fiat.code, 'name': fiat.display_name, 'rate': avgx_usd * fiat.rate}
			for fiat in fiats
		]

	async def crypto_conversions(self, avgx_usd: Decimal | None = None) -> list[dict]:
		"""Value of 1 AVGX in units of every crypto asset of the basket."""
		if avgx_usd is None:
			avgx_usd = (await self.index_service.get_current_index()).avgx_usd
		cryptos = await self.crypto.get_rates_with_weights()
		return [
			{
				'symbol': crypto.code,
				'name': crypto.display_name,
				'price_usd': crypto.rate,
				'avgx_rate': avgx_usd / crypto.rate,
			}
			for crypto in cryptos
		]

	async def convert(self, amount: Decimal, to_code: str) -> dict:
		index = await self.index_service.get_current_index()
		to_code = to_code.upper()

		fiats = {f.code: f for f in await self.fiat.get_rates_with_weights()}
		cryptos = {c.code: c for c in await self.crypto.get_rates_with_weights()}

		if to_code in fiats:
			rate = index.avgx_usd * fiats[to_code].rate
		elif to_code in cryptos:
			rate = index.avgx_usd / cryptos[to_code].rate
		else:
			raise UnknownAssetError(f'Currency {to_code} is not part of the AVGX baskets')

		return {
			'from_currency': 'AVGX',
			'to_currency': to_code,
			'original_amount': amount,
			'converted_amount': amount * rate,
			'exchange_rate': rate,
			'timestamp': index.timestamp,
		}
