import logging
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from domain.exceptions.index import MalformedResponse, SourceUnavailable
from domain.models.basket import AssetClass, AssetConfig

logger = logging.getLogger(__name__)


class RateSource(ABC):
	"""Base class for pricing APIs, handling the common HTTP and parsing logic.

	Implementations normalize a provider response into ``{code: rate}`` and never retry.
	"""

	def __init__(
		self,
		base_url: str,
		api_key: str = '',
		client: httpx.AsyncClient | None = None,
		timeout: float = 10,
	):
		self.base_url = base_url.rstrip('/')
		self.api_key = api_key
		self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

	@property
	@abstractmethod
	def name(self) -> str: ...

	@property
	@abstractmethod
	def asset_class(self) -> AssetClass: ...

	@abstractmethod
	async def fetch(self, assets: list[AssetConfig]) -> dict[str, Decimal]: ...

	def _headers(self) -> dict[str, str]:
		return {'Accept': 'application/json', 'User-Agent': 'AVGX-Backend/1.0'}

	async def _request(self, url: str, params: dict | None = None) -> Any:
		logger.info(f'Fetching {self.asset_class.value} rates from {self.name}: {url}')
		try:
			response = await self._client.get(url, params=params, headers=self._headers())
			response.raise_for_status()
		except httpx.HTTPStatusError as e:
			raise SourceUnavailable(
				f'{self.name} HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise SourceUnavailable(f'{self.name} request failed: {e.__class__.__name__}') from e

		try:
			return response.json()
		except ValueError as e:
			raise MalformedResponse(f'{self.name} response parsing error: {str(e)}') from e

	@staticmethod
	def _as_rate(value: Any) -> Decimal | None:
		"""Returns the value as a Decimal if it is a JSON number, otherwise None."""
		if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
			return None
		try:
			rate = Decimal(str(value))
		except InvalidOperation:
			return None
		return rate if rate.is_finite() else None

	async def close(self) -> None:
		await self._client.aclose()
