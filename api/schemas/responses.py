from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class RatedAssetResponse(BaseModel):
	code: str = Field(..., description='Currency code or ticker symbol')
	name: str = Field(..., description='Display name')
	weight: Decimal = Field(..., description='Relative weight in the basket')
	rate: Decimal = Field(..., description='Units per USD (fiat) or USD price (crypto)')


class BasketEntryResponse(RatedAssetResponse):
	usd_value: Decimal = Field(..., description='USD value of one unit')
	origin: str = Field(..., description='LIVE, BASELINE or DEFAULT')


class BasketBreakdown(BaseModel):
	fiat_basket: list[BasketEntryResponse]
	crypto_basket: list[BasketEntryResponse]


class AvgxResponse(BaseModel):
	avgx_usd: Decimal = Field(..., description='Current AVGX value in USD')
	wf_value: Decimal = Field(..., description='Weighted fiat basket value')
	wc_value: Decimal = Field(..., description='Weighted crypto basket value')
	change24h: Decimal | None = Field(None, description='Percent change over 24h, null without history')
	timestamp: datetime
	breakdown: BasketBreakdown

	class ConfigDict:
		json_schema_extra = {
			'example': {
				'avgx_usd': 14523.41,
				'wf_value': 0.6102,
				'wc_value': 29046.21,
				'change24h': None,
				'timestamp': '2025-09-27T10:30:00Z',
			}
		}


class FiatConversion(BaseModel):
	code: str
	name: str
	rate: Decimal = Field(..., description='Units of the currency per 1 AVGX')


class CryptoConversion(BaseModel):
	symbol: str
	name: str
	price_usd: Decimal
	avgx_rate: Decimal = Field(..., description='Units of the coin per 1 AVGX')


class PricesResponse(BaseModel):
	avgx_usd: Decimal
	fiat_conversions: list[FiatConversion]
	crypto_conversions: list[CryptoConversion]
	timestamp: datetime


class HistoryPoint(BaseModel):
	timestamp: datetime
	avgx_usd: Decimal


class HistoryResponse(BaseModel):
	timeframe: str
	data: list[HistoryPoint]
	count: int


class BaselineStatusResponse(BaseModel):
	baseline_timestamp: str | None
	config: dict[str, int]
	missing_data: dict[str, list[str]]
	baseline_values: dict[str, Decimal | None]


class ConversionResponse(BaseModel):
	from_currency: str = Field(..., description='Always AVGX')
	to_currency: str = Field(..., description='Target currency code')
	original_amount: Decimal = Field(..., description='Original amount requested')
	converted_amount: Decimal = Field(..., description='Converted amount')
	exchange_rate: Decimal = Field(..., description='Units of the target per 1 AVGX')
	timestamp: datetime = Field(..., description='When the index was computed')
