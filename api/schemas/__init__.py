from .responses import (
	AvgxResponse,
	BaselineStatusResponse,
	ConversionResponse,
	HistoryResponse,
	PricesResponse,
	RatedAssetResponse,
)

__all__ = [
	'AvgxResponse',
	'BaselineStatusResponse',
	'ConversionResponse',
	'HistoryResponse',
	'PricesResponse',
	'RatedAssetResponse',
]
