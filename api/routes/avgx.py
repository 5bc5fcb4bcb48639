from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import (
	get_conversion_service,
	get_crypto_service,
	get_fiat_service,
	get_index_service,
)
from api.schemas import (
	AvgxResponse,
	BaselineStatusResponse,
	ConversionResponse,
	HistoryResponse,
	PricesResponse,
	RatedAssetResponse,
)
from application.services import AvgxIndexService, BasketService, ConversionService
from domain.models.basket import RatedAsset

router = APIRouter(prefix='/api', tags=['avgx'])


def _rated_asset_response(asset: RatedAsset) -> RatedAssetResponse:
	return RatedAssetResponse(
		code=asset.code, name=asset.display_name, weight=asset.weight, rate=asset.rate
	)


@router.get(
	'/avgx',
	response_model=AvgxResponse,
	status_code=status.HTTP_200_OK,
	summary='Current AVGX value with basket breakdown',
)
async def get_avgx(
	service: Annotated[AvgxIndexService, Depends(get_index_service)],
) -> AvgxResponse:
	breakdown = await service.get_detailed_breakdown()
	index = breakdown['avgx']
	return AvgxResponse(
		avgx_usd=index.avgx_usd,
		wf_value=index.wf_value,
		wc_value=index.wc_value,
		change24h=index.change24h,
		timestamp=index.timestamp,
		breakdown={
			'fiat_basket': breakdown['fiat_basket'],
			'crypto_basket': breakdown['crypto_basket'],
		},
	)


@router.get(
	'/prices',
	response_model=PricesResponse,
	status_code=status.HTTP_200_OK,
	summary='AVGX converted to every basket currency',
)
async def get_prices(
	index_service: Annotated[AvgxIndexService, Depends(get_index_service)],
	conversion_service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> PricesResponse:
	index = await index_service.get_current_index()
	return PricesResponse(
		avgx_usd=index.avgx_usd,
		fiat_conversions=await conversion_service.convert_to_all_currencies(index.avgx_usd),
		crypto_conversions=await conversion_service.crypto_conversions(index.avgx_usd),
		timestamp=index.timestamp,
	)


@router.get(
	'/history',
	response_model=HistoryResponse,
	status_code=status.HTTP_200_OK,
	summary='Recorded AVGX values for a timeframe',
)
async def get_history(
	service: Annotated[AvgxIndexService, Depends(get_index_service)],
	timeframe: Annotated[str, Query()] = '24h',
) -> HistoryResponse:
	history = await service.get_historical_data(timeframe)
	return HistoryResponse(
		timeframe=timeframe,
		data=[{'timestamp': p.timestamp, 'avgx_usd': p.avgx_usd} for p in history],
		count=len(history),
	)


@router.get(
	'/admin/baseline_status',
	response_model=BaselineStatusResponse,
	status_code=status.HTTP_200_OK,
	summary='Baseline snapshot and missing-rate diagnostics',
)
async def get_baseline_status(
	service: Annotated[AvgxIndexService, Depends(get_index_service)],
) -> BaselineStatusResponse:
	return BaselineStatusResponse(**service.get_baseline_status())


@router.get(
	'/avgx/fiat-rates',
	response_model=list[RatedAssetResponse],
	status_code=status.HTTP_200_OK,
	summary='Reconciled fiat basket',
)
async def get_fiat_rates(
	service: Annotated[BasketService, Depends(get_fiat_service)],
) -> list[RatedAssetResponse]:
	return [_rated_asset_response(asset) for asset in await service.get_rates_with_weights()]


@router.get(
	'/avgx/crypto-prices',
	response_model=list[RatedAssetResponse],
	status_code=status.HTTP_200_OK,
	summary='Reconciled crypto basket',
)
async def get_crypto_prices(
	service: Annotated[BasketService, Depends(get_crypto_service)],
) -> list[RatedAssetResponse]:
	return [_rated_asset_response(asset) for asset in await service.get_rates_with_weights()]


@router.get(
	'/convert/{to_currency}/{amount}',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert an AVGX amount into a basket currency',
)
async def convert_avgx(
	to_currency: Annotated[str, Path(min_length=3, max_length=6)],
	amount: Annotated[Decimal, Path(gt=0)],
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	result = await service.convert(amount, to_currency.upper())
	return ConversionResponse(**result)
