import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.index import BasketError, InvalidTimeframe, UnknownAssetError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidTimeframe)
	async def invalid_timeframe_handler(request: Request, exc: InvalidTimeframe):
		return JSONResponse(status_code=400, content={'success': False, 'message': str(exc)})

	@app.exception_handler(UnknownAssetError)
	async def unknown_asset_handler(request: Request, exc: UnknownAssetError):
		return JSONResponse(status_code=404, content={'success': False, 'message': str(exc)})

	@app.exception_handler(BasketError)
	async def basket_error_handler(request: Request, exc: BasketError):
		logger.error(f'Basket error: {exc}')
		return JSONResponse(
			status_code=500,
			content={'success': False, 'message': f'Failed to calculate AVGX: {exc}'},
		)
