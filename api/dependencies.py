import logging
from datetime import timedelta
from decimal import Decimal

from redis.asyncio import Redis

from application.services import AvgxIndexService, BasketService, ConversionService
from config.settings import Settings, get_settings
from domain.models.basket import AssetClass
from infrastructure.cache.history_store import HistoryStore, InMemoryHistoryStore, RedisHistoryStore
from infrastructure.documents.loader import DocumentLoader
from infrastructure.providers import CoinGeckoProvider, ExchangeRateAPIProvider

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	fiat_service: BasketService | None = None
	crypto_service: BasketService | None = None
	index_service: AvgxIndexService | None = None
	conversion_service: ConversionService | None = None
	history: HistoryStore | None = None


deps = AppDependencies()


def _build_history(settings: Settings) -> HistoryStore:
	if settings.HISTORY_BACKEND.lower() == 'redis':
		logger.info(f'Using redis index history at {settings.REDIS_URL}')
		return RedisHistoryStore(Redis.from_url(settings.REDIS_URL, decode_responses=True))
	return InMemoryHistoryStore()


def init_dependencies(settings: Settings | None = None) -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = settings or get_settings()

	loader = DocumentLoader(settings.DATA_DIR)
	baseline = loader.load_baseline()

	logger.info(
		f'Exchange Rates API Key available: {"Yes" if settings.EXCHANGE_RATES_API_KEY else "No"}'
	)
	logger.info(f'CoinGecko API Key available: {"Yes" if settings.COINGECKO_API_KEY else "No"}')

	basket_options = {
		'baseline': baseline,
		'cache_ttl': timedelta(seconds=settings.CACHE_TTL_SECONDS),
		'retry_attempts': settings.RETRY_ATTEMPTS,
		'retry_delay': settings.RETRY_DELAY_SECONDS,
	}
	deps.fiat_service = BasketService(
		ExchangeRateAPIProvider(
			settings.FIAT_API_URL,
			api_key=settings.EXCHANGE_RATES_API_KEY,
			timeout=settings.FETCH_TIMEOUT_SECONDS,
		),
		loader.load_assets(AssetClass.FIAT),
		**basket_options,
	)
	deps.crypto_service = BasketService(
		CoinGeckoProvider(
			settings.CRYPTO_API_URL,
			api_key=settings.COINGECKO_API_KEY,
			timeout=settings.FETCH_TIMEOUT_SECONDS,
		),
		loader.load_assets(AssetClass.CRYPTO),
		**basket_options,
	)

	deps.history = _build_history(settings)
	deps.index_service = AvgxIndexService(
		fiat=deps.fiat_service,
		crypto=deps.crypto_service,
		history=deps.history,
		baseline=baseline,
		fiat_blend_weight=Decimal(str(settings.FIAT_BLEND_WEIGHT)),
		history_interval=timedelta(seconds=settings.HISTORY_INTERVAL_SECONDS),
	)
	deps.conversion_service = ConversionService(
		deps.index_service, deps.fiat_service, deps.crypto_service
	)
	logger.info('Dependencies initialized')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	for service in (deps.fiat_service, deps.crypto_service):
		if service:
			await service.source.close()
	if deps.history:
		await deps.history.close()

	logger.info('Cleanup complete')


def get_fiat_service() -> BasketService:
	if deps.fiat_service is None:
		raise RuntimeError('Fiat service not initialized')
	return deps.fiat_service


def get_crypto_service() -> BasketService:
	if deps.crypto_service is None:
		raise RuntimeError('Crypto service not initialized')
	return deps.crypto_service


def get_index_service() -> AvgxIndexService:
	if deps.index_service is None:
		raise RuntimeError('Index service not initialized')
	return deps.index_service


def get_conversion_service() -> ConversionService:
	if deps.conversion_service is None:
		raise RuntimeError('Conversion service not initialized')
	return deps.conversion_service
