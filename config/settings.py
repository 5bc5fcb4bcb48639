from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / 'data'


class Settings(BaseSettings):
	# Providers
	FIAT_API_URL: str = 'https://api.exchangerate-api.com/v4/latest/USD'
	CRYPTO_API_URL: str = 'https://api.coingecko.com/api/v3'
	EXCHANGE_RATES_API_KEY: str = ''
	COINGECKO_API_KEY: str = ''

	# Engine
	DATA_DIR: Path = DEFAULT_DATA_DIR
	CACHE_TTL_SECONDS: float = Field(default=60.0, gt=0)
	FETCH_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
	RETRY_ATTEMPTS: int = Field(default=3, ge=1)
	RETRY_DELAY_SECONDS: float = Field(default=1.0, ge=0)
	FIAT_BLEND_WEIGHT: float = Field(default=0.5, ge=0, le=1)

	# History
	HISTORY_BACKEND: str = 'memory'
	HISTORY_INTERVAL_SECONDS: float = Field(default=300.0, ge=0)
	REDIS_URL: str = 'redis://localhost:6379'

	# Application
	APP_NAME: str = 'AVGX Index API'
	LOG_LEVEL: str = 'INFO'
	LOG_DIR: Path | None = None

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
