class IndexEngineError(Exception):
	pass


class SourceError(IndexEngineError):
	pass


class SourceUnavailable(SourceError):
	pass


class MalformedResponse(SourceError):
	pass


class BasketError(IndexEngineError):
	pass


class EmptyBasket(BasketError):
	pass


class ZeroWeight(BasketError):
	pass


class ConfigMissing(IndexEngineError):
	pass


class InvalidTimeframe(IndexEngineError):
	pass


class UnknownAssetError(IndexEngineError):
	pass


class CacheError(IndexEngineError):
	pass
