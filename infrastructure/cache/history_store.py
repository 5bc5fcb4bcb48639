import json
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime, timedelta
from decimal import Decimal

from redis import asyncio as redis

from domain.exceptions.index import CacheError
from domain.models.basket import IndexPoint

HISTORY_RETENTION = timedelta(days=30)


class HistoryStore(ABC):
	@abstractmethod
	async def append(self, point: IndexPoint) -> None: ...

	@abstractmethod
	async def latest(self) -> IndexPoint | None: ...

	@abstractmethod
	async def since(self, start: datetime) -> list[IndexPoint]:
		"""Points at or after ``start``, oldest first."""

	@abstractmethod
	async def latest_before(self, cutoff: datetime) -> IndexPoint | None:
		"""The most recent point at or before ``cutoff``."""

	async def close(self) -> None:
		return None


class InMemoryHistoryStore(HistoryStore):
	def __init__(self, retention: timedelta = HISTORY_RETENTION):
		self.retention = retention
		self._points: deque[IndexPoint] = deque()

	def _prune(self, now: datetime) -> None:
		cutoff = now - self.retention
		while self._points and self._points[0].timestamp < cutoff:
			self._points.popleft()

	async def append(self, point: IndexPoint) -> None:
		if self._points and point.timestamp < self._points[-1].timestamp:
			return
		self._points.append(point)
		self._prune(point.timestamp)

	async def latest(self) -> IndexPoint | None:
		return self._points[-1] if self._points else None

	async def since(self, start: datetime) -> list[IndexPoint]:
		return [p for p in self._points if p.timestamp >= start]

	async def latest_before(self, cutoff: datetime) -> IndexPoint | None:
		for point in reversed(self._points):
			if point.timestamp <= cutoff:
				return point
		return None


class RedisHistoryStore(HistoryStore):
	"""Index history in a redis sorted set scored by POSIX timestamp."""

	def __init__(
		self,
		redis_client: redis.Redis,
		key: str = 'avgx:history',
		retention: timedelta = HISTORY_RETENTION,
	):
		self.redis = redis_client
		self.key = key
		self.retention = retention

	def _serialize(self, point: IndexPoint) -> str:
		return json.dumps(
			{'timestamp': point.timestamp.isoformat(), 'avgx_usd': str(point.avgx_usd)}
		)

	def _deserialize(self, data: str | bytes) -> IndexPoint:
		try:
			point = json.loads(data)
			return IndexPoint(
				timestamp=datetime.fromisoformat(point['timestamp']),
				avgx_usd=Decimal(point['avgx_usd']),
			)
		except (ValueError, KeyError, TypeError, ArithmeticError) as e:
			raise CacheError(f'Invalid json data in {self.key}: {e}') from e

	async def append(self, point: IndexPoint) -> None:
		score = point.timestamp.timestamp()
		await self.redis.zadd(self.key, {self._serialize(point): score})
		await self.redis.zremrangebyscore(
			self.key, '-inf', f'({(point.timestamp - self.retention).timestamp()}'
		)

	async def latest(self) -> IndexPoint | None:
		members = await self.redis.zrevrange(self.key, 0, 0)
		return self._deserialize(members[0]) if members else None

	async def since(self, start: datetime) -> list[IndexPoint]:
		members = await self.redis.zrangebyscore(self.key, start.timestamp(), '+inf')
		return [self._deserialize(m) for m in members]

	async def latest_before(self, cutoff: datetime) -> IndexPoint | None:
		members = await self.redis.zrevrangebyscore(
			self.key, cutoff.timestamp(), '-inf', start=0, num=1
		)
		return self._deserialize(members[0]) if members else None

	async def close(self) -> None:
		await self.redis.close()
