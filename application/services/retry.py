import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
	AsyncRetrying,
	before_sleep_log,
	retry_if_exception_type,
	stop_after_attempt,
	wait_fixed,
)

from domain.exceptions.index import SourceError

logger = logging.getLogger(__name__)

T = TypeVar('T')


async def with_retry(
	operation: Callable[[], Awaitable[T]],
	attempts: int = 3,
	delay: float = 1.0,
) -> T:
	"""Runs ``operation`` up to ``attempts`` times, re-raising the last source error."""
	retrying = AsyncRetrying(
		stop=stop_after_attempt(attempts),
		wait=wait_fixed(delay),
		retry=retry_if_exception_type(SourceError),
		before_sleep=before_sleep_log(logger, logging.WARNING),
		reraise=True,
	)
	async for attempt in retrying:
		with attempt:
			return await operation()
