# resume/tailoring/single_flight.py
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Tuple

from resume.errors import GenerationCancelled

logger = logging.getLogger(__name__)


class SingleFlight:
    """
    Collapse concurrent calls for the same key into one computation

    The first caller for a key runs the work; callers arriving while it
    is in flight await the same result (or exception).
    """

    def __init__(self):
        self._in_flight: Dict[str, asyncio.Future] = {}

    def is_in_flight(self, key: str) -> bool:
        return key in self._in_flight

    async def run(self, key: str, work: Callable[[], Awaitable[Any]]) -> Tuple[Any, bool]:
        """
        Run `work` once per key among concurrent callers

        Returns:
            (value, shared) where shared is True for callers that joined
            an existing computation
        """
        existing = self._in_flight.get(key)
        if existing is not None:
            logger.info(f"Joining in-flight generation for {key}")
            return await asyncio.shield(existing), True

        future = asyncio.get_running_loop().create_future()
        self._in_flight[key] = future
        try:
            value = await work()
        except asyncio.CancelledError:
            self._fail(future, GenerationCancelled())
            raise
        except Exception as e:
            self._fail(future, e)
            raise
        else:
            future.set_result(value)
            return value, False
        finally:
            del self._in_flight[key]

    @staticmethod
    def _fail(future: asyncio.Future, error: BaseException):
        future.set_exception(error)
        # Mark retrieved so a failure nobody joined is not logged by asyncio
        future.exception()
