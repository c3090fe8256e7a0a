# resume/tailoring/orchestrator.py
import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from database.db_manager import DatabaseManager
from resume.ai.base import EmptyResponseError, RewriteService, UpstreamCallError
from resume.ai.prompts import RESPONSE_SCHEMA, SYSTEM_PROMPT, build_prompt
from resume.ai.retry import RetryPolicy
from resume.cache import TTLCache, generation_cache_key
from resume.config import TailoringConfig
from resume.errors import (
    AuthError,
    GenerationCancelled,
    InvalidUpstreamResponse,
    PersistFailure,
    QuotaExceeded,
    TailoringError,
    UpstreamFailure,
)
from resume.models import GenerationRequest, GenerationResult, TailoringPayload
from resume.tailoring.single_flight import SingleFlight

logger = logging.getLogger(__name__)

RAW_LOG_PREFIX = 500

DisconnectCheck = Callable[[], Awaitable[bool]]


def parse_tailoring_payload(raw: str) -> GenerationResult:
    """
    Validate the rewrite service's raw answer

    Raises:
        InvalidUpstreamResponse: If it is not JSON or misses required fields
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise InvalidUpstreamResponse(f"not JSON: {e}", raw_prefix=raw[:RAW_LOG_PREFIX]) from e

    if not isinstance(data, dict):
        raise InvalidUpstreamResponse("not a JSON object", raw_prefix=raw[:RAW_LOG_PREFIX])

    try:
        payload = TailoringPayload.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        reason = f"{'.'.join(str(p) for p in first['loc'])}: {first['msg']}"
        raise InvalidUpstreamResponse(reason, raw_prefix=raw[:RAW_LOG_PREFIX]) from e

    return payload.to_result()


class GenerationOrchestrator:
    """
    Run a tailoring request end to end

    quota check -> cache lookup -> rewrite call with retries ->
    validation -> cache write -> persist record and bump usage
    """

    def __init__(
        self,
        rewrite_service: RewriteService,
        db: DatabaseManager,
        cache: TTLCache,
        config: Optional[TailoringConfig] = None
    ):
        self.rewrite_service = rewrite_service
        self.db = db
        self.cache = cache
        self.config = config or TailoringConfig()
        self.retry_policy: RetryPolicy = self.config.retry_policy
        self._single_flight = SingleFlight()

    async def generate(
        self,
        user_id: str,
        request: GenerationRequest,
        is_disconnected: Optional[DisconnectCheck] = None
    ) -> Dict[str, Any]:
        """
        Tailor a resume for an authenticated user

        Args:
            user_id: Session user
            request: Validated, sanitised request
            is_disconnected: Awaitable check telling whether the caller left

        Returns:
            {"result": ..., "insights": {...}}
        """
        user = await asyncio.to_thread(self.db.get_user, user_id)
        if user is None:
            logger.warning(f"User not found during generation: {user_id}")
            raise AuthError()

        if not user['is_pro'] and user['resume_count'] >= self.config.free_generation_limit:
            logger.info(f"User hit free limit: {user_id} (resume_count={user['resume_count']})")
            raise QuotaExceeded()

        cache_key = generation_cache_key(user_id, request.content_digest())
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for resume generation: {cache_key}")
            return cached

        response, shared = await self._single_flight.run(
            cache_key,
            lambda: self._generate_uncached(user, request, cache_key, is_disconnected)
        )
        if shared:
            logger.info(f"Served in-flight result for {cache_key}")
        return response

    async def _generate_uncached(
        self,
        user: Dict,
        request: GenerationRequest,
        cache_key: str,
        is_disconnected: Optional[DisconnectCheck]
    ) -> Dict[str, Any]:
        user_id = user['user_id']
        logger.info(
            f"Starting resume generation for {user_id} "
            f"(pro={user['is_pro']}, tone={request.tone.value}, seniority={request.seniority.value}, "
            f"format={request.format.value}, cover_letter={request.include_cover_letter})"
        )

        raw = await self.call_rewrite_service(build_prompt(request), is_disconnected)

        try:
            result = parse_tailoring_payload(raw)
        except InvalidUpstreamResponse as e:
            logger.error(
                f"Failed to parse rewrite response for {user_id}: {e.reason} "
                f"(raw: {e.raw_prefix!r})"
            )
            raise

        if is_disconnected is not None and await is_disconnected():
            logger.info(f"Caller disconnected before {cache_key} was stored, discarding result")
            raise GenerationCancelled()

        response = result.to_response()
        self.cache.set(cache_key, response, self.config.generation_cache_ttl_ms)

        try:
            generation_id = await asyncio.to_thread(
                self.db.record_generation,
                user_id,
                request.job_description,
                request.resume,
                result.tailored_resume,
                result.insights.to_dict(),
                tone=request.tone.value,
                seniority=request.seniority.value,
                format=request.format.value,
                include_cover_letter=request.include_cover_letter
            )
        except Exception as e:
            logger.error(f"Failed to persist generation for {user_id}: {e}")
            raise PersistFailure() from e

        logger.info(
            f"Resume generation {generation_id} completed for {user_id} "
            f"(length={len(result.tailored_resume)}, "
            f"matched={len(result.insights.matched_keywords)}, "
            f"missing={len(result.insights.missing_skills)})"
        )
        return response

    async def call_rewrite_service(
        self,
        prompt: str,
        is_disconnected: Optional[DisconnectCheck] = None
    ) -> str:
        """
        Call the rewrite service under the retry policy

        Transport errors, per-attempt timeouts and empty answers are retried
        with exponential backoff.

        Raises:
            UpstreamFailure: When every attempt failed, or on an unexpected
                error (not retried)
            GenerationCancelled: When the caller disconnected between attempts
        """
        attempts = 0
        retrying = self.retry_policy.retrying(
            retry_on=(UpstreamCallError, asyncio.TimeoutError),
            logger=logger
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    if attempts > 1 and is_disconnected is not None and await is_disconnected():
                        logger.info(f"Caller disconnected, abandoning retries after {attempts - 1} attempt(s)")
                        raise GenerationCancelled()

                    logger.info(f"Rewrite call attempt {attempts}/{self.retry_policy.max_attempts}")
                    raw = await asyncio.wait_for(
                        self.rewrite_service.generate_structured(SYSTEM_PROMPT, prompt, RESPONSE_SCHEMA),
                        timeout=self.retry_policy.attempt_timeout
                    )

                    raw = (raw or "").strip()
                    if not raw:
                        raise EmptyResponseError("Rewrite service returned an empty response")
                    return raw
        except (UpstreamCallError, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            logger.error(f"Rewrite service failed after {attempts} attempt(s): {reason}")
            raise UpstreamFailure(attempts=attempts, reason=reason) from e
        except TailoringError:
            raise
        except Exception as e:
            logger.error(f"Unexpected rewrite service error after {attempts} attempt(s): {type(e).__name__}: {e}")
            raise UpstreamFailure(attempts=attempts, reason=type(e).__name__) from e

        # AsyncRetrying always returns or raises from inside the loop
        raise UpstreamFailure(attempts=attempts, reason="retry loop exited")
