# webapp/deps.py

import logging
from fastapi import Request

from database.db_manager import DatabaseManager
from resume.errors import ConfigurationError, RateLimited
from resume.rate_limit import client_identity
from resume.tailoring import GenerationOrchestrator

logger = logging.getLogger(__name__)


def request_client_id(request: Request) -> str:
    """Client identity used for rate limiting"""
    remote_addr = request.client.host if request.client else None
    return client_identity(request.headers, remote_addr)


def rate_limit(name: str, per_route: bool = True):
    """
    Build a dependency enforcing the named rate limiter

    Args:
        name: Key into app.state.rate_limiters
        per_route: Prefix the client id with the limiter name
    """
    async def dependency(request: Request):
        limiter = request.app.state.rate_limiters[name]
        client_id = request_client_id(request)
        key = f"{name}:{client_id}" if per_route else client_id

        if not limiter.check(key):
            logger.warning(f"Rate limit exceeded ({name}) for {client_id} on {request.url.path}")
            raise RateLimited(limiter.message, retry_after=limiter.retry_after(key))

    return dependency


def get_db(request: Request) -> DatabaseManager:
    return request.app.state.db


def get_orchestrator(request: Request) -> GenerationOrchestrator:
    orchestrator = request.app.state.orchestrator
    if orchestrator is None:
        logger.error("Generation requested but no LLM provider is configured")
        raise ConfigurationError()
    return orchestrator
