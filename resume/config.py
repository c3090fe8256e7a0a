# resume/config.py
import os
from dataclasses import dataclass, field
from typing import Dict

import yaml

from resume.ai.retry import RetryPolicy
from resume.cache import CACHE_TTL
from resume.rate_limit import FixedWindowRateLimiter


@dataclass
class RateLimitPolicy:
    """Window and ceiling for one named rate limiter"""
    window_ms: int
    max_requests: int
    message: str = "Too many requests, please try again later."

    def build(self) -> FixedWindowRateLimiter:
        return FixedWindowRateLimiter(
            window_ms=self.window_ms,
            max_requests=self.max_requests,
            message=self.message
        )


def default_rate_limits() -> Dict[str, RateLimitPolicy]:
    return {
        'generate': RateLimitPolicy(
            window_ms=60 * 1000,
            max_requests=3,
            message='Too many generation requests, please wait a moment before trying again.'
        ),
        'auth': RateLimitPolicy(
            window_ms=15 * 60 * 1000,
            max_requests=5,
            message='Too many authentication attempts, please try again in 15 minutes.'
        ),
        'ip': RateLimitPolicy(
            window_ms=15 * 60 * 1000,
            max_requests=100,
            message='Too many requests, please try again later.'
        ),
    }


@dataclass
class TailoringConfig:
    """Configuration for the generation pipeline and its guards"""

    # Quota
    free_generation_limit: int = 2

    # Cache
    generation_cache_ttl_ms: int = CACHE_TTL['resume_generation']
    cache_sweep_interval_s: float = 5 * 60

    # Upstream retries
    max_attempts: int = 3
    retry_base_delay: float = 1.0
    retry_max_delay: float = 30.0
    attempt_timeout: float = 60.0

    # History
    history_limit: int = 10

    rate_limits: Dict[str, RateLimitPolicy] = field(default_factory=default_rate_limits)

    def __post_init__(self):
        """Accept plain dicts for rate limits (YAML input)"""
        merged = default_rate_limits()
        for name, policy in self.rate_limits.items():
            merged[name] = policy if isinstance(policy, RateLimitPolicy) else RateLimitPolicy(**policy)
        self.rate_limits = merged

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            base_delay=self.retry_base_delay,
            max_delay=self.retry_max_delay,
            attempt_timeout=self.attempt_timeout
        )

    @classmethod
    def from_yaml(cls, path: str):
        """Load configuration from YAML file"""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(**data.get('tailoring', {}))


def get_config() -> TailoringConfig:
    """Get tailoring configuration"""
    config_path = os.getenv('TAILORING_CONFIG', 'config/tailoring.yaml')

    if os.path.exists(config_path):
        return TailoringConfig.from_yaml(config_path)
    return TailoringConfig()
