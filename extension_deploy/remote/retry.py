"""Retry configuration for Management API calls"""

import logging

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from ..constants import RETRYABLE_STATUS_CODES
from ..models.config import RetryPolicy

logger = logging.getLogger(__name__)


def is_retryable(exc: BaseException) -> bool:
    """Transport failures, rate limiting and 5xx responses are retried"""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return False


def build_retrying(policy: RetryPolicy) -> AsyncRetrying:
    """Create an AsyncRetrying controller for one remote call"""
    return AsyncRetrying(
        stop=stop_after_attempt(policy.attempts),
        wait=wait_random_exponential(multiplier=policy.initial_delay, max=policy.max_delay),
        retry=retry_if_exception(is_retryable),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
