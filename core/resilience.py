"""
Resilience Patterns

Retry and circuit-breaker wrappers for the two upstream APIs (MLB Stats and
Open-Meteo), plus a requests helper that turns HTTP failures into typed
errors the wrappers understand.

Retries happen here, per extractor call. The prediction assembly pass never
retries: once an extractor call gives up, the field is absent for that pass.
"""

from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import requests
from circuitbreaker import circuit, CircuitBreakerError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    RetryError,
)

from core.logging import get_logger
from core.settings import settings


T = TypeVar("T")

DEFAULT_RETRY_AFTER_SECONDS = 60


# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------


class RetryableError(Exception):
    """Transient upstream failure. Retried, and counted by the circuits."""

    pass


class RateLimitError(RetryableError):
    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class NetworkError(RetryableError):
    """Timeout, refused connection or other transport failure."""

    pass


class ServerError(RetryableError):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ClientError(Exception):
    """4xx other than 429. The request itself is wrong; never retried."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


# -----------------------------------------------------------------------------
# Retry and circuit breaking
# -----------------------------------------------------------------------------


def with_retry(
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Retry a function with exponential backoff while it raises RetryableError.

    Unset arguments come from settings (RETRY_MAX_ATTEMPTS, RETRY_BASE_DELAY,
    RETRY_MAX_DELAY). The last error is re-raised once attempts run out.
    """
    attempts = max_attempts or settings.retry_max_attempts
    multiplier = settings.retry_base_delay if base_delay is None else base_delay
    ceiling = settings.retry_max_delay if max_delay is None else max_delay
    log = get_logger("retry")

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        @retry(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=multiplier, max=ceiling),
            retry=retry_if_exception_type(RetryableError),
            reraise=True,
        )
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except RetryableError as e:
                log.warning(
                    "retry_attempt",
                    function=func.__qualname__,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

        return wrapper

    return decorator


def create_circuit_breaker(
    name: str,
    failure_threshold: Optional[int] = None,
    recovery_timeout: Optional[int] = None,
) -> Callable:
    """
    Circuit breaker that opens after repeated transient failures.

    Only RetryableError counts as a failure; "no data" answers and client
    errors pass through without tripping it.
    """
    return circuit(
        failure_threshold=failure_threshold or settings.circuit_breaker_threshold,
        recovery_timeout=recovery_timeout or settings.circuit_breaker_timeout,
        expected_exception=RetryableError,
        name=name,
    )


mlb_stats_circuit = create_circuit_breaker("mlb_stats_api")
open_meteo_circuit = create_circuit_breaker("open_meteo_api")


def upstream_call(breaker: Callable) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Wrap an extractor method for one upstream: retries outside, circuit inside.

    Each attempt passes through the breaker, so an open circuit fails fast
    with CircuitBreakerError, which is not retried.

    Example:
        @upstream_call(mlb_stats_circuit)
        def get_offense(self, team_id, season):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        return with_retry()(breaker(func))

    return decorator


# -----------------------------------------------------------------------------
# HTTP
# -----------------------------------------------------------------------------


def parse_retry_after(value: Optional[str]) -> int:
    """Seconds from a Retry-After header. HTTP-date forms fall back to the default."""
    if value and value.strip().isdigit():
        return int(value.strip())
    return DEFAULT_RETRY_AFTER_SECONDS


def classify_response_error(response: requests.Response) -> None:
    """
    Raise the typed error for a failed response; return quietly otherwise.

    Raises:
        RateLimitError: 429
        ServerError: 5xx
        ClientError: any other 4xx
    """
    status = response.status_code
    if status < 400:
        return

    if status == 429:
        retry_after = parse_retry_after(response.headers.get("Retry-After"))
        raise RateLimitError(f"Rate limited, retry after {retry_after}s", retry_after=retry_after)
    if status >= 500:
        raise ServerError(f"Server error: {status}", status_code=status)
    raise ClientError(f"Client error: {status} - {response.text[:200]}", status_code=status)


def resilient_request(
    method: str,
    url: str,
    timeout: Optional[int] = None,
    **kwargs: Any,
) -> requests.Response:
    """
    Issue one HTTP request, mapping every failure onto the error types above.

    Args:
        method: HTTP method
        url: Request URL
        timeout: Seconds; defaults to settings.http_timeout
        **kwargs: Passed through to requests (params, headers, ...)

    Raises:
        NetworkError: Timeout, connection or other transport failure
        RateLimitError: 429
        ServerError: 5xx
        ClientError: other 4xx
    """
    log = get_logger("http")
    log.debug("http_request", method=method, url=url)

    try:
        response = requests.request(method, url, timeout=timeout or settings.http_timeout, **kwargs)
    except requests.exceptions.Timeout:
        log.warning("http_timeout", method=method, url=url)
        raise NetworkError(f"Request timed out: {url}")
    except requests.exceptions.ConnectionError as e:
        log.warning("http_connection_error", method=method, url=url, error=str(e))
        raise NetworkError(f"Connection failed: {url}")
    except requests.exceptions.RequestException as e:
        log.error("http_error", method=method, url=url, error=str(e))
        raise NetworkError(f"Request failed: {url} - {e}")

    classify_response_error(response)
    log.debug("http_response", method=method, url=url, status=response.status_code)
    return response


__all__ = [
    "RetryableError",
    "RateLimitError",
    "NetworkError",
    "ServerError",
    "ClientError",
    "CircuitBreakerError",
    "RetryError",
    "with_retry",
    "create_circuit_breaker",
    "upstream_call",
    "mlb_stats_circuit",
    "open_meteo_circuit",
    "parse_retry_after",
    "classify_response_error",
    "resilient_request",
]
