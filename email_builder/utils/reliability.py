"""
Reliability patterns for the email builder.

Provides retry logic, parallel batch processing and health checks.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import wraps
from typing import Any, Callable, Dict, Optional

import structlog
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger(__name__)


def with_retry(
    max_attempts: int = 3,
    backoff_base: float = 0.5,
    backoff_max: float = 10.0,
    retry_exceptions: tuple = (Exception,),
):
    """Decorator to add retry logic with exponential backoff."""

    def decorator(func: Callable) -> Callable:
        @retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=backoff_base, max=backoff_max),
            retry=retry_if_exception_type(retry_exceptions),
            before_sleep=before_sleep_log(logging.getLogger(__name__), logging.WARNING),
            reraise=True,
        )
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except retry_exceptions as e:
                logger.warning(
                    "Retrying operation",
                    function=func.__name__,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

        return wrapper

    return decorator


class ParallelProcessor:
    """Thread-pool batch runner; failed items map to ``None``."""

    def __init__(self, max_workers: int = 6):
        self.max_workers = max_workers

    def process_batch(
        self, items: list, processor_func: Callable, timeout: Optional[float] = None
    ) -> Dict[Any, Any]:
        """Process items in parallel, keyed by item."""
        results: Dict[Any, Any] = {}
        if not items:
            return results

        workers = max(1, min(self.max_workers, len(items)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_item = {executor.submit(processor_func, item): item for item in items}

            for future in as_completed(future_to_item, timeout=timeout):
                item = future_to_item[future]
                try:
                    results[item] = future.result()
                except Exception as e:
                    logger.error(
                        "Parallel processing error",
                        item=str(item)[:100],
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    results[item] = None

        return results


class HealthChecker:
    """Health checking for backing services."""

    def __init__(self):
        self.checks: Dict[str, Callable] = {}
        self.last_results: Dict[str, Dict[str, Any]] = {}

    def register_check(self, name: str, check_func: Callable):
        """Register a health check function."""
        self.checks[name] = check_func

    def check_all(self) -> Dict[str, Dict[str, Any]]:
        """Run all registered health checks."""
        results = {}

        for name, check_func in self.checks.items():
            start_time = time.time()
            try:
                check_result = check_func()
                results[name] = {
                    "status": "healthy",
                    "response_time_ms": (time.time() - start_time) * 1000,
                    "details": check_result if isinstance(check_result, dict) else {},
                }
            except Exception as e:
                results[name] = {
                    "status": "unhealthy",
                    "response_time_ms": (time.time() - start_time) * 1000,
                    "error": str(e),
                    "error_type": type(e).__name__,
                }

        self.last_results = results
        return results

    def is_healthy(self, service_name: Optional[str] = None) -> bool:
        """Check if service(s) are healthy."""
        if not self.last_results:
            self.check_all()

        if service_name:
            return self.last_results.get(service_name, {}).get("status") == "healthy"

        return all(r.get("status") == "healthy" for r in self.last_results.values())
