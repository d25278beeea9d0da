import logging
import os
import time
from typing import Any, Dict, Optional

import requests
from diskcache import FanoutCache
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from uslex.core.exceptions import RateLimitException
from uslex.core.rate_limiter import PolitenessLimiter
from uslex.settings import CACHE_TTL_SECONDS, FETCH_DELAY_SECONDS, SOURCE_CACHE_DIR, USER_AGENT

logger = logging.getLogger(__name__)

FETCH_ERRORS = (requests.exceptions.RequestException, RateLimitException)


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Seconds from a Retry-After header; HTTP-date values are ignored."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class HttpClient:
    """Fetches statute pages one at a time, politely, through a disk cache.

    Pages are cached by URL as ``{"fetched_at", "text"}`` with no expiry of
    their own; ``cache_ttl`` only decides when a page is refetched, so an old
    copy is still there to fall back on when the publisher is down.

    Args:
        max_retries: Attempts per URL before giving up
        initial_delay: First retry wait in seconds, doubled on each attempt
        min_delay: Politeness gap between outbound requests in seconds
        cache_dir: Page cache directory, defaults to ``SOURCE_CACHE_DIR``
        cache_ttl: Age in seconds after which a cached page is refetched
    """

    def __init__(
        self,
        max_retries: int = 3,
        initial_delay: float = 1.0,
        max_delay: float = 60.0,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
        enable_cache: bool = True,
        cache_dir: Optional[str] = None,
        cache_ttl: int = CACHE_TTL_SECONDS,
        min_delay: float = FETCH_DELAY_SECONDS,
        user_agent: str = USER_AGENT,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})
        self.rate_limiter = PolitenessLimiter(min_delay=min_delay)
        self.cache_ttl = cache_ttl
        self.enable_cache = enable_cache
        self._cache = None
        if enable_cache:
            cache_dir = cache_dir or SOURCE_CACHE_DIR
            os.makedirs(cache_dir, exist_ok=True)
            self._cache = FanoutCache(directory=cache_dir, timeout=60, shards=4)
            logger.debug(f"Page cache at {cache_dir}")

        self._retrying = retry(
            stop=stop_after_attempt(max_retries),
            wait=wait_exponential(multiplier=initial_delay, min=initial_delay, max=max_delay),
            retry=retry_if_exception_type(FETCH_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def fetch_text(self, url: str) -> Optional[str]:
        """Return the page body for ``url``.

        A cached copy younger than the TTL is returned without a request. When
        the request fails after retries a stale copy is returned instead.

        Returns:
            The page text, or None when the fetch failed and nothing is cached
        """
        entry = self._cached(url)
        if entry is not None:
            age = time.time() - entry["fetched_at"]
            if age < self.cache_ttl:
                logger.debug(f"Cache hit for {url}", extra={"url": url, "cache_age": age})
                return entry["text"]

        try:
            text = self.get(url).text
        except FETCH_ERRORS as e:
            status = "stale" if entry is not None else "miss"
            logger.warning(
                f"Fetch failed for {url} ({status} cache): {e}",
                extra={"url": url, "cache_status": status, "error_type": type(e).__name__},
            )
            return entry["text"] if entry is not None else None

        logger.info(f"Fetched {url}", extra={"url": url, "chars": len(text)})
        self._store(url, text)
        return text

    def get(self, url: str) -> requests.Response:
        """GET ``url`` with retries and the politeness delay, bypassing the cache."""
        return self._retrying(self._request)(url)

    def _request(self, url: str) -> requests.Response:
        self.rate_limiter.wait()
        response = self.session.get(url, timeout=self.timeout)

        if response.status_code == 429:
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            self.rate_limiter.record_rate_limit(retry_after)
            logger.warning(
                f"Rate limited: {url}",
                extra={
                    "event_type": "rate_limit",
                    "url": url,
                    "retry_after": retry_after,
                    "current_delay": self.rate_limiter.get_current_delay(),
                },
            )
            raise RateLimitException(f"Rate limited on {url}", retry_after)

        response.raise_for_status()
        self.rate_limiter.record_success()
        return response

    def _cached(self, url: str) -> Optional[Dict[str, Any]]:
        if self._cache is None:
            return None
        try:
            return self._cache.get(url)
        except Exception as e:
            logger.warning(f"Cache read error for {url}: {e}")
            return None

    def _store(self, url: str, text: str) -> None:
        if self._cache is None:
            return
        try:
            self._cache.set(url, {"fetched_at": time.time(), "text": text})
        except Exception as e:
            logger.warning(f"Cache write error for {url}: {e}")

    def close(self) -> None:
        if self._cache is not None:
            self._cache.close()
