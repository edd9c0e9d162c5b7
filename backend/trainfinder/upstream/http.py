import logging
import time
from typing import Callable

import httpx

from trainfinder.core.config import RetryPolicy, Settings

logger = logging.getLogger(__name__)

RETRY_STATUSES = {429, 500, 502, 503, 504, 520, 522, 524}


def configure_logging_if_needed(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def log_request(request: httpx.Request) -> None:
    logger.debug("HTTP %s %s", request.method, request.url)


def make_client(cfg: Settings, *, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    timeout = httpx.Timeout(
        connect=cfg.connect_timeout,
        read=cfg.read_timeout,
        write=cfg.write_timeout,
        pool=cfg.pool_timeout,
    )
    return httpx.Client(
        base_url=cfg.base_url,
        timeout=timeout,
        headers={"Accept": "application/json", "User-Agent": cfg.user_agent},
        event_hooks={"request": [log_request]},
        transport=transport,
    )


def backoff_delay(policy: RetryPolicy, attempt: int) -> float:
    """Delay before retry number attempt+1 (attempt counts from 0)."""
    return policy.base_delay * (policy.growth_factor ** attempt)


def fetch_with_retry(
    call: Callable[[], httpx.Response],
    policy: RetryPolicy,
    *,
    label: str,
    sleep: Callable[[float], None] = time.sleep,
) -> httpx.Response:
    """
    Issue call() up to policy.attempts times. Retryable statuses and
    transport errors (timeouts, refused connections) back off and retry;
    any other HTTP error is raised at once. Exhaustion re-raises the last error.
    """
    last_err: Exception | None = None

    for attempt in range(policy.attempts):
        t0 = time.perf_counter()
        try:
            r = call()
            elapsed = time.perf_counter() - t0

            if r.status_code in RETRY_STATUSES:
                snippet = (r.text or "")[:300]
                logger.warning(
                    "Retryable HTTP %d (attempt %d/%d) GET %s after %.2fs body_snippet=%r",
                    r.status_code,
                    attempt + 1,
                    policy.attempts,
                    label,
                    elapsed,
                    snippet,
                )
                raise httpx.HTTPStatusError("Retryable status", request=r.request, response=r)

            logger.debug("GET %s completed in %.2fs status=%d", label, elapsed, r.status_code)
            r.raise_for_status()
            return r

        except httpx.TransportError as e:
            last_err = e
            logger.warning(
                "%s (attempt %d/%d) GET %s after %.2fs",
                e.__class__.__name__,
                attempt + 1,
                policy.attempts,
                label,
                time.perf_counter() - t0,
            )

        except httpx.HTTPStatusError as e:
            last_err = e
            status = e.response.status_code
            if status not in RETRY_STATUSES:
                if status == 404:
                    logger.debug("HTTP 404 GET %s", label)
                else:
                    logger.error(
                        "Non-retryable HTTP %s GET %s body_snippet=%r",
                        status,
                        label,
                        (e.response.text or "")[:300],
                    )
                raise

        if attempt + 1 < policy.attempts:
            delay = backoff_delay(policy, attempt)
            logger.info("Sleeping %.2fs before retrying %s", delay, label)
            sleep(delay)

    raise last_err  # type: ignore
