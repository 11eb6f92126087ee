from __future__ import annotations

import logging
import time
from typing import Any

import requests

from chessduel import __version__

from .errors import UpstreamError

logger = logging.getLogger(__name__)


def get(
    url: str,
    *,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float = 30,
    max_retries: int = 3,
    backoff_seconds: float = 1.0,
    retry_statuses: set[int] | None = None,
) -> requests.Response:
    """HTTP GET with small retry/backoff for the public chess.com API.

    Retries on 429/5xx and connection errors. Any other 4xx (404 for an
    unknown player) fails at once.
    """

    if retry_statuses is None:
        retry_statuses = {429, 500, 502, 503, 504}

    # chess.com rejects requests without a User-Agent.
    if headers is None:
        headers = {}
    if "User-Agent" not in headers:
        headers["User-Agent"] = f"ChessDuel/{__version__}"

    last_exc: Exception | None = None

    for attempt in range(max_retries + 1):
        try:
            logger.debug("GET %s (attempt %d)", url, attempt + 1)
            r = requests.get(url, params=params, headers=headers, timeout=timeout)
            if r.status_code in retry_statuses and attempt < max_retries:
                ra = r.headers.get("Retry-After")
                sleep_s: float | None = None
                if ra:
                    try:
                        sleep_s = float(ra)
                    except ValueError:
                        sleep_s = None
                if sleep_s is None:
                    sleep_s = backoff_seconds * (2**attempt)
                logger.warning("GET %s returned %s; retrying in %.1fs", url, r.status_code, sleep_s)
                time.sleep(min(sleep_s, 10.0))
                continue
            r.raise_for_status()
            return r
        except requests.HTTPError as e:
            # Non-retryable status, or retries used up on a retryable one.
            raise UpstreamError(f"GET {url} failed: {e}") from e
        except requests.RequestException as e:
            last_exc = e
            if attempt >= max_retries:
                break
            logger.warning("GET %s failed (%s); retrying", url, e)
            time.sleep(min(backoff_seconds * (2**attempt), 10.0))

    raise UpstreamError(f"GET failed after {max_retries+1} tries: {url}\n{last_exc}")


def get_json(
    url: str,
    *,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float = 30,
    max_retries: int = 3,
) -> Any:
    r = get(
        url,
        params=params,
        headers=headers,
        timeout=timeout,
        max_retries=max_retries,
    )
    try:
        return r.json()
    except ValueError as e:
        raise UpstreamError(f"GET {url} returned a non-JSON body") from e
