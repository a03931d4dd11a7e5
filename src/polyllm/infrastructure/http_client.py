"""Shared HTTP client utilities (requests + retry/backoff).

Providers only build and parse payloads; sending them happens here.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import requests

from polyllm.infrastructure.retry import RetryConfig, create_retry_decorator

logger = logging.getLogger(__name__)


def post_with_retries(
    url: str,
    *,
    body: bytes,
    headers: Dict[str, str],
    timeout: Optional[float],
    retry: RetryConfig,
) -> requests.Response:
    """POST a serialized JSON body with retry on network errors, 429 and 5xx."""

    def _make_request() -> requests.Response:
        logger.debug(f"HTTP POST {url} ({len(body)} bytes)")
        # Non-positive timeouts mean "no timeout"
        resp = requests.post(
            url, data=body, headers=headers, timeout=timeout if timeout and timeout > 0 else None
        )
        resp.raise_for_status()
        return resp

    request_with_retry = create_retry_decorator(retry)(_make_request)

    try:
        return request_with_retry()
    except requests.exceptions.HTTPError:
        raise
    except Exception as e:
        raise RuntimeError(f"HTTP request failed: {e}") from e
