from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, Optional

import httpx

from wp_plugin_dependency.observability.structured_log import log_json

logger = logging.getLogger(__name__)

USER_AGENT = "wp-plugin-dependency"
RETRY_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}


class HostQueryError(RuntimeError):
    """A live plugin host could not answer a catalog or active-state query."""


def build_httpx_client(
    *,
    base_url: str = "",
    headers: Optional[Dict[str, str]] = None,
    auth: Any = None,
    connect_timeout_sec: float = 5.0,
    read_timeout_sec: float = 15.0,
    max_connections: int = 10,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    timeout = httpx.Timeout(connect=connect_timeout_sec, read=read_timeout_sec, write=read_timeout_sec, pool=5.0)
    limits = httpx.Limits(
        max_connections=max(1, int(max_connections)),
        max_keepalive_connections=max(1, int(max_connections) // 2),
    )
    merged = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    merged.update(headers or {})
    return httpx.Client(
        base_url=base_url,
        headers=merged,
        auth=auth,
        timeout=timeout,
        limits=limits,
        transport=transport,
    )


def get_json_with_retries(
    client: httpx.Client,
    path: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    attempts: int = 3,
    base_backoff_sec: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    max_attempts = max(1, int(attempts))
    for idx in range(max_attempts):
        try:
            resp = client.get(path, params=params)
            if resp.status_code in RETRY_STATUS_CODES and idx + 1 < max_attempts:
                log_json(logger, "host.request.retry", level=logging.WARNING, path=path, status=resp.status_code, attempt=idx + 1)
                sleep(_backoff_delay(idx, base_backoff_sec))
                continue
            resp.raise_for_status()
            return resp.json()
        except httpx.TransportError as exc:
            if idx + 1 >= max_attempts:
                raise
            log_json(logger, "host.request.retry", level=logging.WARNING, path=path, error=type(exc).__name__, attempt=idx + 1)
            sleep(_backoff_delay(idx, base_backoff_sec))
    raise RuntimeError("get_json_with_retries exhausted without result")


def _backoff_delay(attempt_idx: int, base_backoff_sec: float) -> float:
    # bounded exponential backoff with jitter
    delay = min(8.0, max(0.05, float(base_backoff_sec)) * (2 ** attempt_idx))
    return delay * (0.8 + random.random() * 0.4)
