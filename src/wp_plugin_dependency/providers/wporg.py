from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from wp_plugin_dependency.domain.dependency import DirectoryRecord
from wp_plugin_dependency.observability.structured_log import log_json
from wp_plugin_dependency.providers.transport import build_httpx_client, get_json_with_retries

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.wordpress.org/plugins/info/1.2/"


class WordPressOrgDirectory:
    """Resolves slugs against the WordPress.org plugin information API.

    Any failure reads as "no record": the caller then falls back to a direct
    download link (when it has one) instead of an install link.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        *,
        connect_timeout_sec: float = 5.0,
        read_timeout_sec: float = 15.0,
        retry_attempts: int = 2,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._api_url = str(api_url or DEFAULT_API_URL)
        self._retry_attempts = retry_attempts
        self._client = client or build_httpx_client(
            connect_timeout_sec=connect_timeout_sec,
            read_timeout_sec=read_timeout_sec,
        )

    def plugin_information(self, slug: str) -> Optional[DirectoryRecord]:
        clean = str(slug or "").strip()
        if not clean:
            return None
        params = {"action": "plugin_information", "request[slug]": clean}
        try:
            payload: Any = get_json_with_retries(self._client, self._api_url, params=params, attempts=self._retry_attempts)
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                logger.info("No directory record for %s", clean)
                return None
            log_json(
                logger,
                "directory.lookup.error",
                level=logging.WARNING,
                slug=clean,
                error=f"HTTP {exc.response.status_code}",
            )
            return None
        except (httpx.HTTPError, ValueError) as exc:
            log_json(
                logger,
                "directory.lookup.error",
                level=logging.WARNING,
                slug=clean,
                error=f"{type(exc).__name__}: {exc}",
            )
            return None
        if not isinstance(payload, dict) or payload.get("error"):
            logger.info("No directory record for %s", clean)
            return None
        return DirectoryRecord(
            slug=str(payload.get("slug") or clean),
            name=str(payload.get("name") or ""),
            version=str(payload.get("version") or ""),
            download_link=str(payload.get("download_link") or ""),
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "WordPressOrgDirectory":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
