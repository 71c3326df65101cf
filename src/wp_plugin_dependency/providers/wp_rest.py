"""WordPress REST API plugin host.

Reads the installed plugins of a live site through ``/wp-json/wp/v2/plugins``.
The endpoint requires a user with the ``activate_plugins`` capability, so the
host authenticates with an application password (HTTP basic auth).

REST identifies plugins as ``dir/file`` while the admin screens use the plugin
file ``dir/file.php``; the catalog is keyed by the latter so action links match
what ``plugins.php`` expects.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx

from wp_plugin_dependency.providers.transport import HostQueryError, build_httpx_client, get_json_with_retries

logger = logging.getLogger(__name__)

PLUGINS_ROUTE = "/wp-json/wp/v2/plugins"
_ACTIVE_STATUSES = {"active", "network-active"}


def plugin_file_from_rest(rest_id: str) -> str:
    value = str(rest_id or "").strip().strip("/")
    if not value or value.endswith(".php"):
        return value
    return value + ".php"


def rest_id_from_plugin_file(plugin_file: str) -> str:
    value = str(plugin_file or "").strip().strip("/")
    if value.endswith(".php"):
        return value[: -len(".php")]
    return value


class WordPressRestHost:
    def __init__(
        self,
        site_url: str,
        username: str = "",
        app_password: str = "",
        *,
        connect_timeout_sec: float = 5.0,
        read_timeout_sec: float = 15.0,
        retry_attempts: int = 3,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not str(site_url or "").strip():
            raise ValueError("site_url is required")
        self._site_url = str(site_url).strip().rstrip("/")
        self._retry_attempts = retry_attempts
        auth = (username, app_password) if username else None
        self._client = client or build_httpx_client(
            base_url=self._site_url,
            auth=auth,
            connect_timeout_sec=connect_timeout_sec,
            read_timeout_sec=read_timeout_sec,
        )

    @property
    def site_url(self) -> str:
        return self._site_url

    def get_plugins(self) -> Mapping[str, Mapping[str, Any]]:
        rows = self._get(PLUGINS_ROUTE, params={"context": "edit"})
        if not isinstance(rows, list):
            raise HostQueryError("unexpected plugins payload")
        out: Dict[str, Dict[str, Any]] = {}
        for row in rows:
            if not isinstance(row, dict):
                continue
            plugin_file = plugin_file_from_rest(str(row.get("plugin") or ""))
            if not plugin_file:
                continue
            out[plugin_file] = _metadata_from_row(row)
        logger.debug("Fetched %d installed plugins from %s", len(out), self._site_url)
        return out

    def is_plugin_active(self, plugin_file: str) -> bool:
        rest_id = rest_id_from_plugin_file(plugin_file)
        row = self._get(f"{PLUGINS_ROUTE}/{quote(rest_id, safe='/')}", params={"context": "edit"})
        if not isinstance(row, dict):
            raise HostQueryError("unexpected plugin payload")
        return str(row.get("status") or "").strip().lower() in _ACTIVE_STATUSES

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "WordPressRestHost":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            return get_json_with_retries(self._client, path, params=params, attempts=self._retry_attempts)
        except httpx.HTTPStatusError as exc:
            raise HostQueryError(f"{path} returned HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise HostQueryError(f"{path} failed: {type(exc).__name__}") from exc


def _metadata_from_row(row: Dict[str, Any]) -> Dict[str, Any]:
    description = row.get("description")
    if isinstance(description, dict):
        description = description.get("raw") or description.get("rendered") or ""
    return {
        "Name": str(row.get("name") or ""),
        "Version": str(row.get("version") or ""),
        "Author": str(row.get("author") or ""),
        "PluginURI": str(row.get("plugin_uri") or ""),
        "Description": str(description or ""),
        "Status": str(row.get("status") or ""),
    }
