from typing import Any, Callable, Mapping, Optional, Protocol
from urllib.parse import quote

from wp_plugin_dependency.domain.dependency import DirectoryRecord

Translator = Callable[[str], str]
NonceProvider = Callable[[str], str]


def identity_translate(text: str) -> str:
    return text


class PluginHost(Protocol):
    def get_plugins(self) -> Mapping[str, Mapping[str, Any]]:
        ...

    def is_plugin_active(self, plugin_file: str) -> bool:
        ...


class PluginDirectory(Protocol):
    def plugin_information(self, slug: str) -> Optional[DirectoryRecord]:
        ...


class AdminUrlBuilder:
    """Builds admin action URLs such as ``plugins.php?action=activate&plugin=...``.

    Nonces belong to the site, so they are only appended when a ``nonce_provider``
    is given; it receives the nonce action (e.g. ``activate-plugin_akismet/akismet.php``).
    """

    def __init__(self, admin_url: str = "/wp-admin", nonce_provider: Optional[NonceProvider] = None) -> None:
        base = str(admin_url or "").strip().rstrip("/") or "/wp-admin"
        if "://" not in base and not base.startswith("/"):
            base = "/" + base
        self._admin_url = base
        self._nonce_provider = nonce_provider

    def action_url(self, path: str, nonce_action: str = "") -> str:
        url = f"{self._admin_url}/{str(path or '').lstrip('/')}"
        if self._nonce_provider is not None and nonce_action:
            nonce = self._nonce_provider(nonce_action)
            if nonce:
                sep = "&" if "?" in url else "?"
                url = f"{url}{sep}_wpnonce={quote(nonce, safe='')}"
        return url

    def activate_url(self, plugin_file: str) -> str:
        return self.action_url(
            f"plugins.php?action=activate&plugin={quote(plugin_file, safe='/')}",
            nonce_action=f"activate-plugin_{plugin_file}",
        )

    def install_url(self, slug: str) -> str:
        return self.action_url(
            f"update.php?action=install-plugin&plugin={quote(slug, safe='')}",
            nonce_action=f"install-plugin_{slug}",
        )
