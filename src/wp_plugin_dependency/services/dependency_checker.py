import logging
from typing import Any, Dict, Mapping, Optional

from wp_plugin_dependency.domain.dependency import DependencySpec, DirectoryRecord, VerificationResult
from wp_plugin_dependency.observability.structured_log import log_json
from wp_plugin_dependency.presentation.notices import NoticeRenderer
from wp_plugin_dependency.providers.base import AdminUrlBuilder, PluginDirectory, PluginHost, Translator

logger = logging.getLogger(__name__)


class PluginDependency:
    """Checks that ``dependency_name`` is installed and active for ``plugin_name``.

    The installed-plugin catalog is captured once at construction (see ``refresh``);
    the active state is asked from the host on every ``verify`` call. The boolean
    from ``verify`` is meant for activation hooks that refuse to activate the
    requiring plugin, and ``message`` holds the notice to show the administrator.
    """

    def __init__(
        self,
        plugin_name: str,
        dependency_name: str,
        dependency_uri: str = "",
        *,
        host: PluginHost,
        directory: Optional[PluginDirectory] = None,
        urls: Optional[AdminUrlBuilder] = None,
        translate: Optional[Translator] = None,
    ) -> None:
        self._spec = DependencySpec(
            plugin_name=str(plugin_name),
            dependency_name=str(dependency_name),
            dependency_uri=str(dependency_uri or ""),
        )
        self._host = host
        self._directory = directory
        self._renderer = NoticeRenderer(urls=urls, translate=translate)
        self._verify_message = ""
        self._installed_plugins: Dict[str, Mapping[str, Any]] = {}
        self.refresh()

    @property
    def spec(self) -> DependencySpec:
        return self._spec

    @property
    def installed_plugins(self) -> Mapping[str, Mapping[str, Any]]:
        return dict(self._installed_plugins)

    def refresh(self) -> None:
        self._installed_plugins = dict(self._host.get_plugins() or {})

    def check(self) -> VerificationResult:
        # no notice survives a failed host query
        self._verify_message = ""
        plugin_file = self._lookup()
        if plugin_file is None:
            result = VerificationResult.not_installed()
            self._verify_message = self._renderer.install_message(self._spec, self._directory_record())
        elif not self._host.is_plugin_active(plugin_file):
            result = VerificationResult.installed_inactive(plugin_file)
            self._verify_message = self._renderer.activate_message(self._spec, plugin_file)
        else:
            result = VerificationResult.active(plugin_file)
            self._verify_message = ""
        log_json(
            logger,
            "dependency.verify",
            plugin=self._spec.plugin_name,
            dependency=self._spec.dependency_name,
            status=result.status,
            plugin_file=result.plugin_file or "",
        )
        return result

    def verify(self) -> bool:
        return self.check().ok

    def message(self) -> str:
        return self._verify_message

    def _lookup(self) -> Optional[str]:
        # first match in catalog order wins on duplicate names
        for plugin_file, plugin_data in self._installed_plugins.items():
            if self._spec.dependency_name == str((plugin_data or {}).get("Name") or ""):
                return plugin_file
        return None

    def _directory_record(self) -> Optional[DirectoryRecord]:
        if self._directory is None or not self._spec.dependency_uri:
            return None
        try:
            return self._directory.plugin_information(self._spec.dependency_uri)
        except Exception as exc:
            log_json(
                logger,
                "directory.lookup.error",
                level=logging.WARNING,
                slug=self._spec.dependency_uri,
                error=f"{type(exc).__name__}: {exc}",
            )
            return None
