import json
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from wp_plugin_dependency.domain.dependency import DirectoryRecord


class InMemoryPluginHost:
    """Plugin host backed by a catalog mapping and a set of active plugin files."""

    def __init__(
        self,
        plugins: Optional[Mapping[str, Mapping[str, Any]]] = None,
        active: Optional[Iterable[str]] = None,
    ) -> None:
        self._plugins: Dict[str, Dict[str, Any]] = {k: dict(v) for k, v in (plugins or {}).items()}
        self._active = set(active or [])

    def get_plugins(self) -> Mapping[str, Mapping[str, Any]]:
        return {k: dict(v) for k, v in self._plugins.items()}

    def is_plugin_active(self, plugin_file: str) -> bool:
        return plugin_file in self._active

    def install(self, plugin_file: str, name: str, **metadata: Any) -> None:
        row = {"Name": name}
        row.update(metadata)
        self._plugins[plugin_file] = row

    def uninstall(self, plugin_file: str) -> None:
        self._plugins.pop(plugin_file, None)
        self._active.discard(plugin_file)

    def activate(self, plugin_file: str) -> None:
        self._active.add(plugin_file)

    def deactivate(self, plugin_file: str) -> None:
        self._active.discard(plugin_file)


class InMemoryDirectory:
    def __init__(self, records: Optional[Iterable[DirectoryRecord]] = None) -> None:
        self._records = {r.slug: r for r in (records or [])}

    def plugin_information(self, slug: str) -> Optional[DirectoryRecord]:
        return self._records.get(str(slug or "").strip())


def load_catalog_file(path: Path, extra_active: Optional[Iterable[str]] = None) -> InMemoryPluginHost:
    """Load a host snapshot such as::

        {"plugins": {"akismet/akismet.php": {"Name": "Akismet", "active": true}}}

    A bare ``{plugin_file: metadata}`` mapping is accepted too.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read catalog {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Catalog must be a JSON object.")
    rows = data.get("plugins") if isinstance(data.get("plugins"), dict) else data
    plugins: Dict[str, Dict[str, Any]] = {}
    active = set(extra_active or [])
    for plugin_file, meta in rows.items():
        if not isinstance(meta, dict):
            continue
        row = {k: v for k, v in meta.items() if k != "active"}
        row["Name"] = str(meta.get("Name") or meta.get("name") or "")
        plugins[str(plugin_file)] = row
        if bool(meta.get("active", False)):
            active.add(str(plugin_file))
    return InMemoryPluginHost(plugins=plugins, active=active)
