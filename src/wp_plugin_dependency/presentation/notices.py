from __future__ import annotations

import html
from typing import Optional

from wp_plugin_dependency.domain.dependency import DependencySpec, DirectoryRecord
from wp_plugin_dependency.providers.base import AdminUrlBuilder, Translator, identity_translate
from wp_plugin_dependency.util import is_valid_url

NOTICE_TEMPLATE = '<p style="font-family: sans-serif; font-size: 12px">{body}</p>'
DEPENDENCY_TEMPLATE = "{plugin} requires that {dependency} is installed and active."
ACTIVATE_TEMPLATE = (
    '<p style="font-family: sans-serif; font-size: 12px">{summary}<br>'
    'Please <a href="{url}" target="_top">activate {dependency}</a> and try again.</p>'
)
DOWNLOAD_TEMPLATE = '<br>Please <a href="{url}" target="_blank">download and install {dependency}</a> and try again.'
INSTALL_TEMPLATE = '<br>Please <a href="{url}" target="_top">install {dependency}</a> and try again.'


def esc_html(value: str) -> str:
    return html.escape(str(value or ""), quote=True)


def esc_url(value: str) -> str:
    raw = str(value or "").strip()
    if not is_valid_url(raw) and not raw.startswith("/"):
        return ""
    return html.escape(raw, quote=True)


class NoticeRenderer:
    """Renders the admin notices shown when a dependency is missing or inactive.

    Every template is passed through ``translate`` before interpolation and every
    interpolated value is escaped, so callers can echo the result as-is.
    """

    def __init__(self, urls: Optional[AdminUrlBuilder] = None, translate: Optional[Translator] = None) -> None:
        self._urls = urls or AdminUrlBuilder()
        self._translate = translate or identity_translate

    def dependency_message(self, spec: DependencySpec) -> str:
        return self._translate(DEPENDENCY_TEMPLATE).format(
            plugin=esc_html(spec.plugin_name),
            dependency=esc_html(spec.dependency_name),
        )

    def activate_message(self, spec: DependencySpec, plugin_file: str) -> str:
        return self._translate(ACTIVATE_TEMPLATE).format(
            summary=self.dependency_message(spec),
            url=esc_url(self._urls.activate_url(plugin_file)),
            dependency=esc_html(spec.dependency_name),
        )

    def install_message(self, spec: DependencySpec, record: Optional[DirectoryRecord]) -> str:
        instructions = ""
        if record is None and is_valid_url(spec.dependency_uri):
            instructions = self._translate(DOWNLOAD_TEMPLATE).format(
                url=esc_url(spec.dependency_uri),
                dependency=esc_html(spec.dependency_name),
            )
        elif record is not None:
            instructions = self._translate(INSTALL_TEMPLATE).format(
                url=esc_url(self._urls.install_url(record.slug)),
                dependency=esc_html(spec.dependency_name),
            )
        # instructions are escaped above
        return self._translate(NOTICE_TEMPLATE).format(
            body=self.dependency_message(spec) + instructions,
        )
