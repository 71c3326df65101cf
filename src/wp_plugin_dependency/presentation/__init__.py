from wp_plugin_dependency.presentation.notices import (
    NoticeRenderer,
    esc_html,
    esc_url,
)

__all__ = [
    "NoticeRenderer",
    "esc_html",
    "esc_url",
]
