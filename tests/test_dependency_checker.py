import unittest

from wp_plugin_dependency.domain.dependency import (
    STATUS_ACTIVE,
    STATUS_INSTALLED_INACTIVE,
    STATUS_NOT_INSTALLED,
    DirectoryRecord,
)
from wp_plugin_dependency.providers.base import AdminUrlBuilder
from wp_plugin_dependency.providers.memory import InMemoryDirectory, InMemoryPluginHost
from wp_plugin_dependency.services.dependency_checker import PluginDependency

WOO_FILE = "woocommerce/woocommerce.php"


def _host(active: bool = False) -> InMemoryPluginHost:
    return InMemoryPluginHost(
        plugins={
            "akismet/akismet.php": {"Name": "Akismet Anti-spam"},
            WOO_FILE: {"Name": "WooCommerce", "Version": "8.0.0"},
        },
        active=[WOO_FILE] if active else [],
    )


class _BrokenDirectory:
    def __init__(self):
        self.calls = 0

    def plugin_information(self, slug):
        self.calls += 1
        raise ConnectionError("directory unreachable")


class TestPluginDependency(unittest.TestCase):
    def test_active_dependency_verifies_and_clears_message(self):
        dep = PluginDependency("Shop Addons", "WooCommerce", "woocommerce", host=_host(active=True))
        self.assertTrue(dep.verify())
        self.assertEqual(dep.message(), "")

    def test_message_is_empty_before_verify(self):
        dep = PluginDependency("Shop Addons", "WooCommerce", host=_host())
        self.assertEqual(dep.message(), "")

    def test_inactive_dependency_offers_activation_link(self):
        dep = PluginDependency(
            "Shop Addons",
            "WooCommerce",
            "woocommerce",
            host=_host(active=False),
            urls=AdminUrlBuilder("https://shop.example/wp-admin"),
        )
        self.assertFalse(dep.verify())
        msg = dep.message()
        self.assertIn("https://shop.example/wp-admin/plugins.php?action=activate&amp;plugin=" + WOO_FILE, msg)
        self.assertIn("activate WooCommerce</a>", msg)
        self.assertIn("Shop Addons requires that WooCommerce is installed and active.", msg)

    def test_missing_dependency_with_url_and_no_record_offers_download(self):
        url = "https://downloads.example.com/my-dep.zip"
        dep = PluginDependency(
            "Shop Addons",
            "My Dependency",
            url,
            host=_host(),
            directory=InMemoryDirectory(),
        )
        self.assertFalse(dep.verify())
        msg = dep.message()
        self.assertIn(f'<a href="{url}" target="_blank">download and install My Dependency</a>', msg)
        self.assertNotIn("install-plugin", msg)

    def test_missing_dependency_with_directory_record_offers_install_link(self):
        directory = InMemoryDirectory([DirectoryRecord(slug="classic-editor", name="Classic Editor")])
        dep = PluginDependency(
            "Shop Addons",
            "Classic Editor",
            "classic-editor",
            host=_host(),
            directory=directory,
            urls=AdminUrlBuilder("/wp-admin"),
        )
        self.assertFalse(dep.verify())
        msg = dep.message()
        self.assertIn("/wp-admin/update.php?action=install-plugin&amp;plugin=classic-editor", msg)
        self.assertIn('target="_top">install Classic Editor</a>', msg)

    def test_missing_dependency_without_locator_has_no_instructions(self):
        dep = PluginDependency("Shop Addons", "Classic Editor", host=_host(), directory=InMemoryDirectory())
        self.assertFalse(dep.verify())
        self.assertEqual(
            dep.message(),
            '<p style="font-family: sans-serif; font-size: 12px">'
            "Shop Addons requires that Classic Editor is installed and active.</p>",
        )

    def test_slug_without_record_and_not_a_url_has_no_instructions(self):
        dep = PluginDependency("Shop Addons", "Private Tool", "private-tool", host=_host(), directory=InMemoryDirectory())
        self.assertFalse(dep.verify())
        self.assertNotIn("<a ", dep.message())

    def test_directory_failure_falls_back_to_download_link(self):
        directory = _BrokenDirectory()
        url = "https://example.org/dep.zip"
        dep = PluginDependency("Shop Addons", "Dep", url, host=_host(), directory=directory)
        with self.assertLogs("wp_plugin_dependency.services.dependency_checker", level="WARNING") as logs:
            self.assertFalse(dep.verify())
        self.assertEqual(directory.calls, 1)
        self.assertIn("directory.lookup.error", "\n".join(logs.output))
        self.assertIn("download and install Dep", dep.message())

    def test_sequential_verify_reflects_current_state(self):
        host = _host(active=False)
        dep = PluginDependency("Shop Addons", "WooCommerce", host=host)
        self.assertFalse(dep.verify())
        self.assertIn("activate WooCommerce", dep.message())

        host.activate(WOO_FILE)
        self.assertTrue(dep.verify())
        self.assertEqual(dep.message(), "")

        host.deactivate(WOO_FILE)
        self.assertFalse(dep.verify())
        self.assertIn("activate WooCommerce", dep.message())

    def test_catalog_is_snapshotted_until_refresh(self):
        host = InMemoryPluginHost()
        dep = PluginDependency("Shop Addons", "WooCommerce", host=host)
        host.install(WOO_FILE, "WooCommerce")
        host.activate(WOO_FILE)
        self.assertFalse(dep.verify())
        self.assertNotIn("activate", dep.message())

        dep.refresh()
        self.assertTrue(dep.verify())
        self.assertEqual(dep.message(), "")

    def test_first_match_wins_on_duplicate_names(self):
        host = InMemoryPluginHost(
            plugins={
                "first/first.php": {"Name": "Dup"},
                "second/second.php": {"Name": "Dup"},
            },
            active=["second/second.php"],
        )
        dep = PluginDependency("Addon", "Dup", host=host)
        result = dep.check()
        self.assertEqual(result.status, STATUS_INSTALLED_INACTIVE)
        self.assertEqual(result.plugin_file, "first/first.php")

    def test_check_returns_tagged_result(self):
        dep = PluginDependency("Addon", "WooCommerce", host=_host(active=True))
        result = dep.check()
        self.assertEqual(result.status, STATUS_ACTIVE)
        self.assertEqual(result.plugin_file, WOO_FILE)
        self.assertTrue(result.ok)

        missing = PluginDependency("Addon", "Nope", host=_host()).check()
        self.assertEqual(missing.status, STATUS_NOT_INSTALLED)
        self.assertIsNone(missing.plugin_file)
        self.assertFalse(missing.ok)

    def test_names_are_html_escaped(self):
        dep = PluginDependency("<b>Addon</b>", "Dep & Co", host=_host())
        dep.verify()
        msg = dep.message()
        self.assertIn("&lt;b&gt;Addon&lt;/b&gt; requires that Dep &amp; Co", msg)
        self.assertNotIn("<b>", msg)

    def test_translator_is_applied_to_templates(self):
        def translate(text):
            return text.replace("requires that", "benötigt, dass").replace("is installed and active", "installiert und aktiv ist")

        dep = PluginDependency("Addon", "WooCommerce", host=_host(), translate=translate)
        dep.verify()
        self.assertIn("Addon benötigt, dass WooCommerce installiert und aktiv ist.", dep.message())

    def test_installed_plugins_snapshot_is_read_only_copy(self):
        dep = PluginDependency("Addon", "WooCommerce", host=_host())
        snapshot = dep.installed_plugins
        self.assertIn(WOO_FILE, snapshot)
        snapshot.pop(WOO_FILE)
        self.assertIn(WOO_FILE, dep.installed_plugins)


if __name__ == "__main__":
    unittest.main()
