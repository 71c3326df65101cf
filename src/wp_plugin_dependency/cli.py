import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from wp_plugin_dependency.config import DEFAULT_CONFIG_DIR, Config, load_config
from wp_plugin_dependency.providers.base import AdminUrlBuilder
from wp_plugin_dependency.providers.memory import load_catalog_file
from wp_plugin_dependency.providers.transport import HostQueryError
from wp_plugin_dependency.providers.wp_rest import WordPressRestHost
from wp_plugin_dependency.providers.wporg import WordPressOrgDirectory
from wp_plugin_dependency.services.dependency_checker import PluginDependency
from wp_plugin_dependency.util import redact

EXIT_ACTIVE = 0
EXIT_NOT_ACTIVE = 1
EXIT_ERROR = 2


def _configure_logging(level: str) -> None:
    level = (level or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _print_config(config: Config) -> None:
    print(f"Config dir: {config.config_dir}")
    print(f"Env file: {config.env_path}")
    print(f"Site URL: {config.site_url or '(not set)'}")
    print(f"Admin URL: {config.admin_url}")
    print(f"Username: {config.username or '(not set)'}")
    print(f"App password present: {'yes' if config.app_password else 'no'}")
    print(f"Directory API: {config.wporg_api_url}")
    print(f"Timeouts: connect={config.connect_timeout_sec}s read={config.read_timeout_sec}s")
    print(f"Retry attempts: {config.retry_attempts}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wp-plugin-dependency",
        description="Check that a WordPress plugin dependency is installed and active",
    )
    parser.add_argument(
        "--config-dir",
        default=str(DEFAULT_CONFIG_DIR),
        help="Directory holding the .env config (default: ~/.config/wp-plugin-dependency)",
    )
    parser.add_argument("--print-config", action="store_true", help="Print active config summary")
    parser.add_argument("--log-level", default=os.environ.get("LOG_LEVEL", "WARNING"))
    sub = parser.add_subparsers(dest="command")

    check = sub.add_parser("check", help="Verify a dependency and print the admin notice")
    check.add_argument("--plugin", required=True, help="Name of the plugin that has the dependency")
    check.add_argument("--dependency", required=True, help="Display name of the required plugin")
    check.add_argument("--locator", default="", help="WordPress.org slug or download URL of the dependency")
    check.add_argument("--catalog", help="JSON catalog snapshot to check instead of a live site")
    check.add_argument(
        "--active",
        action="append",
        default=[],
        metavar="PLUGIN_FILE",
        help="Mark a catalog plugin file as active (repeatable, --catalog only)",
    )
    check.add_argument("--site", help="Site URL (overrides WP_SITE_URL)")
    check.add_argument("--admin-url", help="Admin base URL for action links (overrides WP_ADMIN_URL)")
    check.add_argument("--no-directory", action="store_true", help="Skip the WordPress.org directory lookup")
    check.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser


def _run_check(args: argparse.Namespace, config: Config) -> int:
    directory = None
    if not args.no_directory:
        directory = WordPressOrgDirectory(
            config.wporg_api_url,
            connect_timeout_sec=config.connect_timeout_sec,
            read_timeout_sec=config.read_timeout_sec,
        )
    site_url = (args.site or config.site_url or "").rstrip("/")
    admin_url = args.admin_url or (site_url + "/wp-admin" if args.site else config.admin_url)
    rest_host = None
    try:
        if args.catalog:
            host = load_catalog_file(Path(args.catalog), extra_active=args.active)
        else:
            if not site_url:
                raise ValueError("No site configured. Pass --site or set WP_SITE_URL, or use --catalog.")
            rest_host = WordPressRestHost(
                site_url,
                config.username or "",
                config.app_password or "",
                connect_timeout_sec=config.connect_timeout_sec,
                read_timeout_sec=config.read_timeout_sec,
                retry_attempts=config.retry_attempts,
            )
            host = rest_host
        dependency = PluginDependency(
            args.plugin,
            args.dependency,
            args.locator,
            host=host,
            directory=directory,
            urls=AdminUrlBuilder(admin_url),
        )
        result = dependency.check()
    finally:
        if rest_host is not None:
            rest_host.close()
        if directory is not None:
            directory.close()

    if args.json:
        print(
            json.dumps(
                {
                    "ok": result.ok,
                    "status": result.status,
                    "plugin_file": result.plugin_file,
                    "message": dependency.message(),
                },
                ensure_ascii=True,
                sort_keys=True,
            )
        )
    elif result.ok:
        print(f"{args.dependency} is installed and active ({result.plugin_file}).")
    else:
        print(dependency.message())
    return EXIT_ACTIVE if result.ok else EXIT_NOT_ACTIVE


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    config = load_config(Path(args.config_dir).expanduser().resolve())

    if args.print_config:
        _print_config(config)
        return 0

    if args.command != "check":
        parser.print_help()
        return EXIT_ERROR

    try:
        return _run_check(args, config)
    except (ValueError, HostQueryError) as exc:
        print(f"Error: {redact(str(exc))}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
