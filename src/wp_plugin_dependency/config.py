import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from wp_plugin_dependency.providers.wporg import DEFAULT_API_URL

SITE_URL_KEY = "WP_SITE_URL"
USERNAME_KEY = "WP_USERNAME"
APP_PASSWORD_KEY = "WP_APP_PASSWORD"
ADMIN_URL_KEY = "WP_ADMIN_URL"
WPORG_API_URL_KEY = "WPORG_API_URL"
CONNECT_TIMEOUT_KEY = "HTTP_CONNECT_TIMEOUT_SEC"
READ_TIMEOUT_KEY = "HTTP_READ_TIMEOUT_SEC"
RETRY_ATTEMPTS_KEY = "HTTP_RETRY_ATTEMPTS"

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "wp-plugin-dependency"


@dataclass
class Config:
    site_url: Optional[str]
    username: Optional[str]
    app_password: Optional[str]
    admin_url: str
    wporg_api_url: str
    connect_timeout_sec: float
    read_timeout_sec: float
    retry_attempts: int
    config_dir: Path
    env_path: Path


def load_env_file(path: Path) -> Dict[str, str]:
    data: Dict[str, str] = {}
    if not path.exists():
        return data
    try:
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            k, v = line.split("=", 1)
            data[k.strip()] = v.strip().strip('"').strip("'")
    except OSError as exc:
        print(f"Failed to read .env: {exc}", file=sys.stderr)
    return data


def get_env_path(config_dir: Path) -> Path:
    return config_dir / ".env"


def get_env_value(key: str, env_file: Dict[str, str]) -> Optional[str]:
    return os.environ.get(key) or env_file.get(key)


def _float_value(raw: Optional[str], default: float) -> float:
    try:
        value = float(raw) if raw not in (None, "") else default
    except ValueError:
        return default
    return value if value > 0 else default


def _int_value(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw) if raw not in (None, "") else default
    except ValueError:
        return default
    return max(1, value)


def default_admin_url(site_url: Optional[str]) -> str:
    if not site_url:
        return "/wp-admin"
    return site_url.rstrip("/") + "/wp-admin"


def load_config(config_dir: Path = DEFAULT_CONFIG_DIR) -> Config:
    config_dir = Path(config_dir).expanduser()
    env_path = get_env_path(config_dir)
    env_file = load_env_file(env_path)
    site_url = (get_env_value(SITE_URL_KEY, env_file) or "").strip().rstrip("/") or None
    admin_url = (get_env_value(ADMIN_URL_KEY, env_file) or "").strip() or default_admin_url(site_url)
    return Config(
        site_url=site_url,
        username=get_env_value(USERNAME_KEY, env_file),
        app_password=get_env_value(APP_PASSWORD_KEY, env_file),
        admin_url=admin_url,
        wporg_api_url=(get_env_value(WPORG_API_URL_KEY, env_file) or "").strip() or DEFAULT_API_URL,
        connect_timeout_sec=_float_value(get_env_value(CONNECT_TIMEOUT_KEY, env_file), 5.0),
        read_timeout_sec=_float_value(get_env_value(READ_TIMEOUT_KEY, env_file), 15.0),
        retry_attempts=_int_value(get_env_value(RETRY_ATTEMPTS_KEY, env_file), 3),
        config_dir=config_dir,
        env_path=env_path,
    )
