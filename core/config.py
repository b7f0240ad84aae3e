import os
import sys

import yaml

DEFAULT_PORT = 3000
DEFAULT_USER_AGENT = "MCP-M365-Roadmap-Server/1.0"


class ConfigLoader:
    _instance = None
    _config = None

    def __new__(cls):
        """
        Create a singleton instance of ConfigLoader.
        Loads configuration from YAML file on first instantiation.
        """
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
            cls._load_config()
        return cls._instance

    @classmethod
    def _load_config(cls):
        config_path = os.environ.get("ROADMAP_CONFIG") or os.path.join(
            os.path.dirname(__file__), "..", "config.yaml"
        )
        config_path = os.path.abspath(config_path)
        with open(config_path, "r", encoding="utf-8") as f:
            cls._config = yaml.safe_load(f) or {}

    def get_config(self):
        return self._config


def get_config():
    """
    Helper function to get the singleton configuration instance's config dictionary.
    """
    return ConfigLoader().get_config()


def get_api_url(key: str = "roadmap") -> str:
    """Join `roadmap_api_url` with the path configured under `api_paths.<key>`."""
    _cfg = get_config() or {}
    base_url = _cfg.get("roadmap_api_url", "").rstrip("/")
    if not base_url:
        sys.exit("Error: 'roadmap_api_url' must be set in config.yaml")

    path = _cfg.get("api_paths", {}).get(key)
    if not path:
        sys.exit(f"Error: Missing API path for key '{key}' in config.yaml under 'api_paths'")

    return f"{base_url}{path}"


def get_user_agent() -> str:
    return (get_config() or {}).get("user_agent") or DEFAULT_USER_AGENT


def get_server_settings() -> dict:
    """Server name, host and port. The PORT environment variable wins over config.yaml."""
    server_cfg = dict((get_config() or {}).get("server") or {})
    port = os.environ.get("PORT") or server_cfg.get("port") or DEFAULT_PORT
    try:
        server_cfg["port"] = int(port)
    except (TypeError, ValueError):
        sys.exit(f"Error: invalid port {port!r}")
    server_cfg.setdefault("name", "microsoft365-roadmap")
    server_cfg.setdefault("host", "0.0.0.0")
    return server_cfg
