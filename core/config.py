import os
import yaml

# Environment variables that override values from config.yaml
ENV_OVERRIDES = {
    "GHL_API_KEY": "fallback_api_key",
    "GHL_LOCATION_ID": "fallback_location_id",
    "GHL_REGISTRY_DB": "registry_db_path",
    "GHL_MCP_TRANSPORT": "transport",
    "GHL_MCP_LOGS_DIR": "logs_dir",
}

DEFAULTS = {
    "ghl_api_url": "https://services.leadconnectorhq.com",
    "api_version": "2021-07-28",
    "request_timeout": 30.0,
    "registry_db_path": "~/.ghl-mcp/registry.db",
    "logs_dir": "~/.ghl-mcp/logs",
    "transport": "stdio",
    "log_level": "INFO",
    "fallback_api_key": "",
    "fallback_location_id": "",
}


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
        """
        Load the file named by GHL_MCP_CONFIG (else config.yaml in the working
        directory) on top of the defaults, then apply environment overrides.
        """
        config_path = os.environ.get("GHL_MCP_CONFIG") or "config.yaml"
        config_path = os.path.abspath(config_path)
        config = dict(DEFAULTS)
        if os.path.isfile(config_path):
            with open(config_path, "r") as f:
                config.update(yaml.safe_load(f) or {})

        for env_name, key in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                config[key] = value

        cls._config = config

    @classmethod
    def reset(cls):
        """Forget the loaded configuration so the next access reloads it."""
        cls._instance = None
        cls._config = None

    def get_config(self):
        """
        Return the loaded configuration dictionary.
        """
        return self._config


def get_config():
    """
    Helper function to get the singleton configuration instance's config dictionary.
    """
    return ConfigLoader().get_config()


def resolve_path(path: str) -> str:
    """Expand ~ and resolve relative paths against the working directory."""
    if path == ":memory:":
        return path
    return os.path.abspath(os.path.expanduser(path))
