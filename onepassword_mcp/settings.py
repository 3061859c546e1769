import json
import os
import platform
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

SERVER_NAME = "1password-mcp"
SERVER_VERSION = "2.0.0"

# Lower value = more severe
LOG_LEVEL_VALUES: Dict[str, int] = {"error": 0, "warn": 1, "info": 2, "debug": 3}

CONFIG_FILE_NAMES = ("config.toml", "config.json", "config.yaml", "config.yml")


class Settings(BaseSettings):
    # 1Password service account
    OP_SERVICE_ACCOUNT_TOKEN: Optional[str] = None
    OP_INTEGRATION_NAME: str = SERVER_NAME
    OP_INTEGRATION_VERSION: str = SERVER_VERSION
    # True when the token came from --service-account-token rather than the environment
    TOKEN_FROM_ARGS: bool = False

    # Logging (error | warn | info | debug); MCP_DEBUG=1 means debug when no level is given
    MCP_LOG_LEVEL: Optional[str] = None
    MCP_DEBUG: Optional[str] = None
    LOG_DIR: str = "logs"

    # HTTP transport: JSON map of API key -> subject or {"subject", "scopes"}
    AUTH_API_KEY_ENABLED: bool = True
    API_KEYS_JSON: Optional[str] = None

    # Identity of the stdio peer; it holds every scope
    SUBJECT: str = "stdio-agent"

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_REQUESTS: int = 60
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # Set false to serve only MCP and health endpoints over HTTP
    EXPOSE_REST_ROUTES: bool = True
    # Comma-separated; CORS middleware is skipped when empty
    CORS_ALLOW_ORIGINS: Optional[str] = None

    # No .env loading. Precedence: explicit kwargs (CLI flags) > env > config file.
    model_config = SettingsConfigDict(case_sensitive=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, _FileConfigSource(settings_cls), file_secret_settings)

    @property
    def log_level(self) -> str:
        raw = (self.MCP_LOG_LEVEL or ("debug" if self.MCP_DEBUG else "info")).lower()
        return raw if raw in LOG_LEVEL_VALUES else "info"

    @property
    def log_level_value(self) -> int:
        return LOG_LEVEL_VALUES[self.log_level]

    @property
    def token_source(self) -> str:
        if not self.OP_SERVICE_ACCOUNT_TOKEN:
            return "missing"
        return "args" if self.TOKEN_FROM_ARGS else "env"

    def public_view(self) -> Dict[str, Any]:
        """Non-secret configuration values, safe to expose as a resource."""
        return {
            "serverName": SERVER_NAME,
            "serverVersion": SERVER_VERSION,
            "logLevel": self.log_level,
            "integrationName": self.OP_INTEGRATION_NAME,
            "integrationVersion": self.OP_INTEGRATION_VERSION,
            "tokenSource": self.token_source,
            "pythonVersion": platform.python_version(),
        }


def _config_path() -> Optional[Path]:
    explicit = os.environ.get("APP_CONFIG_FILE") or os.environ.get("CONFIG_FILE")
    if explicit:
        return Path(explicit).expanduser().resolve()
    for name in CONFIG_FILE_NAMES:
        candidate = Path.cwd() / name
        if candidate.exists():
            return candidate.resolve()
    return None


def _read_config(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
    elif suffix == ".toml":
        with path.open("rb") as f:
            data = tomllib.load(f)
    elif suffix in (".yaml", ".yml"):
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    else:
        return {}
    # keys are matched case-insensitively against the upper-case field names
    return {str(k).upper(): v for k, v in data.items()} if isinstance(data, dict) else {}


class _FileConfigSource(PydanticBaseSettingsSource):
    """Lowest-priority source: an optional JSON/TOML/YAML file."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        path = _config_path()
        self._data: Dict[str, Any] = {}
        if path is not None and path.is_file():
            try:
                self._data = _read_config(path)
            except (OSError, ValueError, yaml.YAMLError):
                self._data = {}

    def get_field_value(self, field, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> Dict[str, Any]:
        known = self.settings_cls.model_fields
        return {k: v for k, v in self._data.items() if k in known}


def load_settings(**overrides: Any) -> Settings:
    """Build a fresh Settings; non-None ``overrides`` win over env and file."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


settings = Settings()
