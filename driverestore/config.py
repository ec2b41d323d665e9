import json
from pathlib import Path
from typing import Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

CONFIG_NAME = "driverestore.json"
ENV_PREFIX = "DRIVERESTORE_"

class Config(BaseSettings):
    """
    Access tokens and run settings.

    Values come from driverestore.json (passed in as keyword arguments) and
    DRIVERESTORE_* environment variables, the environment winning.
    """

    drive_token: str = ""
    reports_token: str = ""
    timeout: float = 60.0
    log_dir: Path = Path(".driverestore")

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        case_sensitive=False,
        extra="forbid",
        frozen=True,
    )

    @field_validator("log_dir")
    @classmethod
    def _expand_log_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings,
                                   dotenv_settings, file_secret_settings):
        # first source wins
        return env_settings, init_settings

    def require_tokens(self) -> None:
        missing = [name for name, value in (("drive_token", self.drive_token),
                                            ("reports_token", self.reports_token)) if not value]
        if missing:
            raise ConfigError(
                "Missing access token(s): " + ", ".join(missing)
                + f". Set them in {CONFIG_NAME} or as {ENV_PREFIX}DRIVE_TOKEN / {ENV_PREFIX}REPORTS_TOKEN."
            )

def _from_file(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must hold a JSON object")
    return data

def load_config(path: Optional[Path] = None) -> Config:
    """Settings from the JSON file (explicit path or ./driverestore.json) and the environment."""
    if path is not None and not Path(path).exists():
        raise ConfigError(f"Config file not found: {path}")
    file_path = Path(path) if path is not None else Path(CONFIG_NAME)
    values = _from_file(file_path) if file_path.exists() else {}

    try:
        return Config(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
