"""
Configuration loading from config.yaml.

Typed dataclasses so entry points and the web app never touch raw dicts.
Tournament rules (point rules, tie-breakers, …) are NOT configured here:
they live on each Tournament inside the event documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from tourneykit.ids import IdStrategy

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_ID_STRATEGIES = ("uuid", "counter")


@dataclass
class AppConfig:
    log_level: str = "INFO"
    log_file: str = "./logs/tourneykit.log"
    id_strategy: IdStrategy = "uuid"
    data_file: str = "./data/events.json"

    @property
    def data_file_path(self) -> Path:
        return Path(self.data_file)

    @property
    def log_file_path(self) -> Path:
        return Path(self.log_file)


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class Config:
    app: AppConfig = field(default_factory=AppConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config(path: str | Path = "config.yaml") -> Config:
    """
    Load and validate config.yaml.

    Raises:
        FileNotFoundError: config.yaml is missing.
        ValueError: fields are present but invalid.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {cfg_path.resolve()}\n"
            "Copy config.example.yaml to config.yaml and adjust it."
        )

    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    try:
        app_raw = raw.get("app") or {}
        app_cfg = AppConfig(
            log_level=str(app_raw.get("log_level", "INFO")).upper(),
            log_file=str(app_raw.get("log_file", "./logs/tourneykit.log")),
            id_strategy=app_raw.get("id_strategy", "uuid"),
            data_file=str(app_raw.get("data_file", "./data/events.json")),
        )

        server_raw = raw.get("server") or {}
        server_cfg = ServerConfig(
            host=str(server_raw.get("host", "127.0.0.1")),
            port=int(server_raw.get("port", 8000)),
        )

        config = Config(app=app_cfg, server=server_cfg)
        _validate(config)
        return config

    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Invalid config.yaml structure: {exc}") from exc


def _validate(config: Config) -> None:
    if config.app.log_level not in _LOG_LEVELS:
        raise ValueError(
            f"app.log_level must be one of {_LOG_LEVELS}, got '{config.app.log_level}'"
        )
    if config.app.id_strategy not in _ID_STRATEGIES:
        raise ValueError(
            f"app.id_strategy must be one of {_ID_STRATEGIES}, got '{config.app.id_strategy}'"
        )
    if not 0 < config.server.port < 65536:
        raise ValueError(f"server.port must be between 1 and 65535, got {config.server.port}")
