import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


LOG_LEVEL_ENV = "FNEVENT_LOG_LEVEL"
HANDLER_ENV = "FNEVENT_HANDLER"
CONFIG_PATH_ENV = "FNEVENT_CONFIG"
SYSTEM_CONFIG_PATH = Path("/etc/fnevent/config.json")


@dataclass
class Settings:
    log_level: str = "INFO"
    handler: Optional[str] = None


def config_path() -> Path:
    path = os.environ.get(CONFIG_PATH_ENV)
    if path:
        return Path(path).expanduser()
    return SYSTEM_CONFIG_PATH


def read_json(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _file_settings() -> dict:
    path = config_path()
    try:
        if path.exists():
            cfg = read_json(path)
            if isinstance(cfg, dict):
                return cfg
    except (OSError, ValueError):
        # fall through to defaults if config unreadable
        pass
    return {}


def get_settings() -> Settings:
    # 1) explicit environment wins, 2) config file, 3) defaults
    cfg = _file_settings()
    defaults = Settings()
    log_level = os.environ.get(LOG_LEVEL_ENV) or cfg.get("log_level") or defaults.log_level
    handler = os.environ.get(HANDLER_ENV) or cfg.get("handler") or defaults.handler
    return Settings(log_level=str(log_level).upper(), handler=handler)
