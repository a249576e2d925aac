from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from functools import lru_cache

def _env(name: str, default=None, cast=str):
    val = os.getenv(name, default)
    if val is None:
        return None
    if cast is bool:
        return str(val).strip().lower() in {"1", "true", "yes", "on"}
    if cast in (int, float):
        try:
            return cast(val)
        except (TypeError, ValueError):
            return cast(default) if default is not None else None
    return str(val)

BASE_DIR = Path(__file__).resolve().parent.parent
STATIC_DIR = Path(_env("MT103_STATIC_DIR", str(BASE_DIR / "public")))

@dataclass(frozen=True)
class ApiConfig:
    host: str = _env("MT103_API_HOST", "0.0.0.0")
    #PORT is what the old node server read, still honoured
    port: int = _env("MT103_API_PORT", _env("PORT", 3000), int)
    debug: bool = _env("MT103_DEBUG", False, bool)
    max_request_mb: int = _env("MT103_MAX_REQUEST_MB", 5, int)

@dataclass(frozen=True)
class PathsConfig:
    BASE_DIR: Path = BASE_DIR
    STATIC_DIR: Path = STATIC_DIR

@dataclass(frozen=True)
class LoggingConfig:
    level: str = _env("MT103_LOG_LEVEL", "INFO")

@dataclass(frozen=True)
class AppConfig:
    api: "ApiConfig" = field(default_factory=lambda: ApiConfig())
    paths: "PathsConfig" = field(default_factory=lambda: PathsConfig())
    logging: "LoggingConfig" = field(default_factory=lambda: LoggingConfig())

@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return AppConfig()
