from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values


DEFAULT_ENVIRONMENT = "development"
BASE_ENV_FILE = ".env"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class ConnectionSettings:
    # Required before any statement can run
    host: str
    http_path: str
    token: str = field(repr=False)

    # Unity Catalog location of the products table
    catalog: str
    schema: str
    table_name: str

    # Ambient
    environment: str = DEFAULT_ENVIRONMENT
    log_level: str = "INFO"
    pause_on_exit: bool = False

    @property
    def server_hostname(self) -> str:
        # databricks-sql-connector wants the bare workspace hostname
        return self.host.replace("https://", "").replace("http://", "").rstrip("/")

    @property
    def fq_table(self) -> str:
        return f"{self.catalog}.{self.schema}.{self.table_name}"


def _clean(v: Optional[str]) -> str:
    return v.strip() if v else ""


def _truthy(v: str) -> bool:
    return v.lower() in ("1", "true", "yes")


def read_layers(config_dir: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """
    Merge the configuration layers into one flat dict.

    Precedence (later wins):
    - `<config_dir>/.env`
    - `<config_dir>/.env.<APP_ENV>` (optional)
    - process environment
    """
    config_dir = Path(config_dir) if config_dir else Path.cwd()
    environ = os.environ if environ is None else environ

    base = dotenv_values(config_dir / BASE_ENV_FILE)
    env_name = _clean(environ.get("APP_ENV") or base.get("APP_ENV")) or DEFAULT_ENVIRONMENT
    override = dotenv_values(config_dir / f"{BASE_ENV_FILE}.{env_name}")

    merged: dict[str, str] = {}
    for layer in (base, override, environ):
        for k, v in layer.items():
            if v is not None:
                merged[k] = v
    merged["APP_ENV"] = env_name
    return merged


def load_settings(config_dir: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> ConnectionSettings:
    """
    Centralized config: this is the ONLY place configuration is read.
    Raises ConfigError when DATABRICKS_HOST is missing or LOG_LEVEL is not a logging level name.
    """
    values = read_layers(config_dir, environ)

    host = _clean(values.get("DATABRICKS_HOST"))
    if not host:
        raise ConfigError(
            "Error: DATABRICKS_HOST is not configured. "
            "Set it in .env, .env.<APP_ENV> or the process environment."
        )

    log_level = _clean(values.get("LOG_LEVEL")).upper() or "INFO"
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(
            f"Error: LOG_LEVEL={log_level!r} is not a logging level. "
            "Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )

    return ConnectionSettings(
        host=host,
        http_path=_clean(values.get("DATABRICKS_HTTP_PATH")),
        token=_clean(values.get("DATABRICKS_TOKEN")),
        catalog=_clean(values.get("DATABRICKS_CATALOG")),
        schema=_clean(values.get("DATABRICKS_SCHEMA")),
        table_name=_clean(values.get("DATABRICKS_TABLE_NAME")),
        environment=values["APP_ENV"],
        log_level=log_level,
        pause_on_exit=_truthy(_clean(values.get("PAUSE_ON_EXIT"))),
    )
