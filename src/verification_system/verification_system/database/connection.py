from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import mysql.connector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "DBConfig":
        """Build from a settings DB_CONFIG dict."""
        return cls(
            host=str(raw["host"]),
            port=int(raw.get("port", 3306)),
            user=str(raw["user"]),
            password=str(raw.get("password", "")),
            database=str(raw["database"]),
        )


class DatabaseConnection:
    """Connection factory, one per distinct DBConfig.

    Connections are short-lived: every repository call opens one through
    db_cursor() and closes it when the unit of work ends.
    """

    _instances: dict[DBConfig, "DatabaseConnection"] = {}

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if config not in cls._instances:
            logger.info("Using MySQL %s@%s:%s/%s", config.user, config.host, config.port, config.database)
            cls._instances[config] = DatabaseConnection(config)
        return cls._instances[config]

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            charset="utf8mb4",
            autocommit=False,
        )
