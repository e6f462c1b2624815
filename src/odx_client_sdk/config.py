from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from dotenv import load_dotenv

DEFAULT_GATEWAY_URL = "https://gateway.odxproxy.io"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    database: str
    odoo_api_key: str
    odx_api_key: str
    gateway_url: str = DEFAULT_GATEWAY_URL
    instance_user_id: int = 2
    timeout_seconds: float = 10.0
    retries: int = 2
    retry_backoff_seconds: float = 0.3
    verify_ssl: bool = True

    def validate(self) -> None:
        """Raise ConfigError if any connection parameter is unusable."""
        _require(
            {
                "ODOO_BASE_URL": self.base_url,
                "ODOO_DB": self.database,
                "ODOO_API_KEY": self.odoo_api_key,
                "ODX_API_KEY": self.odx_api_key,
            },
            ["ODOO_BASE_URL", "ODOO_DB", "ODOO_API_KEY", "ODX_API_KEY"],
        )
        _validate(bool(self.gateway_url), "Invalid ODX_GATEWAY_URL: expected a URL, got ''")
        _validate(
            self.instance_user_id > 0,
            f"Invalid ODOO_USER_ID: expected > 0, got {self.instance_user_id}",
        )
        _validate(
            self.timeout_seconds > 0,
            f"Invalid ODX_TIMEOUT_SECONDS: expected > 0, got {self.timeout_seconds}",
        )
        _validate(self.retries >= 0, f"Invalid ODX_RETRIES: expected >= 0, got {self.retries}")
        _validate(
            self.retry_backoff_seconds >= 0,
            f"Invalid ODX_RETRY_BACKOFF_SECONDS: expected >= 0, got {self.retry_backoff_seconds}",
        )


def _require(values: dict[str, str | None], required: Iterable[str]) -> None:
    missing = [key for key in required if not (values.get(key) or "").strip()]
    if missing:
        raise ConfigError(f"Missing required config values: {', '.join(missing)}")


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    config = ClientConfig(
        base_url=(os.getenv("ODOO_BASE_URL") or "").strip().rstrip("/"),
        database=(os.getenv("ODOO_DB") or "").strip(),
        odoo_api_key=(os.getenv("ODOO_API_KEY") or "").strip(),
        odx_api_key=(os.getenv("ODX_API_KEY") or "").strip(),
        gateway_url=(os.getenv("ODX_GATEWAY_URL") or DEFAULT_GATEWAY_URL).strip().rstrip("/"),
        instance_user_id=_read_int("ODOO_USER_ID", "2"),
        timeout_seconds=_read_float("ODX_TIMEOUT_SECONDS", "10"),
        retries=_read_int("ODX_RETRIES", "2"),
        retry_backoff_seconds=_read_float("ODX_RETRY_BACKOFF_SECONDS", "0.3"),
        verify_ssl=_coerce_bool(os.getenv("ODX_VERIFY_SSL"), True),
    )
    config.validate()
    return config
