"""Configuration loading.

Values come from a YAML file and are overridden by ``CF_CLEANER_*``
environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

DEFAULT_CONFIG_PATH = Path.home() / ".cfcleaner" / "config.yaml"
ENV_PREFIX = "CF_CLEANER_"


@dataclass
class Config:
    """Cleaner configuration.

    Attributes:
        api_url: Cloud Controller API root (e.g., https://api.example.com)
        uaa_url: UAA root; discovered from /v2/info when not set
        username: Platform user for the password grant
        password: Password for the password grant
        client_id: OAuth client for the password grant
        client_secret: Secret of ``client_id``
        uaa_client_id: Admin client for UAA calls (optional, client credentials)
        uaa_client_secret: Secret of ``uaa_client_id``
        skip_ssl_validation: Disable TLS certificate verification
        name_prefix: Prefix of every fixture name
        log_level: Default log level
        storage_path: Base directory for audit logs
        deadline_minutes: Wall-clock budget of one cleanup run
        max_attempts: Whole-run attempts on TLS faults
        job_poll_interval: Seconds between job polls
        job_timeout: Seconds before a running job is given up on
        request_timeout: Per-request HTTP timeout in seconds
    """

    api_url: Optional[str] = None
    uaa_url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    client_id: str = "cf"
    client_secret: str = ""
    uaa_client_id: Optional[str] = None
    uaa_client_secret: str = ""
    skip_ssl_validation: bool = False
    name_prefix: str = "test"
    log_level: str = "INFO"
    storage_path: Optional[str] = None
    deadline_minutes: float = 30.0
    max_attempts: int = 5
    job_poll_interval: float = 1.0
    job_timeout: float = 300.0
    request_timeout: float = 30.0

    @classmethod
    def load(cls, path: Optional[str] = None) -> Config:
        """Load configuration from YAML and the environment.

        Args:
            path: Config file (default: $CF_CLEANER_CONFIG or ~/.cfcleaner/config.yaml)

        Returns:
            Config instance; missing file means defaults plus environment

        Raises:
            ValueError: If the file is not a YAML mapping or holds unknown keys
        """
        config_path = Path(path or os.environ.get(f"{ENV_PREFIX}CONFIG") or DEFAULT_CONFIG_PATH)

        values: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path, "r") as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"Config file {config_path} must contain a mapping")
            values.update(loaded)

        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown config keys in {config_path}: {', '.join(sorted(unknown))}")

        for name in known:
            env_value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if env_value is not None:
                values[name] = env_value

        return cls(**{name: cls._coerce(name, value) for name, value in values.items()})

    @classmethod
    def _coerce(cls, name: str, value: Any) -> Any:
        default = next(f.default for f in fields(cls) if f.name == name)
        if value is None or not isinstance(value, str):
            return value
        if isinstance(default, bool):
            return value.strip().lower() in ("1", "true", "yes", "on")
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
        return value

    def validate(self) -> None:
        """Check that a cleanup can be attempted with this configuration.

        Raises:
            ValueError: If the API URL or credentials are missing
        """
        if not self.api_url:
            raise ValueError(f"API URL is not configured (set api_url or {ENV_PREFIX}API_URL)")
        if not self.username and not self.uaa_client_id:
            raise ValueError("Credentials are not configured (set username/password or uaa_client_id)")
        if self.username and self.password is None:
            raise ValueError(f"Password is not configured for user {self.username}")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
