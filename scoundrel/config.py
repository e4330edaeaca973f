"""Runtime settings and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

import yaml
from dotenv import load_dotenv

from .player import DEFAULT_MAX_HEALTH

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "LOG_FORMAT",
    "Settings",
    "configure_logging",
]

DEFAULT_CONFIG_PATH = Path("data") / "scoundrel.yaml"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

# Environment variable -> settings field.
_ENV_OVERRIDES = {
    "SCOUNDREL_MAX_HEALTH": "max_health",
    "SCOUNDREL_HOST": "host",
    "PORT": "port",
    "SCOUNDREL_CORS_ORIGIN": "cors_origin",
    "SCOUNDREL_LOG_LEVEL": "log_level",
}


class ConfigError(RuntimeError):
    """Raised when settings could not be loaded or are invalid."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        if path is not None:
            message = f"{message} (source: {path})"
        super().__init__(message)
        self.path = path


def _coerce_int(name: str, value: object, *, path: Path | None) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer", path=path)
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}", path=path) from exc


@dataclass(frozen=True)
class Settings:
    """Settings shared by the HTTP server, the terminal client and the bot."""

    max_health: int = DEFAULT_MAX_HEALTH
    host: str = "127.0.0.1"
    port: int = 8080
    cors_origin: str = "*"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.max_health <= 0:
            raise ConfigError("max_health must be positive")
        if not 0 < self.port < 65536:
            raise ConfigError(f"port {self.port} is out of range")
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ConfigError(f"Unknown log level {self.log_level!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, object], *, path: Path | None = None) -> "Settings":
        known = {"max_health", "host", "port", "cors_origin", "log_level"}
        unknown = sorted(str(key) for key in data if key not in known)
        if unknown:
            raise ConfigError(f"Unknown setting(s): {', '.join(unknown)}", path=path)
        values: dict[str, object] = {}
        if "max_health" in data:
            values["max_health"] = _coerce_int("max_health", data["max_health"], path=path)
        if "port" in data:
            values["port"] = _coerce_int("port", data["port"], path=path)
        for key in ("host", "cors_origin", "log_level"):
            if key in data and data[key] is not None:
                values[key] = str(data[key])
        try:
            return cls(**values)  # type: ignore[arg-type]
        except ConfigError as exc:
            if path is None:
                raise
            raise ConfigError(str(exc), path=path) from exc

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """Read the YAML settings file, then apply environment overrides.

        ``.env`` is loaded first so its values count as environment variables.
        A missing settings file is not an error.
        """

        if environ is None:
            load_dotenv()
            environ = os.environ
        if path is None:
            path = Path(environ.get("SCOUNDREL_CONFIG") or DEFAULT_CONFIG_PATH)

        settings = cls()
        if path.exists():
            try:
                raw = yaml.safe_load(path.read_text(encoding="utf-8"))
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML: {exc}", path=path) from exc
            if raw is not None:
                if not isinstance(raw, Mapping):
                    raise ConfigError("Settings file must contain a mapping", path=path)
                section = raw.get("scoundrel", raw)
                if not isinstance(section, Mapping):
                    raise ConfigError("'scoundrel' section must be a mapping", path=path)
                settings = cls.from_mapping(section, path=path)

        overrides: dict[str, object] = {}
        for variable, field_name in _ENV_OVERRIDES.items():
            value = environ.get(variable)
            if value:
                overrides[field_name] = value
        if not overrides:
            return settings
        if "max_health" in overrides:
            overrides["max_health"] = _coerce_int(
                "SCOUNDREL_MAX_HEALTH", overrides["max_health"], path=None
            )
        if "port" in overrides:
            overrides["port"] = _coerce_int("PORT", overrides["port"], path=None)
        return replace(settings, **overrides)  # type: ignore[arg-type]


def configure_logging(level: str | int = logging.INFO) -> None:
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
