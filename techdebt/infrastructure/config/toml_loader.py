"""TOML configuration loader with env overrides."""

import logging
import os
import tomllib
from pathlib import Path

from techdebt.domain.ports.config import AppConfig, ScanConfig, SecurityConfig, ServerConfig

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _load_toml(path: Path) -> dict:
    """Load TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _merge(base: dict, override: dict) -> dict:
    """Merge override into base, recursing into nested tables."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _set_number(section: dict, key: str, raw: str, env_name: str, cast=float) -> None:
    try:
        section[key] = cast(raw)
    except ValueError:
        logger.warning("Invalid %s env value: %r, ignoring", env_name, raw)


def _apply_env_overrides(config: dict) -> dict:
    """Apply environment variable overrides."""
    if rate := os.getenv("TECHDEBT_HOURLY_RATE"):
        _set_number(config.setdefault("scan", {}), "hourly_rate", rate, "TECHDEBT_HOURLY_RATE")
    if per_line := os.getenv("TECHDEBT_MINUTES_PER_LINE"):
        _set_number(config.setdefault("scan", {}), "minutes_per_line", per_line, "TECHDEBT_MINUTES_PER_LINE")
    if workers := os.getenv("TECHDEBT_MAX_WORKERS"):
        _set_number(config.setdefault("scan", {}), "max_workers", workers, "TECHDEBT_MAX_WORKERS", int)
    if ai := os.getenv("TECHDEBT_AI_DETECTION"):
        scan = config.setdefault("scan", {})
        scan.setdefault("ai_detection", {})["enabled"] = ai.strip().lower() in _TRUE_VALUES
    if port := os.getenv("PORT"):
        _set_number(config.setdefault("server", {}), "port", port, "PORT", int)
    if level := os.getenv("LOG_LEVEL"):
        config.setdefault("logging", {})["level"] = level.upper()
    if path := os.getenv("LOG_FILE"):
        config.setdefault("logging", {})["file"] = path.strip()
    if origins := os.getenv("CORS_ORIGINS"):
        config.setdefault("security", {})["cors_origins"] = [o.strip() for o in origins.split(",")]
    return config


def load_config(config_dir: Path | None = None) -> AppConfig:
    """Load configuration from TOML files with env overrides.

    Loads default.toml, then development.toml if exists.
    """
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent.parent.parent / "config"

    config: dict = {}

    default_path = config_dir / "default.toml"
    if default_path.exists():
        config = _load_toml(default_path)

    dev_path = config_dir / "development.toml"
    if dev_path.exists():
        config = _merge(config, _load_toml(dev_path))

    config = _apply_env_overrides(config)

    logging_raw = config.get("logging") or {}
    return AppConfig(
        server=ServerConfig(**(config.get("server") or {})),
        security=SecurityConfig(**(config.get("security") or {})),
        scan=ScanConfig(**(config.get("scan") or {})),
        reports_dir=(config.get("reports") or {}).get("dir", "output/reports"),
        log_level=logging_raw.get("level", "INFO"),
        log_file=(logging_raw.get("file") or "").strip(),
        log_rotation_max_mb=int(logging_raw.get("log_rotation_max_mb", 5)),
        log_rotation_backups=int(logging_raw.get("log_rotation_backups", 3)),
    )
