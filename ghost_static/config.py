"""Runtime configuration for the static export."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlparse

import yaml

DEFAULT_SOURCE_URL = "http://localhost:2368"
DEFAULT_OUTPUT_DIR = "static-site"

# env variable -> config field
ENV_OVERRIDES = {
    "GHOST_URL": "source_url",
    "OUTPUT_DIR": "output_dir",
    "GITHUB_PAGES_DOMAIN": "domain",
    "MAX_RETRIES": "max_retries",
    "RETRY_DELAY": "retry_delay_sec",
    "WGET_BIN": "wget_bin",
}


@dataclass(slots=True)
class ExportConfig:
    """Runtime configuration loaded from YAML and the environment."""

    source_url: str = DEFAULT_SOURCE_URL
    output_dir: str = DEFAULT_OUTPUT_DIR
    domain: str = ""
    max_retries: int = 30
    retry_delay_sec: float = 2.0
    probe_timeout_sec: float = 5.0
    wget_bin: str = "wget"
    wget_wait_sec: int = 1
    wget_timeout_sec: int = 30
    wget_tries: int = 3
    site_title: str = "Ghost Blog"
    index_name: str = "search.json"
    install_client: bool = True

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)

    @property
    def index_path(self) -> Path:
        return self.output_path / self.index_name

    @property
    def host_names(self) -> list[str]:
        return host_dir_names(self.source_url)


def host_dir_names(source_url: str) -> list[str]:
    """Return the directory names a mirror tool may create for the origin.

    wget names the directory ``host:port``; with ``--restrict-file-names=windows``
    the colon becomes ``+``.
    """
    parsed = urlparse(source_url)
    host = parsed.hostname or ""
    if not host:
        return []
    if parsed.port is None:
        return [host]
    return [f"{host}:{parsed.port}", f"{host}+{parsed.port}"]


def _coerce(name: str, value: Any, default: Any, source: str) -> Any:
    if isinstance(default, bool):
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)
    if isinstance(default, int):
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{source}: {name} must be an integer, got {value!r}") from exc
    if isinstance(default, float):
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{source}: {name} must be a number, got {value!r}") from exc
    return str(value)


def load_config(config_path: Path | None = None, environ: Mapping[str, str] | None = None) -> ExportConfig:
    """Load an optional config.yaml, apply defaults, then environment overrides."""
    data: dict[str, Any] = {}
    if config_path is not None:
        loaded = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{config_path} must be a mapping")
        data = loaded

    defaults = ExportConfig()
    values: dict[str, Any] = {}
    for f in fields(ExportConfig):
        default = getattr(defaults, f.name)
        if f.name in data:
            values[f.name] = _coerce(f.name, data[f.name], default, str(config_path))
        else:
            values[f.name] = default

    env = os.environ if environ is None else environ
    for var, name in ENV_OVERRIDES.items():
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        values[name] = _coerce(var, raw, getattr(defaults, name), "environment")

    values["source_url"] = str(values["source_url"]).rstrip("/")
    return ExportConfig(**values)
