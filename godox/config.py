"""Configuration loading for godox (.godox.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .classifier import ON_UNSUPPORTED_CHOICES

CONFIG_FILENAME = ".godox.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LoaderConfig:
    """Directory walk settings."""

    recursive: bool = True
    merge_packages: bool = True
    include_tests: bool = True
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class RenderConfig:
    """Declaration filtering and unsupported-syntax policy."""

    exported_only: bool = True
    on_unsupported: str = "fail"


@dataclass
class ServeConfig:
    """Settings for the HTML/JSON service mode."""

    host: str = "127.0.0.1"
    port: int = 8080
    template: Optional[Path] = None


@dataclass
class GodoxConfig:
    """Represents the settings defined in .godox.yml."""

    root: Path
    loader: LoaderConfig = field(default_factory=LoaderConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    serve: ServeConfig = field(default_factory=ServeConfig)


def load_config(config_path: Path) -> GodoxConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GodoxConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    loader = LoaderConfig()
    loader_data = _as_dict(data.get("loader"))
    if loader_data:
        loader.recursive = _bool_or(loader_data.get("recursive"), loader.recursive)
        loader.merge_packages = _bool_or(loader_data.get("merge_packages"), loader.merge_packages)
        loader.include_tests = _bool_or(loader_data.get("include_tests"), loader.include_tests)
        loader.exclude_paths = _as_str_list(loader_data.get("exclude_paths"))

    render = RenderConfig()
    render_data = _as_dict(data.get("render"))
    if render_data:
        render.exported_only = _bool_or(render_data.get("exported_only"), render.exported_only)
        on_unsupported = _as_str(render_data.get("on_unsupported"))
        if on_unsupported is not None:
            if on_unsupported not in ON_UNSUPPORTED_CHOICES:
                raise ConfigError(
                    f"render.on_unsupported must be one of {', '.join(ON_UNSUPPORTED_CHOICES)}"
                )
            render.on_unsupported = on_unsupported

    serve = ServeConfig()
    serve_data = _as_dict(data.get("serve"))
    if serve_data:
        serve.host = _as_str(serve_data.get("host")) or serve.host
        port = _as_int(serve_data.get("port"))
        if port is not None:
            serve.port = port
        template = _as_str(serve_data.get("template"))
        serve.template = root / template if template else None

    return GodoxConfig(root=root, loader=loader, render=render, serve=serve)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _bool_or(value: Any, default: bool) -> bool:
    parsed = _as_bool(value)
    return default if parsed is None else parsed


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GodoxConfig",
    "LoaderConfig",
    "RenderConfig",
    "ServeConfig",
    "load_config",
]
