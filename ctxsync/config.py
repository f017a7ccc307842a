"""Configuration loading for ctxsync (.ctxsync.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

CONFIG_FILENAME = ".ctxsync.yml"

DEFAULT_PATTERNS = ("**/ctx.yml", "**/*.ctx.yml")
DEFAULT_EXCLUDE_DIRS = ("node_modules", "dist", "build")
DEFAULT_GLOBAL_FOLDERS = ("architecture", "rules")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DiscoveryConfig:
    """Which files count as context documents."""

    patterns: List[str] = field(default_factory=lambda: list(DEFAULT_PATTERNS))
    exclude_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    exclude_hidden: bool = True


@dataclass
class GlobalConfig:
    """Location and shape of the global documentation tree."""

    root: str = ".ctx"
    folders: List[str] = field(default_factory=lambda: list(DEFAULT_GLOBAL_FOLDERS))
    registry: str = ".global-context-registry.yml"
    suffix: str = ".md"


@dataclass
class CommandsConfig:
    """Commands advertised in generated registry headers."""

    local: str = "ctxsync sync local"
    global_: str = "ctxsync sync global"


@dataclass
class CtxSyncConfig:
    """Represents the settings defined in .ctxsync.yml."""

    root: Path
    output_dir: str = ".ctx"
    local_registry: str = ".local-context-registry.yml"
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)
    commands: CommandsConfig = field(default_factory=CommandsConfig)

    @property
    def local_registry_path(self) -> Path:
        return self.root / self.output_dir / self.local_registry

    @property
    def global_root(self) -> Path:
        return self.root / self.global_.root

    @property
    def global_registry_path(self) -> Path:
        return self.global_root / self.global_.registry


def load_config(config_path: Path) -> CtxSyncConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CtxSyncConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = CtxSyncConfig(root=root)
    config.output_dir = _as_str(data.get("output_dir")) or config.output_dir
    config.local_registry = _as_str(data.get("local_registry")) or config.local_registry

    discovery_data = _as_dict(data.get("discovery"))
    if discovery_data:
        if "patterns" in discovery_data:
            config.discovery.patterns = _as_str_list(discovery_data.get("patterns"))
        if "exclude_dirs" in discovery_data:
            config.discovery.exclude_dirs = _as_str_list(discovery_data.get("exclude_dirs"))
        exclude_hidden = _as_bool(discovery_data.get("exclude_hidden"))
        if exclude_hidden is not None:
            config.discovery.exclude_hidden = exclude_hidden

    global_data = _as_dict(data.get("global"))
    if global_data:
        config.global_.root = _as_str(global_data.get("root")) or config.global_.root
        if "folders" in global_data:
            config.global_.folders = _as_str_list(global_data.get("folders"))
        config.global_.registry = _as_str(global_data.get("registry")) or config.global_.registry
        config.global_.suffix = _as_str(global_data.get("suffix")) or config.global_.suffix

    commands_data = _as_dict(data.get("commands"))
    if commands_data:
        config.commands.local = _as_str(commands_data.get("local")) or config.commands.local
        config.commands.global_ = _as_str(commands_data.get("global")) or config.commands.global_

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


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


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CommandsConfig",
    "ConfigError",
    "CtxSyncConfig",
    "DiscoveryConfig",
    "GlobalConfig",
    "load_config",
]
