"""Tests for ctxsync.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from ctxsync.config import ConfigError, CtxSyncConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, CtxSyncConfig)
    assert config.root == tmp_path.resolve()
    assert config.local_registry_path == tmp_path.resolve() / ".ctx" / ".local-context-registry.yml"
    assert config.global_registry_path == tmp_path.resolve() / ".ctx" / ".global-context-registry.yml"
    assert config.discovery.patterns == ["**/ctx.yml", "**/*.ctx.yml"]
    assert config.discovery.exclude_dirs == ["node_modules", "dist", "build"]
    assert config.discovery.exclude_hidden is True
    assert config.global_.folders == ["architecture", "rules"]
    assert config.commands.local == "ctxsync sync local"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".ctxsync.yml"
    config_file.write_text(
        """
output_dir: .registry
local_registry: contexts.yml
discovery:
  patterns: ["**/*.ctx.yml"]
  exclude_dirs: []
  exclude_hidden: "no"
global:
  root: docs/ctx
  folders:
    - guides
  registry: index.yml
  suffix: .markdown
commands:
  local: make ctx-local
  global: make ctx-global
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.local_registry_path == tmp_path.resolve() / ".registry" / "contexts.yml"
    assert config.discovery.patterns == ["**/*.ctx.yml"]
    assert config.discovery.exclude_dirs == []
    assert config.discovery.exclude_hidden is False
    assert config.global_root == tmp_path.resolve() / "docs" / "ctx"
    assert config.global_registry_path == tmp_path.resolve() / "docs" / "ctx" / "index.yml"
    assert config.global_.folders == ["guides"]
    assert config.global_.suffix == ".markdown"
    assert config.commands.local == "make ctx-local"
    assert config.commands.global_ == "make ctx-global"


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".ctxsync.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).output_dir == ".ctx"


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".ctxsync.yml").write_text("global: [broken\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".ctxsync.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
