# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.13
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_config.py

import pytest

from pmtool.config.manager import USER_CFG, load_merged_user_config
from pmtool.system.exceptions import ConfigError


def test_defaults_without_any_config_file(isolated_config):
    config = load_merged_user_config()

    assert config.catalog_path == isolated_config / ".git_projects.json"
    assert config.remote_name == "origin"
    assert config.primary_branch == "master"
    assert config.grep_batch_size == 256
    assert config.local_log is None


def test_user_config_is_read(isolated_config):
    cfg_dir = isolated_config / ".config" / "pmtool"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / USER_CFG).write_text("primary_branch: main\ncatalog_path: ~/repos.json\n")

    config = load_merged_user_config()

    assert config.primary_branch == "main"
    assert config.catalog_path == isolated_config / "repos.json"


def test_explicit_override_wins(isolated_config, tmp_path, monkeypatch):
    cfg_dir = isolated_config / ".config" / "pmtool"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / USER_CFG).write_text("primary_branch: main\nremote_name: upstream\n")
    override = tmp_path / "override"
    override.mkdir()
    (override / USER_CFG).write_text("primary_branch: trunk\n")
    monkeypatch.setenv("PMTOOL_CONFIG_HOME", str(override))

    config = load_merged_user_config()

    assert config.primary_branch == "trunk"
    assert config.remote_name == "upstream"


def test_xdg_config_home(isolated_config):
    xdg_dir = isolated_config / ".xdg" / "pmtool"
    xdg_dir.mkdir(parents=True)
    (xdg_dir / USER_CFG).write_text("grep_batch_size: 16\n")

    assert load_merged_user_config().grep_batch_size == 16


@pytest.mark.parametrize("content", [
    "unknown_key: 1\n",
    "grep_batch_size: 0\n",
    "primary_branch: ''\n",
])
def test_invalid_values_rejected(isolated_config, content):
    cfg_dir = isolated_config / ".config" / "pmtool"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / USER_CFG).write_text(content)

    with pytest.raises(ConfigError):
        load_merged_user_config()


def test_malformed_yaml_rejected(isolated_config):
    cfg_dir = isolated_config / ".config" / "pmtool"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / USER_CFG).write_text("primary_branch: [unclosed\n")

    with pytest.raises(ConfigError, match="Failed to load config"):
        load_merged_user_config()


def test_non_mapping_rejected(isolated_config):
    cfg_dir = isolated_config / ".config" / "pmtool"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / USER_CFG).write_text("- a\n- b\n")

    with pytest.raises(ConfigError, match="must be a mapping"):
        load_merged_user_config()



def test_local_log_is_expanded(isolated_config):
    cfg_dir = isolated_config / ".config" / "pmtool"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / USER_CFG).write_text("local_log: ~/logs\n")

    assert load_merged_user_config().local_log == isolated_config / "logs"
