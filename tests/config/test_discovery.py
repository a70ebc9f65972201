"""Tests for config discovery and loading."""

from pathlib import Path

import click
import pytest

from orgctl.config.discovery import CONFIG_ENV_VAR, find_config, load_config, read_toml


class TestFindConfig:
    def test_in_start_dir(self, tmp_path: Path) -> None:
        (tmp_path / "orgctl.toml").write_text("")
        assert find_config(tmp_path) == (tmp_path / "orgctl.toml").resolve()

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "orgctl.toml").write_text("")
        deep = tmp_path / "x" / "y" / "z"
        deep.mkdir(parents=True)
        assert find_config(deep) == (tmp_path / "orgctl.toml").resolve()

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        cfg = tmp_path / "elsewhere.toml"
        cfg.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(cfg))
        assert find_config(tmp_path / "anywhere") == cfg

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "orgctl.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = load_config(cwd=tmp_path / "empty")
        assert config.hierarchy.discard_orphans is True

    def test_reads_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "orgctl.toml"
        path.write_text('[hierarchy]\nmax_name_length = 64\n[mcp]\nenabled = false\n')
        config = load_config(path)
        assert config.hierarchy.max_name_length == 64
        assert config.mcp.enabled is False
        assert config.database.path == ".orgctl/orgctl.db"


class TestReadToml:
    def test_tables(self, tmp_path: Path) -> None:
        path = tmp_path / "org.toml"
        path.write_text('[database]\njournal_mode = "DELETE"\n')
        assert read_toml(path) == {"database": {"journal_mode": "DELETE"}}

    def test_malformed_names_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.toml"
        path.write_text("key = \n")
        with pytest.raises(click.ClickException, match="broken.toml"):
            read_toml(path)
