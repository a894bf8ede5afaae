"""Tests for config loading."""

from __future__ import annotations

from pathlib import Path

from autoreset.core.config import AutoResetConfig, get_autoreset_dir, load_config


class TestLoadConfig:
    def test_defaults_when_no_config_file(self, tmp_path: Path):
        """Without an autoreset.toml, load_config should return defaults."""
        config = load_config(tmp_path)

        assert isinstance(config, AutoResetConfig)
        assert config.expand.markers == ["auto_resettable"]
        assert "dataclass" in config.expand.struct_decorators
        assert "Enum" in config.expand.enum_bases
        assert config.expand.frozen_decorators == ["frozen"]
        assert config.expand.frozen_bases == ["NamedTuple"]
        assert config.expand.backup_before_write is True
        assert ".git/" in config.exclude

    def test_loads_expand_section(self, tmp_path: Path):
        toml_content = """\
[expand]
markers = ["auto_resettable", "resettable"]
enum_bases = ["Enum", "Choices"]
frozen_bases = ["NamedTuple", "Struct"]
backup_before_write = false
"""
        (tmp_path / "autoreset.toml").write_text(toml_content)
        config = load_config(tmp_path)

        assert config.expand.markers == ["auto_resettable", "resettable"]
        assert config.expand.enum_bases == ["Enum", "Choices"]
        assert config.expand.frozen_bases == ["NamedTuple", "Struct"]
        assert config.expand.backup_before_write is False
        # Untouched keys keep their defaults.
        assert "dataclass" in config.expand.struct_decorators

    def test_loads_general_section(self, tmp_path: Path):
        (tmp_path / "autoreset.toml").write_text('[general]\nexclude = ["build/"]\n')
        config = load_config(tmp_path)

        assert config.exclude == ["build/"]

    def test_get_autoreset_dir_creates_directory(self, tmp_path: Path):
        directory = get_autoreset_dir(tmp_path)

        assert directory == tmp_path / ".autoreset"
        assert directory.is_dir()
