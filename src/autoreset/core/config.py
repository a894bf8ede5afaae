"""Configuration management for autoreset (autoreset.toml parsing + defaults)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib  # type: ignore[no-redef]
    except ImportError:
        tomllib = None  # type: ignore[assignment]


CONFIG_FILE_NAME = "autoreset.toml"


@dataclass
class ExpandConfig:
    markers: list[str] = field(default_factory=lambda: ["auto_resettable"])
    struct_decorators: list[str] = field(
        default_factory=lambda: [
            "dataclass",
            "define",
            "frozen",
            "mutable",
            "s",
            "attrs",
        ]
    )
    enum_bases: list[str] = field(
        default_factory=lambda: ["Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"]
    )
    frozen_decorators: list[str] = field(default_factory=lambda: ["frozen"])
    frozen_bases: list[str] = field(default_factory=lambda: ["NamedTuple"])
    backup_before_write: bool = True


@dataclass
class AutoResetConfig:
    """Complete autoreset configuration."""

    exclude: list[str] = field(
        default_factory=lambda: [
            "venv/",
            ".venv/",
            "__pycache__/",
            ".autoreset/",
            ".git/",
        ]
    )
    expand: ExpandConfig = field(default_factory=ExpandConfig)


def load_config(project_path: Path | None = None) -> AutoResetConfig:
    """Load configuration from autoreset.toml if present, otherwise return defaults."""
    config = AutoResetConfig()

    if project_path is None:
        project_path = Path.cwd()

    config_file = project_path / CONFIG_FILE_NAME
    if not config_file.exists():
        return config

    if tomllib is None:
        return config

    with open(config_file, "rb") as f:
        data = tomllib.load(f)

    if "general" in data:
        gen = data["general"]
        if "exclude" in gen:
            config.exclude = gen["exclude"]

    if "expand" in data:
        ex = data["expand"]
        for attr in (
            "markers",
            "struct_decorators",
            "enum_bases",
            "frozen_decorators",
            "frozen_bases",
            "backup_before_write",
        ):
            if attr in ex:
                setattr(config.expand, attr, ex[attr])

    return config


def get_autoreset_dir(project_path: Path | None = None) -> Path:
    """Get or create the .autoreset directory."""
    if project_path is None:
        project_path = Path.cwd()
    autoreset_dir = project_path / ".autoreset"
    autoreset_dir.mkdir(exist_ok=True)
    return autoreset_dir
