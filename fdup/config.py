from __future__ import annotations
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError
import yaml

DIR_NAME = ".fdup"
CONFIG_FILE = "config.yaml"
DB_FILE = "fdup.db"


class ConfigError(Exception):
    pass


class NotInitializedError(ConfigError):
    pass


class PatternConfig(BaseModel):
    name: str
    regex: str


class PatternTestCase(BaseModel):
    input: str
    expected: Optional[str] = None  # None means "must not match"


class FdupConfig(BaseModel):
    patterns: List[PatternConfig] = Field(default_factory=list)
    ignore: List[str] = Field(default_factory=list)
    test: List[PatternTestCase] = Field(default_factory=list)

    def pattern_regexes(self) -> List[str]:
        return [p.regex for p in self.patterns]


def default_config() -> FdupConfig:
    return FdupConfig(
        patterns=[
            PatternConfig(name="standard", regex=r"([A-Z]{2,5}-\d{3,5})"),
            PatternConfig(name="no_hyphen", regex=r"([A-Z]{2,5})(\d{3,5})"),
        ],
        ignore=["node_modules/", ".git/", "*.tmp", "*.log", ".DS_Store", ".fdup/"],
        test=[
            PatternTestCase(input="PRJ-001_final.zip", expected="PRJ001"),
            PatternTestCase(input="doc123.pdf", expected="DOC123"),
            PatternTestCase(input="random_file.txt", expected=None),
        ],
    )


def find_config_dir(start: Optional[Path] = None) -> Path:
    """Return the nearest ``.fdup`` directory at or above ``start`` (default: cwd)."""
    current = Path(start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        config_dir = candidate / DIR_NAME
        if config_dir.is_dir():
            return config_dir
    raise NotInitializedError("not initialized. Run 'fdup init' first")


def config_path(config_dir: Path) -> Path:
    return Path(config_dir) / CONFIG_FILE


def db_path(config_dir: Path) -> Path:
    return Path(config_dir) / DB_FILE


def load_config(config_dir: Path) -> FdupConfig:
    path = config_path(config_dir)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"invalid config in {path}: expected a mapping")
    try:
        return FdupConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid config in {path}: {e}") from e


def save_config(config_dir: Path, cfg: FdupConfig) -> None:
    text = yaml.safe_dump(cfg.model_dump(), sort_keys=False, allow_unicode=True)
    config_path(config_dir).write_text(text, encoding="utf-8")
