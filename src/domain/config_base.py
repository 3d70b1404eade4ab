"""TOML loading shared by every file-backed reference table config."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar
import tomllib


@dataclass(frozen=True)
class BaseConfig(ABC):
    """Name, description and source file of a loaded config."""

    name: str
    description: str | None
    file_path: Path | None

    @abstractmethod
    def as_config_json(self) -> dict[str, Any]:
        """Plain-data view of the config, stable across load paths."""


T = TypeVar("T", bound=BaseConfig)


def load_config_file(
    file_path: Path,
    parser: Callable[[dict[str, Any], Path], T],
) -> T:
    if not file_path.is_file():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return parser(raw, file_path)


def load_configs(
    config_dir: Path,
    parser: Callable[[dict[str, Any], Path], T],
    *,
    duplicate_name_label: str = "config",
) -> list[T]:
    """Parse every ``*.toml`` in ``config_dir``, sorted by file name.

    Raises if the directory is missing, holds no TOML files, or two files
    declare the same ``[system].name``.
    """
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    configs = [load_config_file(file_path, parser) for file_path in config_files]

    counts = Counter(config.name for config in configs)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        raise ValueError(
            f"Duplicate {duplicate_name_label} names in {config_dir}: {', '.join(duplicates)}"
        )

    return configs


__all__ = ["BaseConfig", "load_config_file", "load_configs"]
