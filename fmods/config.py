"""Persistent settings: known instances and the default one."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w
from platformdirs import user_config_dir


def default_config_path() -> Path:
    """Return the location of the configuration file."""
    return Path(user_config_dir("fmods", appauthor=False, roaming=True)) / "config.toml"


def _from_dict(data: dict[str, Any]) -> Config:
    ask = data["ask"]
    if not isinstance(ask, bool):
        raise ValueError("`ask` must be a boolean")

    default_instance = data.get("default_instance")
    if default_instance is not None and not isinstance(default_instance, str):
        raise ValueError("`default_instance` must be a string")

    instances = data["instances"]
    if not isinstance(instances, dict) or not all(
        isinstance(value, str) for value in instances.values()
    ):
        raise ValueError("`instances` must map names to paths")

    return Config(
        ask=ask,
        default_instance=default_instance,
        instances={name: Path(value) for name, value in instances.items()},
    )


@dataclass
class Config:
    """User settings of the mod manager."""

    ask: bool = True
    default_instance: str | None = None
    instances: dict[str, Path] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        """Read the configuration, falling back to defaults if it is missing or invalid."""
        path = Path(path) if path is not None else default_config_path()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return cls()
        try:
            return _from_dict(tomllib.loads(text))
        except (tomllib.TOMLDecodeError, KeyError, ValueError):
            return cls()

    def save(self, path: Path | None = None) -> None:
        """Write the configuration, replacing the previous file."""
        path = Path(path) if path is not None else default_config_path()
        data: dict[str, Any] = {"ask": self.ask}
        if self.default_instance is not None:
            data["default_instance"] = self.default_instance
        data["instances"] = {name: str(value) for name, value in self.instances.items()}
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(tomli_w.dumps(data), encoding="utf-8")