"""A game installation and the mods installed for it."""

from __future__ import annotations

import json
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from fmods.mod_info import Version


class InstanceError(Exception):
    """An instance could not be opened."""


class InstanceNotExistError(InstanceError):
    """The instance directory is missing."""

    def __init__(self) -> None:
        super().__init__("The instance directory doesn't exist")


class BrokenInstanceError(InstanceError):
    """The instance directory lacks the game data."""

    def __init__(self) -> None:
        super().__init__("The instance is broken")


@dataclass(frozen=True)
class InstalledMod:
    """A mod found on disk, as described by its info.json."""

    name: str
    version: Version


def default_mods_path() -> Path:
    """Return the directory the game loads user mods from."""
    return Path(user_config_dir(appauthor=False, roaming=True)) / "Factorio" / "mods"


def _installed_mod_from_json(data: Any) -> InstalledMod:
    if not isinstance(data, dict):
        raise ValueError("info.json must hold an object")
    name = data.get("name")
    version = data.get("version")
    if not isinstance(name, str) or not isinstance(version, str):
        raise ValueError("info.json needs string `name` and `version`")
    return InstalledMod(name, Version.parse(version))


def read_mods(path: Path) -> list[InstalledMod]:
    """List the unpacked mods in a directory; raise OSError if it cannot be read."""
    mods = []
    for entry in sorted(Path(path).iterdir()):
        if not entry.is_dir():
            continue
        try:
            with (entry / "info.json").open(encoding="utf-8") as handle:
                mods.append(_installed_mod_from_json(json.load(handle)))
        except (OSError, ValueError):
            continue
    return mods


@dataclass
class Instance:
    """An opened game installation."""

    path: Path
    version: Version
    game_content_versions: dict[str, Version] = field(default_factory=dict)
    mods: list[InstalledMod] = field(default_factory=list)
    mods_path: Path = field(default_factory=default_mods_path)

    @classmethod
    def open(cls, path: Path, mods_path: Path | None = None) -> Instance:
        """Open the installation at ``path`` and read its installed mods."""
        path = Path(path)
        if not path.is_dir():
            raise InstanceNotExistError()

        try:
            game_content = read_mods(path / "data")
        except OSError:
            raise BrokenInstanceError() from None
        game_content_versions = {mod.name: mod.version for mod in game_content}

        base = game_content_versions.get("base")
        if base is None:
            raise BrokenInstanceError()
        version = Version(base.major, base.minor, 0)

        mods_path = Path(mods_path) if mods_path is not None else default_mods_path()
        try:
            mods = read_mods(mods_path)
        except OSError:
            try:
                mods_path.mkdir()
            except OSError:
                pass
            mods = []

        return cls(path, version, game_content_versions, mods, mods_path)

    def find_mod(self, name: str) -> InstalledMod | None:
        """Return the installed mod called ``name``, if any."""
        return next((mod for mod in self.mods if mod.name == name), None)

    def remove_mod(self, mod_name: str) -> None:
        """Delete the directory of an installed mod; unknown names are ignored."""
        mod = self.find_mod(mod_name)
        if mod is None:
            return
        shutil.rmtree(self.mods_path / f"{mod.name}_{mod.version}", ignore_errors=True)
        shutil.rmtree(self.mods_path / mod.name, ignore_errors=True)