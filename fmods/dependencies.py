"""Resolving the full set of dependencies of a mod and the changes it implies."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from fmods.factorio_api import GAME_CONTENT_MODS, ApiError
from fmods.instance import Instance
from fmods.mod_info import Dependency, DependencyType, ModInfo, Version

if TYPE_CHECKING:
    from fmods.factorio_api import FactorioApi


def is_mod_game_content(mod_id: str) -> bool:
    """Tell whether a mod id names content shipped with the game itself."""
    return mod_id in GAME_CONTENT_MODS


class DependencyError(Exception):
    """The dependencies of a mod could not be resolved."""


class ModNotFoundError(DependencyError):
    """A required mod could not be fetched from the mod portal."""

    def __init__(self, mod_id: str, reason: Exception) -> None:
        super().__init__(f'The mod "{mod_id}" not found (reason: {reason})')
        self.mod_id = mod_id
        self.reason = reason


class NoSuitableReleaseError(DependencyError):
    """No release of a required mod fits the request."""

    def __init__(self, mod_id: str) -> None:
        super().__init__(f'Failed to select release for "{mod_id}" ')
        self.mod_id = mod_id


@dataclass
class _Entry:
    version: Version | None
    dependency_type: DependencyType
    usages_count: int


class _Resolver:
    def __init__(self, api: FactorioApi, instance: Instance) -> None:
        self.api = api
        self.instance = instance
        self.pending: list[Dependency] = []
        self.entries: dict[str, _Entry] = {}

    def run(self) -> list[Dependency]:
        while self.pending:
            batch, self.pending = self.pending, []
            for dependency in batch:
                self.process(dependency)
        return [
            Dependency(mod_id, entry.version, entry.dependency_type)
            for mod_id, entry in self.entries.items()
            if entry.usages_count > 0
        ]

    def process(self, dependency: Dependency) -> None:
        if self.is_satisfied(dependency):
            return

        if dependency.dependency_type is not DependencyType.REQUIRE or is_mod_game_content(
            dependency.mod_id
        ):
            self.add(dependency, None)
            return

        try:
            mod = self.api.get_mod(dependency.mod_id)
        except ApiError as err:
            raise ModNotFoundError(dependency.mod_id, err) from err

        if dependency.version is not None:
            release = next(
                (r for r in mod.releases if r.version == dependency.version), None
            )
        else:
            release = mod.releases[-1] if mod.releases else None
        if release is None:
            raise NoSuitableReleaseError(dependency.mod_id)

        self.pending.extend(replace(dep) for dep in release.info_json.dependencies)
        self.add(replace(dependency, version=release.version), mod)

    def is_satisfied(self, dependency: Dependency) -> bool:
        installed = self.instance.find_mod(dependency.mod_id)
        if installed is not None and (
            dependency.version is None or installed.version >= dependency.version
        ):
            return True

        entry = self.entries.get(dependency.mod_id)
        if entry is None:
            return False
        if dependency.dependency_type is not DependencyType.REQUIRE:
            return True

        if dependency.version is None:
            satisfied = True
        else:
            satisfied = entry.version is not None and entry.version >= dependency.version
        if satisfied:
            entry.usages_count += 1
        return satisfied

    def add(self, dependency: Dependency, mod: ModInfo | None) -> None:
        entry = self.entries.get(dependency.mod_id)
        if entry is None:
            self.entries[dependency.mod_id] = _Entry(
                dependency.version, dependency.dependency_type, 1
            )
            return

        entry.usages_count += 1
        released: list[Dependency] = []
        if (
            entry.version is not None
            and dependency.version is not None
            and dependency.version > entry.version
        ):
            if mod is not None:
                old = next((r for r in mod.releases if r.version == entry.version), None)
                if old is not None:
                    released = list(old.info_json.dependencies)
            entry.version = dependency.version

        for old_dependency in released:
            self.remove_usage(old_dependency)

    def remove_usage(self, dependency: Dependency) -> None:
        entry = self.entries.get(dependency.mod_id)
        if entry is not None:
            entry.usages_count -= 1
        else:
            self.entries[dependency.mod_id] = _Entry(
                dependency.version, dependency.dependency_type, -1
            )


def process_dependencies(
    api: FactorioApi, instance: Instance, mod_id: str, version: Version
) -> list[Dependency]:
    """Resolve everything installing ``mod_id`` at ``version`` needs or excludes."""
    resolver = _Resolver(api, instance)
    resolver.pending.append(Dependency(mod_id, version, DependencyType.REQUIRE))
    return resolver.run()


@dataclass(frozen=True)
class InstallChange:
    """A mod to install."""

    mod_id: str
    version: Version


@dataclass(frozen=True)
class UpdateChange:
    """An installed mod to replace with a newer release."""

    mod_id: str
    old_version: Version
    new_version: Version


@dataclass
class Changes:
    """What has to happen to the installed mods to satisfy a set of dependencies."""

    install: list[InstallChange] = field(default_factory=list)
    update: list[UpdateChange] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)

    @classmethod
    def compute(cls, instance: Instance, dependencies: list[Dependency]) -> Changes:
        """Compare resolved dependencies with the mods installed in ``instance``."""
        changes = cls()
        for dependency in dependencies:
            installed = instance.find_mod(dependency.mod_id)
            if dependency.dependency_type is DependencyType.CONFLICT:
                if installed is not None:
                    changes.conflicts.append(dependency.mod_id)
            elif dependency.dependency_type is DependencyType.REQUIRE:
                if is_mod_game_content(dependency.mod_id):
                    continue
                if dependency.version is None:
                    raise ValueError(
                        f"required mod {dependency.mod_id!r} has no resolved version"
                    )
                if installed is None:
                    changes.install.append(InstallChange(dependency.mod_id, dependency.version))
                elif dependency.version > installed.version:
                    changes.update.append(
                        UpdateChange(dependency.mod_id, installed.version, dependency.version)
                    )
        return changes