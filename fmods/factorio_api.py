"""Access to the mod portal, limited to releases that fit an instance."""

from __future__ import annotations

from urllib.parse import quote

import requests

from fmods.instance import Instance
from fmods.mod_info import DependencyType, ModInfo, ModRelease

MODS_API_URL = "https://mods.factorio.com/api/mods/{}/full"

GAME_CONTENT_MODS = frozenset({"base", "quality", "elevated-rails", "space-age"})


class ApiError(Exception):
    """The mod portal could not be queried or gave an unusable answer."""


class FactorioApi:
    """Fetches mod descriptions from the mod portal for one instance."""

    def __init__(self, instance: Instance, session: requests.Session | None = None) -> None:
        self.instance = instance
        self._session = session if session is not None else requests.Session()

    def get_mod(self, name: str) -> ModInfo:
        """Return the mod with only the releases this instance can run, oldest first."""
        url = MODS_API_URL.format(quote(name, safe="/"))
        try:
            response = self._session.get(url)
            response.raise_for_status()
            mod = ModInfo.from_json(response.json())
        except (requests.RequestException, ValueError) as err:
            raise ApiError(str(err)) from err

        mod.releases = sorted(
            (release for release in mod.releases if self.is_release_compatible(release)),
            key=lambda release: release.version,
        )
        return mod

    def is_release_compatible(self, release: ModRelease) -> bool:
        """Tell whether a release targets this game version and its installed content."""
        info = release.info_json
        if info.factorio_version != self.instance.version:
            return False

        for dependency in info.dependencies:
            if (
                dependency.dependency_type is not DependencyType.REQUIRE
                or dependency.mod_id not in GAME_CONTENT_MODS
            ):
                continue
            installed = self.instance.game_content_versions.get(dependency.mod_id)
            if installed is None:
                return False
            if dependency.version is not None and dependency.version > installed:
                return False

        return True