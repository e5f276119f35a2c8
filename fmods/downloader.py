"""Fetching mod archives and unpacking them into the mods directory."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import requests

from fmods.instance import Instance
from fmods.mod_info import Version

STORAGE_URL = "https://mods-storage.re146.dev/{}/{}.zip"


class DownloadError(Exception):
    """A mod archive could not be fetched or unpacked."""


def extract_archive(data: bytes, destination: Path) -> None:
    """Unpack a zip archive held in memory into ``destination``."""
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            archive.extractall(Path(destination))
    except (zipfile.BadZipFile, OSError) as err:
        raise DownloadError(str(err)) from err


class Downloader:
    """Installs mod releases into an instance's mods directory."""

    def __init__(self, instance: Instance, session: requests.Session | None = None) -> None:
        self.path = instance.mods_path
        self._session = session if session is not None else requests.Session()

    def download(self, mod_id: str, version: Version) -> None:
        """Download one release of a mod and unpack it."""
        url = STORAGE_URL.format(mod_id, version)
        try:
            response = self._session.get(url)
            response.raise_for_status()
        except requests.RequestException as err:
            raise DownloadError(str(err)) from err
        extract_archive(response.content, self.path)