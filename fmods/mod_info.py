"""Mod versions, dependency strings and mod portal release data."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

_INT_RE = re.compile(r"[+-]?[0-9]+")
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def _parse_int(text: str) -> int:
    if not text:
        raise ValueError("cannot parse integer from empty string")
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid digit found in string: {text!r}")
    value = int(text)
    if not _I64_MIN <= value <= _I64_MAX:
        raise ValueError(f"number too large to fit in target type: {text!r}")
    return value


@dataclass(frozen=True, order=True)
class Version:
    """A three-part version number, ordered by major, minor and patch."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse ``"major.minor.patch"``; missing parts default to zero."""
        parts = text.split(".")
        numbers = [_parse_int(part) for part in parts[:3]]
        numbers.extend([0] * (3 - len(numbers)))
        return cls(*numbers)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class DependencyType(Enum):
    """How a mod relates to one of its dependencies."""

    CONFLICT = "Conflict"
    REQUIRE = "Require"
    OPTIONAL = "Optional"

    def __str__(self) -> str:
        return self.value


@dataclass
class Dependency:
    """A dependency of a mod, optionally with a minimal version."""

    mod_id: str
    version: Version | None = None
    dependency_type: DependencyType = DependencyType.REQUIRE

    @classmethod
    def parse(cls, text: str) -> Dependency:
        """Parse a dependency string such as ``"? some-mod >= 1.2.0"``."""
        clear = text.replace("(", "").replace(")", "").replace("~", "")

        if clear.startswith("!"):
            dependency_type = DependencyType.CONFLICT
        elif clear.startswith("?"):
            dependency_type = DependencyType.OPTIONAL
        else:
            dependency_type = DependencyType.REQUIRE

        clear = clear.replace("!", "").replace("?", "")

        version = None
        parts = clear.split(">=")
        if len(parts) == 2:
            mod_id = parts[0]
            version = Version.parse(parts[1].strip())
        else:
            mod_id = clear

        return cls(mod_id.strip(), version, dependency_type)


def _field(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _string(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string for {what}, got {type(value).__name__}")
    return value


def _list(value: Any, what: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"expected a list for {what}, got {type(value).__name__}")
    return value


@dataclass
class ModReleaseInfoJson:
    """The part of a release's info.json that matters for installing it."""

    dependencies: list[Dependency]
    factorio_version: Version

    @classmethod
    def from_json(cls, data: Any) -> ModReleaseInfoJson:
        """Build from decoded JSON; raise ValueError if it is malformed."""
        dependencies = [
            Dependency.parse(_string(item, "dependency"))
            for item in _list(_field(data, "dependencies"), "dependencies")
        ]
        factorio_version = Version.parse(
            _string(_field(data, "factorio_version"), "factorio_version")
        )
        return cls(dependencies, factorio_version)


@dataclass
class ModRelease:
    """One published release of a mod."""

    version: Version
    info_json: ModReleaseInfoJson

    @classmethod
    def from_json(cls, data: Any) -> ModRelease:
        """Build from decoded JSON; raise ValueError if it is malformed."""
        version = Version.parse(_string(_field(data, "version"), "version"))
        info_json = ModReleaseInfoJson.from_json(_field(data, "info_json"))
        return cls(version, info_json)


@dataclass
class ModInfo:
    """A mod as described by the mod portal."""

    releases: list[ModRelease] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> ModInfo:
        """Build from decoded JSON; raise ValueError if it is malformed."""
        releases = [
            ModRelease.from_json(item)
            for item in _list(_field(data, "releases"), "releases")
        ]
        return cls(releases)