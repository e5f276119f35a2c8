import pytest

from fmods.dependencies import (
    Changes,
    InstallChange,
    ModNotFoundError,
    NoSuitableReleaseError,
    UpdateChange,
    is_mod_game_content,
    process_dependencies,
)
from fmods.factorio_api import ApiError
from fmods.instance import InstalledMod, Instance
from fmods.mod_info import Dependency, DependencyType, ModInfo, Version


class FakeApi:
    def __init__(self, mods):
        self.mods = mods
        self.requested = []

    def get_mod(self, name):
        self.requested.append(name)
        if name not in self.mods:
            raise ApiError("404 Not Found")
        releases = [
            {
                "version": version,
                "info_json": {"dependencies": deps, "factorio_version": "2.0"},
            }
            for version, deps in self.mods[name]
        ]
        return ModInfo.from_json({"releases": releases})


def _instance(tmp_path, mods=()):
    return Instance(
        path=tmp_path,
        version=Version(2, 0, 0),
        game_content_versions={"base": Version(2, 0, 0)},
        mods=list(mods),
        mods_path=tmp_path,
    )


def _by_id(dependencies):
    return {dep.mod_id: (dep.version, dep.dependency_type) for dep in dependencies}


@pytest.mark.parametrize(
    "mod_id, expected",
    [
        ("base", True),
        ("quality", True),
        ("elevated-rails", True),
        ("space-age", True),
        ("space-exploration", False),
        ("", False),
    ],
)
def test_is_mod_game_content(mod_id, expected):
    assert is_mod_game_content(mod_id) is expected


def test_resolves_chain_with_exact_versions(tmp_path):
    api = FakeApi(
        {
            "a": [("1.0.0", ["b >= 1.0.0", "base >= 2.0.0"])],
            "b": [("1.0.0", []), ("1.1.0", [])],
        }
    )
    result = _by_id(process_dependencies(api, _instance(tmp_path), "a", Version(1, 0, 0)))
    assert result == {
        "a": (Version(1, 0, 0), DependencyType.REQUIRE),
        "b": (Version(1, 0, 0), DependencyType.REQUIRE),
        "base": (Version(2, 0, 0), DependencyType.REQUIRE),
    }
    assert "base" not in api.requested


def test_unversioned_requirement_takes_latest_release(tmp_path):
    api = FakeApi({"a": [("1.0.0", ["c"])], "c": [("1.0.0", []), ("2.0.0", [])]})
    result = _by_id(process_dependencies(api, _instance(tmp_path), "a", Version(1, 0, 0)))
    assert result["c"] == (Version(2, 0, 0), DependencyType.REQUIRE)


def test_conflicts_and_optionals_are_kept(tmp_path):
    api = FakeApi({"a": [("1.0.0", ["! bad", "? extra >= 1.0.0"])]})
    result = _by_id(process_dependencies(api, _instance(tmp_path), "a", Version(1, 0, 0)))
    assert result["bad"] == (None, DependencyType.CONFLICT)
    assert result["extra"] == (Version(1, 0, 0), DependencyType.OPTIONAL)
    assert api.requested == ["a"]


def test_installed_mod_satisfies_requirement(tmp_path):
    api = FakeApi({"a": [("1.0.0", ["b >= 1.0.0"])]})
    instance = _instance(tmp_path, [InstalledMod("b", Version(1, 5, 0))])
    result = _by_id(process_dependencies(api, instance, "a", Version(1, 0, 0)))
    assert set(result) == {"a"}
    assert "b" not in api.requested


def test_upgraded_dependency_drops_old_release_dependencies(tmp_path):
    api = FakeApi(
        {
            "a": [("1.0.0", ["b >= 1.0.0", "c"])],
            "b": [("1.0.0", ["d"]), ("1.1.0", [])],
            "c": [("1.0.0", ["b >= 1.1.0"])],
            "d": [("1.0.0", [])],
        }
    )
    result = _by_id(process_dependencies(api, _instance(tmp_path), "a", Version(1, 0, 0)))
    assert result["b"] == (Version(1, 1, 0), DependencyType.REQUIRE)
    assert "d" not in result
    assert set(result) == {"a", "b", "c"}


def test_missing_mod_raises(tmp_path):
    api = FakeApi({"a": [("1.0.0", ["missing"])]})
    with pytest.raises(ModNotFoundError) as info:
        process_dependencies(api, _instance(tmp_path), "a", Version(1, 0, 0))
    assert info.value.mod_id == "missing"
    assert str(info.value).startswith('The mod "missing" not found (reason: ')


def test_missing_release_raises(tmp_path):
    api = FakeApi({"a": [("1.0.0", [])]})
    with pytest.raises(NoSuitableReleaseError) as info:
        process_dependencies(api, _instance(tmp_path), "a", Version(3, 0, 0))
    assert str(info.value) == 'Failed to select release for "a" '


def test_no_releases_raises(tmp_path):
    api = FakeApi({"a": [("1.0.0", ["empty"])], "empty": []})
    with pytest.raises(NoSuitableReleaseError):
        process_dependencies(api, _instance(tmp_path), "a", Version(1, 0, 0))


def test_changes_compute(tmp_path):
    instance = _instance(
        tmp_path,
        [
            InstalledMod("x", Version(1, 0, 0)),
            InstalledMod("y", Version(1, 0, 0)),
            InstalledMod("z", Version(1, 0, 0)),
        ],
    )
    dependencies = [
        Dependency("x", Version(2, 0, 0), DependencyType.REQUIRE),
        Dependency("y", Version(1, 0, 0), DependencyType.REQUIRE),
        Dependency("fresh", Version(1, 0, 0), DependencyType.REQUIRE),
        Dependency("base", Version(2, 0, 0), DependencyType.REQUIRE),
        Dependency("z", None, DependencyType.CONFLICT),
        Dependency("absent", None, DependencyType.CONFLICT),
        Dependency("opt", Version(1, 0, 0), DependencyType.OPTIONAL),
    ]
    changes = Changes.compute(instance, dependencies)
    assert changes.install == [InstallChange("fresh", Version(1, 0, 0))]
    assert changes.update == [UpdateChange("x", Version(1, 0, 0), Version(2, 0, 0))]
    assert changes.conflicts == ["z"]


def test_changes_compute_requires_version(tmp_path):
    with pytest.raises(ValueError):
        Changes.compute(_instance(tmp_path), [Dependency("x", None, DependencyType.REQUIRE)])


def test_resolution_feeds_changes(tmp_path):
    api = FakeApi({"a": [("1.0.0", ["b >= 2.0.0"])], "b": [("2.0.0", [])]})
    instance = _instance(tmp_path, [InstalledMod("b", Version(1, 0, 0))])
    dependencies = process_dependencies(api, instance, "a", Version(1, 0, 0))
    changes = Changes.compute(instance, dependencies)
    assert changes.install == [InstallChange("a", Version(1, 0, 0))]
    assert changes.update == [UpdateChange("b", Version(1, 0, 0), Version(2, 0, 0))]
    assert changes.conflicts == []