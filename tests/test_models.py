"""配置模型测试"""

import pytest

from packweave.exceptions import (
    ConfigValidationError,
    InclusionExclusionConflictError,
    InclusionsNotFoundError,
    InvalidPackFormatError,
    OverrideNotFoundError,
    ProjectNotAddedError,
)
from packweave.models import (
    BranchConfig,
    Exclude,
    File,
    FileHashes,
    Include,
    Loader,
    MainLoader,
    Modpack,
    MrpackDependencies,
    ProjectSettings,
)


class TestProjectSettings:
    def test_include_and_exclude_rejected(self):
        with pytest.raises(ConfigValidationError):
            ProjectSettings.from_dict({"include": ["a"], "exclude": ["b"]}, "sodium")

    def test_serialization(self):
        settings = ProjectSettings(
            version_overrides={"main": "abc"}, include_or_exclude=Exclude(["forge"])
        )
        data = settings.to_dict()

        assert data == {"version_overrides": {"main": "abc"}, "exclude": ["forge"]}
        assert ProjectSettings.from_dict(data) == settings

    def test_empty(self):
        assert ProjectSettings().to_dict() == {}
        assert ProjectSettings.from_dict(None) == ProjectSettings()


class TestModpackProjects:
    def test_add_and_remove(self):
        modpack = Modpack()
        modpack.add_projects(["sodium", "lithium"])
        modpack.remove_projects(["sodium", "unknown"])
        assert list(modpack.projects) == ["lithium"]

    def test_version_overrides(self):
        modpack = Modpack()
        modpack.add_projects(["sodium"])
        modpack.add_version_override("sodium", "main", "abc")
        modpack.add_version_override("sodium", "dev", "def")

        modpack.remove_version_override("sodium", "main")

        assert modpack.projects["sodium"].version_overrides == {"dev": "def"}
        with pytest.raises(OverrideNotFoundError):
            modpack.remove_version_override("sodium", "main")

        modpack.remove_all_version_overrides("sodium")
        assert modpack.projects["sodium"].version_overrides is None

    def test_untracked_project(self):
        with pytest.raises(ProjectNotAddedError):
            Modpack().add_version_override("sodium", "main", "abc")

    def test_inclusions_accumulate(self):
        modpack = Modpack()
        modpack.add_projects(["sodium"])
        modpack.add_project_inclusions("sodium", ["a"])
        modpack.add_project_inclusions("sodium", ["b", "c"])

        modpack.remove_project_inclusions("sodium", ["b"])

        assert modpack.projects["sodium"].include_or_exclude == Include(["a", "c"])

    def test_inclusion_conflicts_with_exclusion(self):
        modpack = Modpack()
        modpack.add_projects(["sodium"], include_or_exclude=Exclude(["forge"]))

        with pytest.raises(InclusionExclusionConflictError):
            modpack.add_project_inclusions("sodium", ["fabric"])
        assert modpack.projects["sodium"].include_or_exclude == Exclude(["forge"])

    def test_exclusion_conflicts_with_inclusion(self):
        modpack = Modpack()
        modpack.add_projects(["sodium"], include_or_exclude=Include(["fabric"]))

        with pytest.raises(InclusionExclusionConflictError):
            modpack.add_project_exclusions("sodium", ["forge"])

    def test_remove_all_lists(self):
        modpack = Modpack()
        modpack.add_projects(["sodium"], include_or_exclude=Exclude(["forge"]))

        with pytest.raises(InclusionsNotFoundError):
            modpack.remove_all_project_inclusions("sodium")
        modpack.remove_all_project_exclusions("sodium")

        assert modpack.projects["sodium"].include_or_exclude is None

    def test_unsupported_pack_format(self):
        with pytest.raises(InvalidPackFormatError):
            Modpack.from_dict({"pack_format": 2, "name": "x"})

    def test_round_trip(self, tmp_path):
        modpack = Modpack(name="Pack", branches=["main"], directory=tmp_path)
        modpack.add_projects(["sodium"], include_or_exclude=Include(["main"]))

        assert Modpack.from_dict(modpack.to_dict(), tmp_path) == modpack


class TestBranchConfig:
    def test_defaults(self):
        data = BranchConfig().to_dict()
        assert data == {
            "version": "1.0.0-fabric",
            "minecraft_version": "1.21.8",
            "acceptable_minecraft_versions": ["1.21.6", "1.21.7"],
            "mod_loader": "fabric",
            "loader_version": "0.17.2",
            "acceptable_loaders": ["minecraft", "vanilla"],
        }

    def test_round_trip_with_manual_files(self):
        config = BranchConfig(
            mod_loader=MainLoader.QUILT,
            acceptable_loaders=[Loader.FABRIC],
            manual_files=[
                File(
                    path="mods/x.jar",
                    hashes=FileHashes("a", "b"),
                    downloads=["https://example.com/x.jar"],
                    file_size=1,
                    project_name="X",
                )
            ],
        )
        assert BranchConfig.from_dict(config.to_dict()) == config

    def test_invalid_loader(self):
        with pytest.raises(ConfigValidationError):
            BranchConfig.from_dict(
                {"version": "1", "minecraft_version": "1.21.8", "mod_loader": "rift"}
            )


class TestMrpackDependencies:
    def test_main_loader_order(self):
        deps = MrpackDependencies(minecraft="1.21.1", quilt_loader="1", forge="2")
        assert deps.main_loader() == (MainLoader.FORGE, "2")

    def test_no_loader(self):
        assert MrpackDependencies(minecraft="1.21.1").main_loader() == (None, None)

    def test_for_loader(self):
        deps = MrpackDependencies.for_loader("1.21.1", MainLoader.FABRIC, "0.16")
        assert deps.fabric_loader == "0.16"
        assert deps.to_dict() == {"minecraft": "1.21.1", "fabric-loader": "0.16"}
