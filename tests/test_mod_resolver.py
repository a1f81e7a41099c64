"""单个项目解析测试"""

import pytest

from packweave.exceptions import (
    APINotFoundError,
    InvalidResponseError,
    ModpackProjectError,
    NoFilesError,
    UnsupportedProjectTypeError,
)
from packweave.models import BranchConfig, Include, ProjectSettings, SideSupport
from packweave.services import ResolveStatus, UseOverride, UseQuery, VersionResolver
from tests.fakes import make_file, make_project, make_version


@pytest.fixture
def fabric_api(client):
    client.add_project(make_project("P7dR8mSH", "Fabric API", slug="fabric-api"))
    client.add_versions(
        "fabric-api",
        [
            make_version("beta1", "P7dR8mSH", "beta", game_versions=("1.21.8",)),
            make_version("rel1", "P7dR8mSH", "release", game_versions=("1.21.7",)),
        ],
    )
    return client


class TestScenarioA:
    @pytest.mark.asyncio
    async def test_release_file_in_mods(self, fabric_api, branch_config):
        resolver = VersionResolver(fabric_api)

        result = await resolver.resolve(
            "fabric-api", ProjectSettings(), "main", branch_config, no_beta=True
        )

        assert result.status == ResolveStatus.OK
        assert result.version.id == "rel1"
        assert result.file.path.startswith("mods/")
        assert result.file.path == "mods/rel1.jar"
        assert result.project_id == "P7dR8mSH"
        assert result.project_name == "Fabric API"

    @pytest.mark.asyncio
    async def test_query_parameters(self, fabric_api, branch_config):
        await VersionResolver(fabric_api).resolve(
            "fabric-api", ProjectSettings(), "main", branch_config
        )

        endpoint, params = fabric_api.calls[0]
        assert endpoint == "/project/fabric-api/version"
        assert params == {
            "loaders": '["minecraft", "vanilla", "fabric"]',
            "game_versions": '["1.21.8", "1.21.6", "1.21.7"]',
        }

    @pytest.mark.asyncio
    async def test_newest_game_version_beats_catalog_order(self, fabric_api, branch_config):
        result = await VersionResolver(fabric_api).resolve(
            "fabric-api", ProjectSettings(), "main", branch_config
        )
        assert result.version.id == "beta1"


class TestScenarioC:
    @pytest.mark.asyncio
    async def test_override_fetches_version_directly(self, fabric_api, client):
        client.add_versions("unused", [make_version("AbCdEfGh", "P7dR8mSH")])
        resolver = VersionResolver(client)

        version = await resolver.find_version(
            "fabric-api", BranchConfig(), UseOverride("AbCdEfGh")
        )

        assert version.id == "AbCdEfGh"
        assert client.endpoints == ["/version/AbCdEfGh"]

    @pytest.mark.asyncio
    async def test_override_failure_is_recorded(self, fabric_api):
        settings = ProjectSettings(version_overrides={"dev-branch": "missing"})

        result = await VersionResolver(fabric_api).resolve(
            "fabric-api", settings, "dev-branch", BranchConfig()
        )

        assert result.status == ResolveStatus.FAILED
        assert isinstance(result.error, APINotFoundError)
        assert "/project/fabric-api/version" not in fabric_api.endpoints


class TestScenarioE:
    @pytest.mark.asyncio
    async def test_first_file_without_primary(self, client):
        client.add_project(make_project("LIB"))
        client.add_versions(
            "LIB",
            [
                make_version(
                    "v1",
                    "LIB",
                    files=[make_file("lib.jar", primary=False), make_file("lib-sources.jar", primary=False)],
                )
            ],
        )

        result = await VersionResolver(client).resolve(
            "LIB", ProjectSettings(), "main", BranchConfig()
        )

        assert result.ok
        assert result.file.path == "mods/lib.jar"

    @pytest.mark.asyncio
    async def test_primary_file_preferred(self, client):
        client.add_project(make_project("LIB"))
        client.add_versions(
            "LIB",
            [
                make_version(
                    "v1",
                    "LIB",
                    files=[make_file("lib-sources.jar", primary=False), make_file("lib.jar")],
                )
            ],
        )

        result = await VersionResolver(client).resolve(
            "LIB", ProjectSettings(), "main", BranchConfig()
        )

        assert result.file.path == "mods/lib.jar"
        assert result.file.hashes.sha512 == "lib.jar-sha512"
        assert result.file.downloads == ["https://cdn.modrinth.com/data/lib.jar"]

    @pytest.mark.asyncio
    async def test_no_files(self, client):
        client.add_project(make_project("LIB"))
        client.add_versions("LIB", [make_version("v1", "LIB", files=[])])

        result = await VersionResolver(client).resolve(
            "LIB", ProjectSettings(), "main", BranchConfig()
        )

        assert result.status == ResolveStatus.FAILED
        assert isinstance(result.error, NoFilesError)


class TestProjectKinds:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "project_type,directory",
        [("mod", "mods"), ("resourcepack", "resourcepacks"), ("shader", "shaderpacks")],
    )
    async def test_install_directory(self, client, project_type, directory):
        client.add_project(make_project("X", project_type=project_type))
        client.add_versions("X", [make_version("v1", "X", files=[make_file("x.zip")])])

        result = await VersionResolver(client).resolve(
            "X", ProjectSettings(), "main", BranchConfig()
        )

        assert result.file.path == f"{directory}/x.zip"

    @pytest.mark.asyncio
    async def test_modpack_rejected(self, client):
        client.add_project(make_project("PACK", project_type="modpack"))
        client.add_versions("PACK", [make_version("v1", "PACK")])

        result = await VersionResolver(client).resolve(
            "PACK", ProjectSettings(), "main", BranchConfig()
        )

        assert result.status == ResolveStatus.FAILED
        assert isinstance(result.error, ModpackProjectError)

    @pytest.mark.asyncio
    async def test_unsupported_kind(self, client):
        client.add_project(make_project("PLUG", project_type="plugin"))
        client.add_versions("PLUG", [make_version("v1", "PLUG")])

        result = await VersionResolver(client).resolve(
            "PLUG", ProjectSettings(), "main", BranchConfig()
        )

        assert isinstance(result.error, UnsupportedProjectTypeError)


class TestOutcomes:
    @pytest.mark.asyncio
    async def test_skip_issues_no_request(self, fabric_api):
        settings = ProjectSettings(include_or_exclude=Include(["release-branch"]))

        result = await VersionResolver(fabric_api).resolve(
            "fabric-api", settings, "dev-branch", BranchConfig()
        )

        assert result.status == ResolveStatus.SKIPPED
        assert result.file is None
        assert fabric_api.calls == []

    @pytest.mark.asyncio
    async def test_not_found_when_nothing_acceptable(self, client):
        client.add_versions("alpha-only", [make_version("a1", "ALPHA", "alpha")])

        result = await VersionResolver(client).resolve(
            "alpha-only", ProjectSettings(), "main", BranchConfig(), no_alpha=True
        )

        assert result.status == ResolveStatus.NOT_FOUND
        assert result.error is None

    @pytest.mark.asyncio
    async def test_require_all_forces_env(self, fabric_api):
        result = await VersionResolver(fabric_api).resolve(
            "fabric-api", ProjectSettings(), "main", BranchConfig(), require_all=True
        )
        assert result.file.env.client == SideSupport.REQUIRED
        assert result.file.env.server == SideSupport.REQUIRED

    @pytest.mark.asyncio
    async def test_catalog_env_kept(self, fabric_api):
        result = await VersionResolver(fabric_api).resolve(
            "fabric-api", ProjectSettings(), "main", BranchConfig()
        )
        assert result.file.env.server == SideSupport.OPTIONAL

    @pytest.mark.asyncio
    async def test_query_decision_uses_candidates(self, fabric_api):
        version = await VersionResolver(fabric_api).find_version(
            "fabric-api", BranchConfig(), UseQuery(), no_beta=True
        )
        assert version.id == "rel1"

    @pytest.mark.asyncio
    async def test_malformed_candidate_is_recorded(self, client):
        version = make_version("v1", "LIB")
        version["dependencies"] = ["not-an-object"]
        client.add_versions("LIB", [version])

        result = await VersionResolver(client).resolve(
            "LIB", ProjectSettings(), "main", BranchConfig()
        )

        assert result.status == ResolveStatus.FAILED
        assert isinstance(result.error, InvalidResponseError)
