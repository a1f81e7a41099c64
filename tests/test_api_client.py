"""目录客户端辅助方法测试"""

import pytest

from packweave.exceptions import APINotFoundError, InvalidResponseError
from packweave.models import DependencyType, SideSupport, VersionType
from tests.fakes import FakeCatalogClient, make_project, make_version, required_dependency


class TestCatalogClient:
    @pytest.mark.asyncio
    async def test_get_project(self, client):
        client.add_project(make_project("AANobbMI", "Sodium", slug="sodium"))

        project = await client.get_project("sodium")

        assert project.id == "AANobbMI"
        assert project.title == "Sodium"
        assert project.client_side == SideSupport.REQUIRED

    @pytest.mark.asyncio
    async def test_get_version(self, client):
        client.add_versions(
            "sodium",
            [make_version("v1", "AANobbMI", "beta", dependencies=[required_dependency("X")])],
        )

        version = await client.get_version("v1")

        assert version.version_type == VersionType.BETA
        assert version.dependencies[0].dependency_type == DependencyType.REQUIRED
        assert version.files[0].sha512 == "v1.jar-sha512"

    @pytest.mark.asyncio
    async def test_hash_lookup_params(self, client):
        client.add_versions("sodium", [make_version("v1", "AANobbMI")])

        await client.get_version_from_hash("v1.jar-sha512")

        assert client.calls == [("/version_file/v1.jar-sha512", {"algorithm": "sha512"})]

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, client):
        with pytest.raises(APINotFoundError):
            await client.get_project("ghost")

    @pytest.mark.asyncio
    async def test_unknown_side_support_is_invalid(self, client):
        client.add_project(make_project("X", client_side="sometimes"))
        with pytest.raises(InvalidResponseError):
            await client.get_project("X")

    @pytest.mark.asyncio
    async def test_missing_fields_are_invalid(self):
        client = FakeCatalogClient({"/version/v1": {"id": "v1"}})
        with pytest.raises(InvalidResponseError):
            await client.get_version("v1")

    @pytest.mark.asyncio
    async def test_version_list_must_be_list(self):
        client = FakeCatalogClient({"/project/x/version": {"id": "v1"}})
        with pytest.raises(InvalidResponseError):
            await client.get_project_versions("x", ["fabric"], ["1.21.8"])

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        class BrokenClient(FakeCatalogClient):
            async def fetch_text(self, endpoint, params=None):
                return "<html>"

        with pytest.raises(InvalidResponseError):
            await BrokenClient().get_project("x")

    @pytest.mark.asyncio
    async def test_non_object_dependency_is_invalid(self, client):
        version = make_version("v1", "AANobbMI")
        version["dependencies"] = ["not-an-object"]
        client.add_versions("sodium", [version])

        with pytest.raises(InvalidResponseError):
            await client.get_version("v1")
