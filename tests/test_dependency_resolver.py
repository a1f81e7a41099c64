"""依赖补充测试"""

import pytest

from packweave.models import BranchConfig, DependencyInfo, DependencyType
from packweave.services import DependencyResolver, ResolveStatus, VersionResolver
from tests.fakes import make_project, make_version, required_dependency


def dep(project_id, kind=DependencyType.REQUIRED):
    return DependencyInfo(dependency_type=kind, project_id=project_id)


class TestMissingRequired:
    def test_filters_and_dedups(self):
        deps = [
            dep("A"),
            dep("B", DependencyType.OPTIONAL),
            dep("C", DependencyType.INCOMPATIBLE),
            dep("A"),
            dep("RESOLVED"),
            DependencyInfo(DependencyType.REQUIRED, project_id=None, version_id="v1"),
            dep("D"),
        ]

        assert DependencyResolver.missing_required(deps, {"RESOLVED"}) == ["A", "D"]


class TestResolve:
    @pytest.mark.asyncio
    async def test_single_layer(self, client):
        client.add_project(make_project("LIB"))
        client.add_versions(
            "LIB",
            [make_version("lib1", "LIB", dependencies=[required_dependency("DEEP")])],
        )
        client.add_project(make_project("DEEP"))
        client.add_versions("DEEP", [make_version("deep1", "DEEP")])
        resolved = {"ROOT"}

        results = await DependencyResolver(VersionResolver(client)).resolve(
            [dep("LIB")], resolved, "main", BranchConfig()
        )

        assert [r.project for r in results] == ["LIB"]
        assert results[0].status == ResolveStatus.OK
        # 依赖的依赖不会被展开
        assert "/project/DEEP/version" not in client.endpoints
        assert resolved == {"ROOT", "LIB"}

    @pytest.mark.asyncio
    async def test_failures_are_results(self, client):
        results = await DependencyResolver(VersionResolver(client)).resolve(
            [dep("GONE")], set(), "main", BranchConfig()
        )

        assert results[0].status == ResolveStatus.FAILED
