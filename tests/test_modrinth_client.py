"""基于 aiohttp 的 Modrinth 客户端测试"""

import asyncio
from contextlib import asynccontextmanager

import pytest
from aiohttp import web
from aiohttp import test_utils

from packweave import storage
from packweave.exceptions import (
    APIError,
    APINotFoundError,
    APIRateLimitError,
    APIServerError,
    RequestFailedError,
)
from packweave.models import BranchConfig, ProjectSettings
from packweave.orchestrator import BranchUpdater
from packweave.services import ModrinthClient, ResolveStatus, VersionResolver
from packweave.settings import APISettings
from tests.fakes import make_project


async def slow(request):
    await asyncio.sleep(1.0)
    return web.json_response([])


async def bad_encoding(request):
    return web.Response(body=b"\xff\xfe\xfa", content_type="application/json", charset="utf-8")


def status(code):
    async def handler(request):
        return web.json_response({"error": "x"}, status=code)

    return handler


@asynccontextmanager
async def catalog_server(routes, timeout=0.2):
    app = web.Application()
    for path, handler in routes.items():
        app.router.add_get(path, handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    client = ModrinthClient(
        APISettings(base_url=f"http://{server.host}:{server.port}", timeout=timeout)
    )
    try:
        yield client
    finally:
        await client.close()
        await server.close()


class TestFetch:
    @pytest.mark.asyncio
    async def test_project_and_user_agent(self):
        seen = {}

        async def project(request):
            seen["agent"] = request.headers.get("User-Agent")
            return web.json_response(make_project("AANobbMI", "Sodium"))

        async with catalog_server({"/project/{id}": project}, timeout=5) as client:
            info = await client.get_project("sodium")

        assert info.title == "Sodium"
        assert seen["agent"].startswith("packweave/")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "code,error",
        [
            (404, APINotFoundError),
            (429, APIRateLimitError),
            (503, APIServerError),
            (418, APIError),
        ],
    )
    async def test_status_mapping(self, code, error):
        async with catalog_server({"/project/{id}": status(code)}, timeout=5) as client:
            with pytest.raises(error) as exc_info:
                await client.get_project("x")

        assert exc_info.value.context["status_code"] == code

    @pytest.mark.asyncio
    async def test_timeout_is_typed(self):
        async with catalog_server({"/project/{id}": slow}) as client:
            with pytest.raises(RequestFailedError):
                await client.get_project("x")

    @pytest.mark.asyncio
    async def test_undecodable_body_is_typed(self):
        async with catalog_server({"/project/{id}": bad_encoding}, timeout=5) as client:
            with pytest.raises(RequestFailedError):
                await client.get_project("x")

    @pytest.mark.asyncio
    async def test_connection_refused_is_typed(self):
        client = ModrinthClient(APISettings(base_url="http://127.0.0.1:1", timeout=2))
        async with client:
            with pytest.raises(RequestFailedError):
                await client.get_project("x")


class TestSlowCatalog:
    @pytest.mark.asyncio
    async def test_resolve_records_timeout(self):
        async with catalog_server({"/project/{id}/version": slow}) as client:
            result = await VersionResolver(client).resolve(
                "x", ProjectSettings(), "main", BranchConfig()
            )

        assert result.status == ResolveStatus.FAILED
        assert isinstance(result.error, RequestFailedError)

    @pytest.mark.asyncio
    async def test_update_attempts_every_branch(self, modpack):
        await storage.create_branch(modpack, "a")
        await storage.create_branch(modpack, "b")
        modpack.add_projects(["x"])

        async with catalog_server({"/project/{id}/version": slow}) as client:
            summary = await BranchUpdater(modpack, client).run()

        assert summary.ok
        assert [r.branch for r in summary.reports] == ["a", "b"]
        for report in summary.reports:
            assert [project for project, _ in report.failed] == ["x"]
            assert isinstance(report.failed[0][1], RequestFailedError)
