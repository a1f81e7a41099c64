"""
API 客户端抽象

CatalogClient 是注入到解析器、构建器与导入器中的能力接口；
ModrinthClient 是基于 aiohttp 的实现。客户端内部不做重试。
"""

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import aiohttp
from loguru import logger

from packweave.exceptions import (
    APIError,
    APINotFoundError,
    APIRateLimitError,
    APIServerError,
    InvalidResponseError,
    RequestFailedError,
)
from packweave.models import ProjectInfo, VersionInfo
from packweave.settings import APISettings


class CatalogClient(ABC):
    """Modrinth 目录访问能力"""

    @abstractmethod
    async def fetch_text(self, endpoint: str, params: Optional[dict] = None) -> str:
        """
        请求一个端点并返回原始 JSON 文本

        失败时抛出 APIError 的子类。
        """

    async def request(self, endpoint: str, params: Optional[dict] = None) -> Any:
        text = await self.fetch_text(endpoint, params)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidResponseError(
                f"端点 {endpoint} 返回的 JSON 无效: {e}",
                context={"endpoint": endpoint},
            )

    async def get_project(self, idx: str) -> ProjectInfo:
        """获取项目信息"""
        endpoint = f"/project/{idx}"
        data = await self.request(endpoint)
        return self._parse(ProjectInfo.from_modrinth, data, endpoint)

    async def get_version(self, version_id: str) -> VersionInfo:
        """按 ID 获取单个版本"""
        endpoint = f"/version/{version_id}"
        data = await self.request(endpoint)
        return self._parse(VersionInfo.from_modrinth, data, endpoint)

    async def get_project_versions(
        self,
        idx: str,
        loaders: List[str],
        game_versions: List[str],
    ) -> List[VersionInfo]:
        """获取与加载器、游戏版本兼容的候选版本列表"""
        endpoint = f"/project/{idx}/version"
        params = {
            "loaders": json.dumps(loaders),
            "game_versions": json.dumps(game_versions),
        }
        data = await self.request(endpoint, params)
        if not isinstance(data, list):
            raise InvalidResponseError(
                f"端点 {endpoint} 应返回版本列表", context={"endpoint": endpoint}
            )
        return [self._parse(VersionInfo.from_modrinth, item, endpoint) for item in data]

    async def get_version_from_hash(self, sha512: str) -> VersionInfo:
        """通过文件 sha512 反查版本"""
        endpoint = f"/version_file/{sha512}"
        data = await self.request(endpoint, {"algorithm": "sha512"})
        return self._parse(VersionInfo.from_modrinth, data, endpoint)

    @staticmethod
    def _parse(factory, data: Any, endpoint: str):
        try:
            return factory(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidResponseError(
                f"端点 {endpoint} 返回的数据无效: {e!r}",
                context={"endpoint": endpoint},
            )

    async def close(self):
        """关闭客户端"""

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()


class ModrinthClient(CatalogClient):
    """Modrinth API 客户端"""

    def __init__(
        self,
        settings: Optional[APISettings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.settings = settings or APISettings()
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.settings.user_agent},
                timeout=aiohttp.ClientTimeout(total=self.settings.timeout),
            )
        return self._session

    async def fetch_text(self, endpoint: str, params: Optional[dict] = None) -> str:
        """发送 API 请求"""
        url = self.settings.base_url + endpoint
        logger.debug(f"GET {url} {params or ''}")
        try:
            async with self.session.get(url, params=params) as response:
                if response.status == 200:
                    return await response.text()
                elif response.status == 404:
                    raise APINotFoundError(
                        f"资源不存在: {endpoint}", response=response
                    )
                elif response.status == 429:
                    raise APIRateLimitError(
                        "已达到 Modrinth API 速率限制", response=response
                    )
                elif response.status >= 500:
                    raise APIServerError(
                        f"Modrinth 服务器错误 (状态码: {response.status})",
                        response=response,
                    )
                else:
                    raise APIError(
                        f"API 请求失败 (状态码: {response.status})",
                        response=response,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
            raise RequestFailedError(
                f"请求 {url} 失败: {e!r}", context={"url": url}
            )

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()
