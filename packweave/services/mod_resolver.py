"""
模组解析服务

对单个项目执行 策略判断 -> 版本选择 -> 文件条目构建，返回统一的解析结果。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from packweave.exceptions import PackweaveError
from packweave.models import (
    BranchConfig,
    DependencyInfo,
    File,
    ProjectSettings,
    VersionInfo,
)
from packweave.services.api_client import CatalogClient
from packweave.services.artifact_builder import ArtifactBuilder
from packweave.services.policy import (
    PolicyDecision,
    Skip,
    UseOverride,
    evaluate_policy,
)
from packweave.services.version_matcher import VersionMatcher


class ResolveStatus(Enum):
    OK = "ok"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass
class FileResult:
    """单个项目的解析结果"""

    status: ResolveStatus
    project: str
    project_id: Optional[str] = None
    project_name: str = ""
    file: Optional[File] = None
    version: Optional[VersionInfo] = None
    dependencies: List[DependencyInfo] = field(default_factory=list)
    error: Optional[PackweaveError] = None

    @property
    def ok(self) -> bool:
        return self.status == ResolveStatus.OK


class VersionResolver:
    """版本解析器"""

    def __init__(
        self,
        client: CatalogClient,
        matcher: Optional[VersionMatcher] = None,
        builder: Optional[ArtifactBuilder] = None,
    ):
        self.client = client
        self.matcher = matcher or VersionMatcher()
        self.builder = builder or ArtifactBuilder(client)

    async def find_version(
        self,
        project: str,
        branch_config: BranchConfig,
        decision: PolicyDecision,
        no_alpha: bool = False,
        no_beta: bool = False,
    ) -> Optional[VersionInfo]:
        """
        选出项目在分支中应使用的版本

        使用版本覆盖时直接获取该版本，不发起查询；
        查询没有可接受的候选版本时返回 None。
        """
        if isinstance(decision, UseOverride):
            return await self.client.get_version(decision.version_id)

        candidates = await self.client.get_project_versions(
            project,
            self.matcher.effective_loaders(branch_config),
            self.matcher.effective_game_versions(branch_config),
        )
        ranked = self.matcher.rank(candidates)
        return self.matcher.select(ranked, no_alpha=no_alpha, no_beta=no_beta)

    async def resolve(
        self,
        project: str,
        settings: ProjectSettings,
        branch: str,
        branch_config: BranchConfig,
        no_alpha: bool = False,
        no_beta: bool = False,
        require_all: bool = False,
    ) -> FileResult:
        """
        解析项目

        Args:
            project: 项目 ID 或 slug
            settings: 项目设置
            branch: 分支名称
            branch_config: 分支配置
            no_alpha: 不使用 alpha 版本
            no_beta: 不使用 beta 版本
            require_all: 所有文件在客户端与服务端都标记为 required

        Returns:
            FileResult: 失败也以结果返回，不抛出异常
        """
        decision = evaluate_policy(branch, settings)
        if isinstance(decision, Skip):
            return FileResult(ResolveStatus.SKIPPED, project)

        try:
            version = await self.find_version(
                project, branch_config, decision, no_alpha, no_beta
            )
            if version is None:
                return FileResult(ResolveStatus.NOT_FOUND, project)

            project_info, file = await self.builder.build(version, require_all)
        except PackweaveError as e:
            return FileResult(ResolveStatus.FAILED, project, error=e)

        return FileResult(
            ResolveStatus.OK,
            project,
            project_id=project_info.id,
            project_name=project_info.title,
            file=file,
            version=version,
            dependencies=list(version.dependencies),
        )
