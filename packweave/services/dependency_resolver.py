"""
依赖处理服务

为已解析项目缺失的必需依赖补充一层解析。不递归：依赖的依赖不会被自动加入。
"""

from typing import Iterable, List, Set

from loguru import logger

from packweave.models import BranchConfig, DependencyInfo, DependencyType, ProjectSettings
from packweave.services.mod_resolver import FileResult, VersionResolver


class DependencyResolver:
    """依赖解析器"""

    def __init__(self, resolver: VersionResolver):
        self.resolver = resolver

    @staticmethod
    def missing_required(
        dependencies: Iterable[DependencyInfo], resolved_ids: Set[str]
    ) -> List[str]:
        """必需且尚未解析的依赖项目 ID，保持首次出现的顺序"""
        missing: List[str] = []
        for dep in dependencies:
            if dep.dependency_type != DependencyType.REQUIRED:
                continue
            if not dep.project_id:
                continue
            if dep.project_id in resolved_ids or dep.project_id in missing:
                continue
            missing.append(dep.project_id)
        return missing

    async def resolve(
        self,
        dependencies: Iterable[DependencyInfo],
        resolved_ids: Set[str],
        branch: str,
        branch_config: BranchConfig,
        no_alpha: bool = False,
        no_beta: bool = False,
        require_all: bool = False,
    ) -> List[FileResult]:
        """
        解析依赖

        Args:
            dependencies: 本轮解析中收集到的全部依赖
            resolved_ids: 分支中已解析的项目 ID

        Returns:
            每个缺失依赖的解析结果
        """
        missing = self.missing_required(dependencies, resolved_ids)
        if missing:
            logger.info(f"[依赖] 分支 {branch} 发现 {len(missing)} 个缺失的必需依赖")

        results = []
        for project_id in missing:
            # 依赖没有覆盖与包含/排除设置，总是查询
            result = await self.resolver.resolve(
                project_id,
                ProjectSettings(),
                branch,
                branch_config,
                no_alpha=no_alpha,
                no_beta=no_beta,
                require_all=require_all,
            )
            if result.ok and result.project_id:
                resolved_ids.add(result.project_id)
            results.append(result)
        return results
