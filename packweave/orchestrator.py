"""
主协调器

按分支驱动 策略判断 -> 版本解析 -> 文件条目构建 -> 依赖补充，
并重建分支的 .branch_files.json。
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from loguru import logger

from packweave.exceptions import PackweaveError
from packweave.models import (
    BranchFiles,
    BranchFilesProject,
    DependencyInfo,
    Modpack,
)
from packweave.services import (
    CatalogClient,
    DependencyResolver,
    FileResult,
    ResolveStatus,
    VersionResolver,
)
from packweave import storage


@dataclass
class BranchUpdateReport:
    """单个分支的更新结果"""

    branch: str
    added: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    manual: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    not_found: List[str] = field(default_factory=list)
    failed: List[Tuple[str, PackweaveError]] = field(default_factory=list)


@dataclass
class UpdateSummary:
    """多个分支的更新结果，分支级错误被收集而不是中断"""

    reports: List[BranchUpdateReport] = field(default_factory=list)
    errors: Dict[str, PackweaveError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class BranchUpdater:
    """分支更新协调器"""

    def __init__(
        self,
        modpack: Modpack,
        client: CatalogClient,
        no_alpha: bool = False,
        no_beta: bool = False,
    ):
        self.modpack = modpack
        self.client = client
        self.no_alpha = no_alpha
        self.no_beta = no_beta
        self.resolver = VersionResolver(client)
        self.dep_resolver = DependencyResolver(self.resolver)

    async def run(self, branches: Optional[List[str]] = None) -> UpdateSummary:
        """
        更新分支

        Args:
            branches: 要更新的分支，默认为整合包中的全部分支
        """
        summary = UpdateSummary()
        targets = list(branches) if branches else list(self.modpack.branches)

        for branch in targets:
            try:
                summary.reports.append(await self.update_branch(branch))
            except PackweaveError as e:
                logger.error(f"分支 {branch} 更新失败: {e}")
                summary.errors[branch] = e

        return summary

    async def update_branch(self, branch: str) -> BranchUpdateReport:
        """完整重建一个分支的文件清单"""
        logger.info(f"开始更新分支 {branch}...")
        report = BranchUpdateReport(branch)

        branch_config = await storage.load_branch_config(self.modpack, branch)
        branch_files = await storage.load_branch_files(self.modpack, branch)
        # 总是完整重建，修改加载器或策略后不会残留旧条目
        branch_files.clear()

        resolved_ids: Set[str] = set()
        dependencies: List[DependencyInfo] = []

        for project, settings in self.modpack.projects.items():
            result = await self.resolver.resolve(
                project,
                settings,
                branch,
                branch_config,
                no_alpha=self.no_alpha,
                no_beta=self.no_beta,
                require_all=self.modpack.require_all,
            )
            if self._record(result, branch_files, report, report.added):
                resolved_ids.add(project)
                resolved_ids.add(result.project_id)
                dependencies.extend(result.dependencies)

        if self.modpack.auto_dependencies:
            dep_results = await self.dep_resolver.resolve(
                dependencies,
                resolved_ids,
                branch,
                branch_config,
                no_alpha=self.no_alpha,
                no_beta=self.no_beta,
                require_all=self.modpack.require_all,
            )
            for result in dep_results:
                self._record(result, branch_files, report, report.dependencies, "依赖")

        for manual_file in branch_config.manual_files:
            branch_files.add(BranchFilesProject(name=manual_file.display_name), manual_file)
            report.manual.append(manual_file.display_name)
            logger.info(f"[手动] 已添加文件 '{manual_file.display_name}'")

        await storage.save_branch_files(self.modpack, branch, branch_files)
        logger.success(
            f"分支 {branch} 更新完成: {len(report.added)} 个项目, "
            f"{len(report.dependencies)} 个依赖, {len(report.manual)} 个手动文件, "
            f"{len(report.failed)} 个失败"
        )
        return report

    @staticmethod
    def _record(
        result: FileResult,
        branch_files: BranchFiles,
        report: BranchUpdateReport,
        bucket: List[str],
        tag: str = "项目",
    ) -> bool:
        """把解析结果记入清单与报告，成功时返回 True"""
        if result.status == ResolveStatus.OK:
            branch_files.add(
                BranchFilesProject(name=result.project_name, id=result.project_id),
                result.file,
            )
            bucket.append(result.project)
            logger.info(f"[{tag}] 已添加 '{result.project_name}' (ID: {result.project_id})")
            return True

        if result.status == ResolveStatus.SKIPPED:
            report.skipped.append(result.project)
            logger.debug(f"[{tag}] {result.project} 不适用于分支 {report.branch}，跳过")
        elif result.status == ResolveStatus.NOT_FOUND:
            report.not_found.append(result.project)
            logger.warning(f"[{tag}] {result.project} 在分支 {report.branch} 中没有可用版本")
        else:
            report.failed.append((result.project, result.error))
            logger.warning(f"[{tag}] {result.project} 解析失败: {result.error}")
        return False
