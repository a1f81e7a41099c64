"""
mrpack 导入服务

读取已有的 .mrpack，通过 sha512 把文件反查为 Modrinth 版本，
重建分支配置、分支文件清单与 overrides 目录。
"""

import json
import shutil
import zipfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Union

from loguru import logger

from packweave import storage
from packweave.exceptions import (
    ArchivePathError,
    BranchAlreadyExistsError,
    ManifestInvalidError,
    ManifestMissingError,
    MrpackError,
    PackweaveError,
)
from packweave.models import (
    MRPACK_INDEX_FILE_NAME,
    BranchConfig,
    BranchFiles,
    BranchFilesProject,
    Modpack,
    MrpackIndex,
)
from packweave.services.api_client import CatalogClient


MRPACK_EXTENSION = ".mrpack"


@dataclass
class ImportReport:
    """导入结果"""

    branch: str
    imported: List[str] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)
    added_projects: List[str] = field(default_factory=list)
    extracted: List[str] = field(default_factory=list)


def branch_name_from_path(path: Union[str, Path]) -> str:
    """从文件名推导分支名（去掉 .mrpack 扩展名）"""
    name = Path(path).name
    if name.endswith(MRPACK_EXTENSION):
        return name[: -len(MRPACK_EXTENSION)]
    return Path(name).stem


def read_index(archive: zipfile.ZipFile, source: str) -> MrpackIndex:
    """读取并解析 modrinth.index.json"""
    if MRPACK_INDEX_FILE_NAME not in archive.namelist():
        raise ManifestMissingError(source)

    try:
        index_data = json.loads(archive.read(MRPACK_INDEX_FILE_NAME).decode("utf-8"))
        return MrpackIndex.from_dict(index_data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestInvalidError(source, str(e))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ManifestInvalidError(source, repr(e))


def override_entries(archive: zipfile.ZipFile) -> List[zipfile.ZipInfo]:
    """除索引外的全部条目，路径必须是安全的相对路径"""
    entries = []
    for info in archive.infolist():
        if info.filename == MRPACK_INDEX_FILE_NAME:
            continue
        path = PurePosixPath(info.filename)
        if path.is_absolute() or ".." in path.parts or "\\" in info.filename:
            raise ArchivePathError(info.filename)
        entries.append(info)
    return entries


class MrpackImporter:
    """.mrpack 导入器"""

    def __init__(self, client: CatalogClient):
        self.client = client

    async def import_mrpack(
        self,
        modpack: Modpack,
        mrpack_path: Union[str, Path],
        add_projects: bool = False,
        force: bool = False,
    ) -> ImportReport:
        """
        导入 mrpack 为新的分支

        Args:
            modpack: 目标整合包
            mrpack_path: .mrpack 文件路径
            add_projects: 把识别出的项目加入整合包（已存在的不重复添加）
            force: 分支已存在时覆盖

        Returns:
            ImportReport: 无法识别的文件只会被记录，不会中断导入
        """
        mrpack_path = Path(mrpack_path)
        branch = branch_name_from_path(mrpack_path)
        report = ImportReport(branch)

        try:
            archive = zipfile.ZipFile(mrpack_path)
        except (OSError, zipfile.BadZipFile) as e:
            raise MrpackError(
                f"打开 {mrpack_path} 失败: {e}", context={"path": str(mrpack_path)}
            )

        with archive:
            index = read_index(archive, str(mrpack_path))
            entries = override_entries(archive)

            branch_path = storage.branch_dir(modpack, branch)
            if branch in modpack.branches or branch_path.exists():
                if not force:
                    raise BranchAlreadyExistsError(branch)
                if branch_path.is_dir():
                    logger.warning(f"覆盖已有分支 {branch}")
                    shutil.rmtree(branch_path)

            branch_config = self.branch_config_from_index(index)
            branch_files = await self._resolve_files(modpack, index, add_projects, report)

            await storage.create_branch(modpack, branch)
            await storage.save_branch_config(modpack, branch, branch_config)
            await storage.save_branch_files(modpack, branch, branch_files)
            self._extract(archive, entries, branch_path, report)

        await storage.save_modpack(modpack)
        logger.success(
            f"已从 {mrpack_path.name} 导入分支 {branch}: "
            f"{len(report.imported)} 个项目, {len(report.unresolved)} 个未识别文件"
        )
        return report

    @staticmethod
    def branch_config_from_index(index: MrpackIndex) -> BranchConfig:
        """由索引中的 dependencies 生成分支配置，不推断可接受的游戏版本"""
        mod_loader, loader_version = index.dependencies.main_loader()
        return BranchConfig(
            version=index.version_id,
            minecraft_version=index.dependencies.minecraft,
            acceptable_minecraft_versions=[],
            mod_loader=mod_loader,
            loader_version=loader_version,
            acceptable_loaders=[],
            manual_files=[],
        )

    async def _resolve_files(
        self,
        modpack: Modpack,
        index: MrpackIndex,
        add_projects: bool,
        report: ImportReport,
    ) -> BranchFiles:
        branch_files = BranchFiles()
        for file in index.files:
            try:
                version = await self.client.get_version_from_hash(file.hashes.sha512)
                project = await self.client.get_project(version.project_id)
            except PackweaveError as e:
                # 手动制作的模组等文件在 Modrinth 上不存在，属于预期情况
                report.unresolved.append(file.path)
                logger.warning(f"[导入] 无法识别 {file.path}，跳过: {e}")
                continue

            file.project_name = project.title
            branch_files.add(BranchFilesProject(name=project.title, id=project.id), file)
            report.imported.append(project.title)
            logger.info(f"[导入] {file.path} -> '{project.title}' (ID: {project.id})")

            if add_projects and not (
                project.id in modpack.projects or project.slug in modpack.projects
            ):
                key = project.slug or project.id
                modpack.add_projects([key])
                report.added_projects.append(key)
                logger.info(f"[导入] 已将项目 {key} 加入整合包")

        return branch_files

    @staticmethod
    def _extract(
        archive: zipfile.ZipFile,
        entries: List[zipfile.ZipInfo],
        branch_path: Path,
        report: ImportReport,
    ):
        """把 overrides 等条目解压到分支目录"""
        for info in entries:
            target = branch_path / info.filename
            try:
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            except (OSError, zipfile.BadZipFile) as e:
                raise MrpackError(
                    f"解压 {info.filename} 失败: {e}", context={"entry": info.filename}
                )
            report.extracted.append(info.filename)
