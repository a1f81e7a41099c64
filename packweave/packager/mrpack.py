"""
Mrpack 生成器

把分支的解析结果与 overrides 目录导出为 Modrinth 标准整合包 (.mrpack)。
"""

import os
import zipfile
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from packweave import storage
from packweave.exceptions import (
    ArchivePathError,
    ExportIncompleteError,
    MissingLoaderVersionError,
    MrpackError,
    PackweaveError,
)
from packweave.models import (
    MRPACK_INDEX_FILE_NAME,
    BranchConfig,
    BranchFiles,
    Modpack,
    MrpackDependencies,
    MrpackIndex,
)


OVERRIDE_DIRS = ("overrides", "server-overrides", "client-overrides")

# 固定 modrinth.index.json 的时间戳，使重复导出得到相同的字节
INDEX_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def create_dependencies(branch: str, branch_config: BranchConfig) -> MrpackDependencies:
    """根据主加载器生成 dependencies，最多包含一个加载器"""
    if branch_config.mod_loader is not None and not branch_config.loader_version:
        raise MissingLoaderVersionError(branch)
    return MrpackDependencies.for_loader(
        branch_config.minecraft_version,
        branch_config.mod_loader,
        branch_config.loader_version,
    )


def create_index(
    modpack: Modpack,
    branch: str,
    branch_config: BranchConfig,
    branch_files: BranchFiles,
) -> MrpackIndex:
    """创建 modrinth.index.json"""
    return MrpackIndex(
        version_id=branch_config.version,
        name=modpack.name,
        summary=modpack.summary,
        files=list(branch_files.files),
        dependencies=create_dependencies(branch, branch_config),
    )


def default_output_path(modpack: Modpack, branch: str, branch_config: BranchConfig) -> Path:
    return (
        modpack.directory
        / storage.TARGET_DIRECTORY
        / branch
        / f"{modpack.name}_{branch_config.version}.mrpack"
    )


class MrpackBuilder:
    """Mrpack 构建器"""

    async def build(
        self,
        modpack: Modpack,
        branch: str,
        output_path: Optional[Union[str, Path]] = None,
    ) -> Path:
        """
        导出分支

        Args:
            modpack: 整合包
            branch: 分支名称
            output_path: 输出文件路径，默认为 target/<分支>/<名称>_<版本>.mrpack

        Returns:
            生成的文件路径

        单个 overrides 条目失败不会中断导出：归档仍会完成，
        之后以 ExportIncompleteError 一次性报告全部失败。
        """
        branch_config = await storage.load_branch_config(modpack, branch)
        branch_files = await storage.load_branch_files(modpack, branch)
        index = create_index(modpack, branch, branch_config, branch_files)

        if output_path is None:
            output_path = default_output_path(modpack, branch, branch_config)
        output_path = Path(output_path)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            archive = zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED)
        except OSError as e:
            raise MrpackError(
                f"创建 {output_path} 失败: {e}", context={"output_path": str(output_path)}
            )

        errors: List[PackweaveError] = []
        try:
            info = zipfile.ZipInfo(MRPACK_INDEX_FILE_NAME, date_time=INDEX_DATE_TIME)
            info.compress_type = zipfile.ZIP_DEFLATED
            archive.writestr(info, storage.to_json(index.to_dict()))

            branch_dir = storage.branch_dir(modpack, branch)
            for override_dir in OVERRIDE_DIRS:
                override_path = branch_dir / override_dir
                if not override_path.exists():
                    continue
                self._add_tree(archive, branch_dir, override_path, errors)
        except (OSError, zipfile.BadZipFile) as e:
            errors.append(
                MrpackError(f"写入 {MRPACK_INDEX_FILE_NAME} 失败: {e}")
            )
        finally:
            try:
                archive.close()
            except OSError as e:
                errors.append(MrpackError(f"完成 {output_path} 失败: {e}"))

        if errors:
            for error in errors:
                logger.error(f"[导出] {error}")
            raise ExportIncompleteError(str(output_path), errors)

        logger.success(f"分支 {branch} 已导出到 {output_path}")
        return output_path

    def _add_tree(
        self,
        archive: zipfile.ZipFile,
        branch_dir: Path,
        root: Path,
        errors: List[PackweaveError],
    ):
        """把目录树加入归档，路径相对于分支目录"""

        def on_error(error: OSError):
            errors.append(MrpackError(f"遍历目录失败: {error}"))

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            dirnames.sort()
            self._add_entry(archive, branch_dir, Path(dirpath), errors)
            for filename in sorted(filenames):
                self._add_entry(archive, branch_dir, Path(dirpath) / filename, errors)

    @staticmethod
    def _add_entry(
        archive: zipfile.ZipFile,
        branch_dir: Path,
        path: Path,
        errors: List[PackweaveError],
    ):
        try:
            arcname = path.relative_to(branch_dir).as_posix()
        except ValueError:
            errors.append(ArchivePathError(str(path)))
            return

        try:
            archive.write(path, arcname)
            logger.debug(f"[导出] 已添加 {arcname}")
        except OSError as e:
            errors.append(
                MrpackError(f"添加 {arcname} 失败: {e}", context={"path": str(path)})
            )
