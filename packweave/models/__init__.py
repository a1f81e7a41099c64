"""
Packweave 数据模型包

包含配置模型、API 模型与 mrpack 模型定义。
"""

from packweave.models.api import (
    ProjectType,
    SideSupport,
    VersionType,
    DependencyType,
    MainLoader,
    Loader,
    ProjectInfo,
    FileInfo,
    DependencyInfo,
    VersionInfo,
)
from packweave.models.mrpack import (
    MRPACK_INDEX_FILE_NAME,
    FileHashes,
    Env,
    File,
    MrpackDependencies,
    MrpackIndex,
)
from packweave.models.config import (
    CURRENT_PACK_FORMAT,
    Include,
    Exclude,
    IncludeOrExclude,
    ProjectSettings,
    Modpack,
    BranchConfig,
    BranchFilesProject,
    BranchFiles,
)

__all__ = [
    # API 模型
    "ProjectType",
    "SideSupport",
    "VersionType",
    "DependencyType",
    "MainLoader",
    "Loader",
    "ProjectInfo",
    "FileInfo",
    "DependencyInfo",
    "VersionInfo",
    # mrpack 模型
    "MRPACK_INDEX_FILE_NAME",
    "FileHashes",
    "Env",
    "File",
    "MrpackDependencies",
    "MrpackIndex",
    # 配置模型
    "CURRENT_PACK_FORMAT",
    "Include",
    "Exclude",
    "IncludeOrExclude",
    "ProjectSettings",
    "Modpack",
    "BranchConfig",
    "BranchFilesProject",
    "BranchFiles",
]
