"""
文件条目构建服务

把选中的 Modrinth 版本转换为整合包中的文件条目。
"""

from typing import Tuple

from packweave.exceptions import (
    ModpackProjectError,
    NoFilesError,
    UnsupportedProjectTypeError,
)
from packweave.models import (
    Env,
    File,
    FileHashes,
    FileInfo,
    ProjectInfo,
    ProjectType,
    SideSupport,
    VersionInfo,
)
from packweave.services.api_client import CatalogClient


# 使用游戏实际读取的目录名，而不是 Modrinth 的项目类型名 (resourcepack、shader)
PROJECT_DIRECTORIES = {
    ProjectType.MOD.value: "mods",
    ProjectType.RESOURCE_PACK.value: "resourcepacks",
    ProjectType.SHADER.value: "shaderpacks",
}


def project_directory(project: ProjectInfo) -> str:
    """项目类型对应的安装目录"""
    if project.project_type == ProjectType.MODPACK.value:
        raise ModpackProjectError(project.slug or project.id)
    directory = PROJECT_DIRECTORIES.get(project.project_type)
    if directory is None:
        raise UnsupportedProjectTypeError(project.slug or project.id, project.project_type)
    return directory


def primary_file(version: VersionInfo) -> FileInfo:
    """
    版本的主文件

    没有文件被标记为 primary 时退回到第一个文件。
    """
    if not version.files:
        raise NoFilesError(version.id)
    for file in version.files:
        if file.primary:
            return file
    # TODO: 退回第一个文件可能选中 sources jar 之类的文件，需要更可靠的挑选规则
    return version.files[0]


class ArtifactBuilder:
    """文件条目构建器"""

    def __init__(self, client: CatalogClient):
        self.client = client

    async def build(
        self, version: VersionInfo, require_all: bool = False
    ) -> Tuple[ProjectInfo, File]:
        """
        构建文件条目

        Args:
            version: 选中的版本
            require_all: 为 True 时客户端与服务端都标记为 required

        Returns:
            tuple: (project_info, file)
        """
        project = await self.client.get_project(version.project_id)
        directory = project_directory(project)
        chosen = primary_file(version)

        if require_all:
            env = Env(client=SideSupport.REQUIRED, server=SideSupport.REQUIRED)
        else:
            env = Env(client=project.client_side, server=project.server_side)

        file = File(
            project_name=project.title,
            path=f"{directory}/{chosen.filename}",
            hashes=FileHashes(sha1=chosen.sha1, sha512=chosen.sha512),
            env=env,
            downloads=[chosen.url],
            file_size=chosen.size,
        )
        return project, file
