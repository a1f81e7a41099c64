"""
API 数据模型

定义 Modrinth API 相关的数据类，包括项目信息、版本信息、加载器等。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List


class ProjectType(Enum):
    """项目类型"""

    MOD = "mod"
    MODPACK = "modpack"
    RESOURCE_PACK = "resourcepack"
    SHADER = "shader"


class SideSupport(Enum):
    """客户端/服务端支持程度"""

    REQUIRED = "required"
    OPTIONAL = "optional"
    UNSUPPORTED = "unsupported"


class VersionType(Enum):
    """版本稳定性"""

    RELEASE = "release"
    BETA = "beta"
    ALPHA = "alpha"


class DependencyType(Enum):
    """依赖关系"""

    REQUIRED = "required"
    OPTIONAL = "optional"
    INCOMPATIBLE = "incompatible"
    EMBEDDED = "embedded"


class MainLoader(Enum):
    """启动器需要随整合包安装的加载器"""

    FORGE = "forge"
    NEOFORGE = "neoforge"
    FABRIC = "fabric"
    QUILT = "quilt"

    @property
    def mrpack_key(self) -> str:
        """modrinth.index.json dependencies 中对应的键"""
        if self in (MainLoader.FABRIC, MainLoader.QUILT):
            return f"{self.value}-loader"
        return self.value

    @property
    def pretty_name(self) -> str:
        return {
            MainLoader.FORGE: "Forge",
            MainLoader.NEOFORGE: "NeoForge",
            MainLoader.FABRIC: "Fabric",
            MainLoader.QUILT: "Quilt",
        }[self]


class Loader(Enum):
    """Modrinth 上的全部加载器，包括光影加载器"""

    # 资源包与数据包
    MINECRAFT = "minecraft"

    # 模组
    FABRIC = "fabric"
    FORGE = "forge"
    NEOFORGE = "neoforge"
    QUILT = "quilt"
    BABRIC = "babric"
    BTA_BABRIC = "bta-babric"
    JAVA_AGENT = "java-agent"
    LEGACY_FABRIC = "legacy-fabric"
    LITELOADER = "liteloader"
    MODLOADER = "modloader"
    NILLOADER = "nilloader"
    ORNITHE = "ornithe"
    RIFT = "rift"

    # 光影
    CANVAS = "canvas"
    IRIS = "iris"
    OPTIFINE = "optifine"
    VANILLA = "vanilla"

    # 插件
    BUKKIT = "bukkit"
    FOLIA = "folia"
    PAPER = "paper"
    PURPUR = "purpur"
    SPIGOT = "spigot"
    SPONGE = "sponge"

    # 代理端
    BUNGEECORD = "bungeecord"
    VELOCITY = "velocity"
    WATERFALL = "waterfall"


@dataclass
class ProjectInfo:
    """
    模组项目信息。
    """

    id: str
    slug: str
    title: str
    client_side: SideSupport
    server_side: SideSupport
    project_type: str

    @classmethod
    def from_modrinth(cls, data: dict) -> "ProjectInfo":
        return cls(
            id=data["id"],
            slug=data.get("slug", ""),
            title=data["title"],
            client_side=SideSupport(data["client_side"]),
            server_side=SideSupport(data["server_side"]),
            project_type=data["project_type"],
        )


@dataclass
class FileInfo:
    """文件信息"""

    url: str
    filename: str
    size: int
    sha1: str
    sha512: str
    primary: bool = False


@dataclass
class DependencyInfo:
    """依赖信息"""

    dependency_type: DependencyType
    project_id: Optional[str] = None
    version_id: Optional[str] = None


@dataclass
class VersionInfo:
    """
    模组版本信息。
    """

    id: str
    project_id: str
    version: str
    version_type: VersionType
    game_versions: List[str] = field(default_factory=list)
    loaders: List[str] = field(default_factory=list)
    files: List[FileInfo] = field(default_factory=list)
    dependencies: List[DependencyInfo] = field(default_factory=list)

    @classmethod
    def from_modrinth(cls, data: dict) -> "VersionInfo":
        """
        将 Modrinth API 返回的版本信息转换为 VersionInfo 对象。
        """
        files = [
            FileInfo(
                url=file["url"],
                filename=file["filename"],
                size=file["size"],
                sha1=file["hashes"]["sha1"],
                sha512=file["hashes"]["sha512"],
                primary=file.get("primary", False),
            )
            for file in data.get("files", [])
        ]

        dependencies = [
            DependencyInfo(
                dependency_type=DependencyType(dep.get("dependency_type", "required")),
                project_id=dep.get("project_id"),
                version_id=dep.get("version_id"),
            )
            for dep in data.get("dependencies", [])
        ]

        return cls(
            id=data["id"],
            project_id=data["project_id"],
            version=data.get("version_number", ""),
            version_type=VersionType(data["version_type"]),
            game_versions=data.get("game_versions", []),
            loaders=data.get("loaders", []),
            files=files,
            dependencies=dependencies,
        )
