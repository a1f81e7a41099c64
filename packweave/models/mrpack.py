"""
mrpack 数据模型

对应 Modrinth 整合包格式 (modrinth.index.json) 中的结构。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from packweave.models.api import MainLoader, SideSupport


MRPACK_INDEX_FILE_NAME = "modrinth.index.json"
MRPACK_FORMAT_VERSION = 1
GAME = "minecraft"


@dataclass
class FileHashes:
    sha1: str
    sha512: str

    def to_dict(self) -> Dict[str, str]:
        return {"sha1": self.sha1, "sha512": self.sha512}

    @classmethod
    def from_dict(cls, data: dict) -> "FileHashes":
        return cls(sha1=data["sha1"], sha512=data["sha512"])


@dataclass
class Env:
    """客户端/服务端支持情况"""

    client: SideSupport
    server: SideSupport

    def to_dict(self) -> Dict[str, str]:
        return {"client": self.client.value, "server": self.server.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Env":
        return cls(
            client=SideSupport(data["client"]),
            server=SideSupport(data["server"]),
        )


@dataclass
class File:
    """
    解析后的文件条目

    project_name 只用于显示，不写入 modrinth.index.json。
    """

    path: str
    hashes: FileHashes
    downloads: List[str]
    file_size: int
    env: Optional[Env] = None
    project_name: str = ""

    @property
    def display_name(self) -> str:
        return self.project_name or self.path.rsplit("/", 1)[-1]

    def to_dict(self, include_name: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if include_name and self.project_name:
            data["project_name"] = self.project_name
        data["path"] = self.path
        data["hashes"] = self.hashes.to_dict()
        if self.env is not None:
            data["env"] = self.env.to_dict()
        data["downloads"] = list(self.downloads)
        data["fileSize"] = self.file_size
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "File":
        env = data.get("env")
        return cls(
            path=data["path"],
            hashes=FileHashes.from_dict(data["hashes"]),
            downloads=list(data.get("downloads", [])),
            file_size=int(data.get("fileSize", 0)),
            env=Env.from_dict(env) if env else None,
            project_name=data.get("project_name", ""),
        )


# 检查顺序固定：导入时第一个有值的加载器生效
LOADER_FIELDS: Tuple[Tuple[str, MainLoader], ...] = (
    ("forge", MainLoader.FORGE),
    ("neoforge", MainLoader.NEOFORGE),
    ("fabric-loader", MainLoader.FABRIC),
    ("quilt-loader", MainLoader.QUILT),
)


@dataclass
class MrpackDependencies:
    """游戏版本与最多一个加载器的安装版本"""

    minecraft: str
    forge: Optional[str] = None
    neoforge: Optional[str] = None
    fabric_loader: Optional[str] = None
    quilt_loader: Optional[str] = None

    @classmethod
    def for_loader(
        cls,
        minecraft: str,
        loader: Optional[MainLoader],
        loader_version: Optional[str],
    ) -> "MrpackDependencies":
        deps = cls(minecraft=minecraft)
        if loader is not None:
            setattr(deps, loader.mrpack_key.replace("-", "_"), loader_version)
        return deps

    def main_loader(self) -> Tuple[Optional[MainLoader], Optional[str]]:
        """按固定顺序返回第一个有值的加载器及其版本"""
        for key, loader in LOADER_FIELDS:
            value = getattr(self, key.replace("-", "_"))
            if value:
                return loader, value
        return None, None

    def to_dict(self) -> Dict[str, str]:
        data = {"minecraft": self.minecraft}
        for key, _ in LOADER_FIELDS:
            value = getattr(self, key.replace("-", "_"))
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "MrpackDependencies":
        return cls(
            minecraft=data["minecraft"],
            forge=data.get("forge"),
            neoforge=data.get("neoforge"),
            fabric_loader=data.get("fabric-loader"),
            quilt_loader=data.get("quilt-loader"),
        )


@dataclass
class MrpackIndex:
    """modrinth.index.json 的内容"""

    version_id: str
    name: str
    dependencies: MrpackDependencies
    files: List[File] = field(default_factory=list)
    summary: Optional[str] = None
    format_version: int = MRPACK_FORMAT_VERSION
    game: str = GAME

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "formatVersion": self.format_version,
            "game": self.game,
            "versionId": self.version_id,
            "name": self.name,
        }
        if self.summary is not None:
            data["summary"] = self.summary
        data["files"] = [file.to_dict() for file in self.files]
        data["dependencies"] = self.dependencies.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "MrpackIndex":
        return cls(
            format_version=data["formatVersion"],
            game=data["game"],
            version_id=data["versionId"],
            name=data["name"],
            summary=data.get("summary"),
            files=[File.from_dict(file) for file in data.get("files", [])],
            dependencies=MrpackDependencies.from_dict(data["dependencies"]),
        )
