"""
配置数据模型

整合包 (modpack.json)、分支配置 (branch.json) 与分支文件清单 (.branch_files.json)。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from packweave.exceptions import (
    ConfigValidationError,
    InclusionExclusionConflictError,
    InclusionsNotFoundError,
    InvalidPackFormatError,
    OverrideNotFoundError,
    ProjectNotAddedError,
)
from packweave.models.api import Loader, MainLoader
from packweave.models.mrpack import File


CURRENT_PACK_FORMAT = 1


@dataclass(frozen=True)
class Include:
    """只在这些分支中使用该项目"""

    branches: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "branches", tuple(self.branches))

    def __contains__(self, branch: str) -> bool:
        return branch in self.branches


@dataclass(frozen=True)
class Exclude:
    """在这些分支中不使用该项目"""

    branches: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "branches", tuple(self.branches))

    def __contains__(self, branch: str) -> bool:
        return branch in self.branches


IncludeOrExclude = Union[Include, Exclude]


@dataclass
class ProjectSettings:
    """
    单个项目的设置

    include_or_exclude 是 Include 或 Exclude 之一，不会同时存在两者。
    """

    version_overrides: Optional[Dict[str, str]] = None
    include_or_exclude: Optional[IncludeOrExclude] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.version_overrides is not None:
            data["version_overrides"] = dict(self.version_overrides)
        if isinstance(self.include_or_exclude, Include):
            data["include"] = list(self.include_or_exclude.branches)
        elif isinstance(self.include_or_exclude, Exclude):
            data["exclude"] = list(self.include_or_exclude.branches)
        return data

    @classmethod
    def from_dict(cls, data: Optional[dict], project: str = "") -> "ProjectSettings":
        data = data or {}
        if "include" in data and "exclude" in data:
            raise ConfigValidationError(
                f"项目 {project} 同时声明了 include 与 exclude",
                context={"project": project},
                tip="一个项目只能拥有包含列表或排除列表之一",
            )

        include_or_exclude: Optional[IncludeOrExclude] = None
        if "include" in data:
            include_or_exclude = Include(tuple(data["include"]))
        elif "exclude" in data:
            include_or_exclude = Exclude(tuple(data["exclude"]))

        overrides = data.get("version_overrides")
        return cls(
            version_overrides=dict(overrides) if overrides is not None else None,
            include_or_exclude=include_or_exclude,
        )


@dataclass
class Modpack:
    """
    整合包根目录下的配置 (modpack.json)

    修改整合包的方法都不会自动保存，保存由 storage.save_modpack 完成。
    """

    name: str = "My Modrinth modpack"
    summary: str = "Short summary for this modpack"
    author: str = "John Doe"
    require_all: bool = False
    auto_dependencies: bool = True
    branches: List[str] = field(default_factory=list)
    # 键为 Modrinth 项目 ID 或 slug，保持插入顺序
    projects: Dict[str, ProjectSettings] = field(default_factory=dict)
    pack_format: int = CURRENT_PACK_FORMAT
    directory: Path = field(default_factory=Path, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pack_format": self.pack_format,
            "name": self.name,
            "summary": self.summary,
            "author": self.author,
            "require_all": self.require_all,
            "auto_dependencies": self.auto_dependencies,
            "branches": list(self.branches),
            "projects": {
                project: settings.to_dict()
                for project, settings in self.projects.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict, directory: Optional[Path] = None) -> "Modpack":
        pack_format = data.get("pack_format", CURRENT_PACK_FORMAT)
        if pack_format != CURRENT_PACK_FORMAT:
            raise InvalidPackFormatError(pack_format, CURRENT_PACK_FORMAT)

        try:
            return cls(
                pack_format=pack_format,
                name=data["name"],
                summary=data.get("summary", ""),
                author=data.get("author", ""),
                require_all=bool(data.get("require_all", False)),
                auto_dependencies=bool(data.get("auto_dependencies", True)),
                branches=list(data.get("branches", [])),
                projects={
                    project: ProjectSettings.from_dict(settings, project)
                    for project, settings in data.get("projects", {}).items()
                },
                directory=directory or Path(),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigValidationError(f"modpack.json 字段无效: {e}")

    def _settings(self, project: str) -> ProjectSettings:
        settings = self.projects.get(project)
        if settings is None:
            raise ProjectNotAddedError(project)
        return settings

    def add_projects(
        self,
        projects: List[str],
        version_overrides: Optional[Dict[str, str]] = None,
        include_or_exclude: Optional[IncludeOrExclude] = None,
    ):
        """添加项目，已存在的项目设置会被替换"""
        for project in projects:
            self.projects[project] = ProjectSettings(
                version_overrides=dict(version_overrides) if version_overrides else None,
                include_or_exclude=include_or_exclude,
            )

    def remove_projects(self, projects: List[str]):
        for project in projects:
            self.projects.pop(project, None)

    def add_version_override(self, project: str, branch: str, version_id: str):
        settings = self._settings(project)
        if settings.version_overrides is None:
            settings.version_overrides = {}
        settings.version_overrides[branch] = version_id

    def remove_version_override(self, project: str, branch: str):
        settings = self._settings(project)
        if not settings.version_overrides:
            raise OverrideNotFoundError(
                f"项目 {project} 没有任何版本覆盖", context={"project": project}
            )
        if settings.version_overrides.pop(branch, None) is None:
            raise OverrideNotFoundError(
                f"项目 {project} 没有分支 {branch} 的版本覆盖",
                context={"project": project, "branch": branch},
            )

    def remove_all_version_overrides(self, project: str):
        self._settings(project).version_overrides = None

    def _add_to_list(self, project: str, branches: List[str], kind: type):
        settings = self._settings(project)
        current = settings.include_or_exclude
        if current is None:
            settings.include_or_exclude = kind(tuple(branches))
        elif isinstance(current, kind):
            settings.include_or_exclude = kind(current.branches + tuple(branches))
        else:
            existing = "exclude" if isinstance(current, Exclude) else "include"
            raise InclusionExclusionConflictError(project, existing)

    def _remove_from_list(
        self, project: str, branches: Optional[List[str]], kind: type
    ):
        settings = self._settings(project)
        current = settings.include_or_exclude
        if not isinstance(current, kind):
            label = "包含" if kind is Include else "排除"
            raise InclusionsNotFoundError(
                f"项目 {project} 没有{label}列表", context={"project": project}
            )
        if branches is None:
            settings.include_or_exclude = None
        else:
            settings.include_or_exclude = kind(
                tuple(b for b in current.branches if b not in branches)
            )

    def add_project_inclusions(self, project: str, branches: List[str]):
        self._add_to_list(project, branches, Include)

    def remove_project_inclusions(self, project: str, branches: List[str]):
        self._remove_from_list(project, branches, Include)

    def remove_all_project_inclusions(self, project: str):
        self._remove_from_list(project, None, Include)

    def add_project_exclusions(self, project: str, branches: List[str]):
        self._add_to_list(project, branches, Exclude)

    def remove_project_exclusions(self, project: str, branches: List[str]):
        self._remove_from_list(project, branches, Exclude)

    def remove_all_project_exclusions(self, project: str):
        self._remove_from_list(project, None, Exclude)


@dataclass
class BranchConfig:
    """
    分支配置 (branch.json)

    由用户编辑，或由导入 mrpack 时生成。
    """

    version: str = "1.0.0-fabric"
    minecraft_version: str = "1.21.8"
    acceptable_minecraft_versions: List[str] = field(
        default_factory=lambda: ["1.21.6", "1.21.7"]
    )
    mod_loader: Optional[MainLoader] = MainLoader.FABRIC
    loader_version: Optional[str] = "0.17.2"
    acceptable_loaders: List[Loader] = field(
        default_factory=lambda: [Loader.MINECRAFT, Loader.VANILLA]
    )
    manual_files: List[File] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "version": self.version,
            "minecraft_version": self.minecraft_version,
        }
        if self.acceptable_minecraft_versions:
            data["acceptable_minecraft_versions"] = list(
                self.acceptable_minecraft_versions
            )
        if self.mod_loader is not None:
            data["mod_loader"] = self.mod_loader.value
        if self.loader_version is not None:
            data["loader_version"] = self.loader_version
        if self.acceptable_loaders:
            data["acceptable_loaders"] = [
                loader.value for loader in self.acceptable_loaders
            ]
        if self.manual_files:
            data["manual_files"] = [
                file.to_dict(include_name=True) for file in self.manual_files
            ]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "BranchConfig":
        try:
            mod_loader = data.get("mod_loader")
            return cls(
                version=data["version"],
                minecraft_version=data["minecraft_version"],
                acceptable_minecraft_versions=list(
                    data.get("acceptable_minecraft_versions", [])
                ),
                mod_loader=MainLoader(mod_loader) if mod_loader else None,
                loader_version=data.get("loader_version"),
                acceptable_loaders=[
                    Loader(loader) for loader in data.get("acceptable_loaders", [])
                ],
                manual_files=[
                    File.from_dict(file) for file in data.get("manual_files", [])
                ],
            )
        except (KeyError, ValueError, TypeError) as e:
            raise ConfigValidationError(f"branch.json 字段无效: {e}")


@dataclass
class BranchFilesProject:
    """分支中的项目，id 为空表示手动添加的文件"""

    name: str
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {"name": self.name}
        if self.id is not None:
            data["id"] = self.id
        return data


BRANCH_FILES_INFO = (
    "This file is managed by packweave and not intended for manual editing. "
    "It is rebuilt on every update."
)


@dataclass
class BranchFiles:
    """
    分支的解析结果 (.branch_files.json)

    每次更新都会完整重建，可以随时删除。
    """

    projects: List[BranchFilesProject] = field(default_factory=list)
    files: List[File] = field(default_factory=list)
    info: str = BRANCH_FILES_INFO

    def clear(self):
        self.projects = []
        self.files = []

    def add(self, project: BranchFilesProject, file: File):
        self.projects.append(project)
        self.files.append(file)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "info": self.info,
            "projects": [project.to_dict() for project in self.projects],
            "files": [file.to_dict(include_name=True) for file in self.files],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BranchFiles":
        try:
            return cls(
                projects=[
                    BranchFilesProject(name=p["name"], id=p.get("id"))
                    for p in data.get("projects", [])
                ],
                files=[File.from_dict(file) for file in data.get("files", [])],
            )
        except (KeyError, ValueError, TypeError) as e:
            raise ConfigValidationError(f".branch_files.json 字段无效: {e}")
