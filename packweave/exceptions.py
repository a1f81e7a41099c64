"""
Packweave 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息、修复建议和 JSON 序列化。
"""

from typing import Any, Dict, List, Optional

import aiohttp


FILE_AN_ISSUE = "请在项目仓库提交 issue"


class PackweaveError(Exception):
    """Packweave 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        tip: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}
        self.tip = tip or self._get_default_tip()

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def _get_default_tip(self) -> str:
        """获取默认修复建议"""
        return FILE_AN_ISSUE

    def message_and_tip(self) -> tuple[str, str]:
        return self.message, self.tip

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "tip": self.tip,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(PackweaveError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"

    def _get_default_tip(self) -> str:
        return "检查配置文件是否存在以及是否有读写权限"


class ConfigParseError(ConfigError):
    """配置解析错误"""

    def _get_default_code(self) -> str:
        return "E101"

    def _get_default_tip(self) -> str:
        return "按照 JSON/TOML/YAML 语法修复配置文件"


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def _get_default_code(self) -> str:
        return "E102"

    def _get_default_tip(self) -> str:
        return "按照文档修正配置文件中的字段"


class ProjectNotAddedError(ConfigError):
    """项目未加入整合包"""

    def __init__(self, project: str):
        super().__init__(
            f"项目 {project} 尚未加入此整合包",
            context={"project": project},
            tip="使用子命令添加: project add",
        )

    def _get_default_code(self) -> str:
        return "E103"


class InclusionExclusionConflictError(ConfigError):
    """项目同时声明包含列表与排除列表"""

    def __init__(self, project: str, existing: str):
        super().__init__(
            f"项目 {project} 已存在 {existing} 列表",
            context={"project": project, "existing": existing},
            tip="一个项目只能拥有包含列表或排除列表之一",
        )

    def _get_default_code(self) -> str:
        return "E104"


class OverrideNotFoundError(ConfigError):
    """版本覆盖不存在"""

    def _get_default_code(self) -> str:
        return "E105"

    def _get_default_tip(self) -> str:
        return "使用子命令添加: project override add"


class InclusionsNotFoundError(ConfigError):
    """项目没有对应的包含/排除列表"""

    def _get_default_code(self) -> str:
        return "E106"

    def _get_default_tip(self) -> str:
        return "使用子命令添加: project include add / project exclude add"


class MissingLoaderVersionError(ConfigError):
    """声明了主加载器但没有加载器版本"""

    def __init__(self, branch: str = ""):
        super().__init__(
            f"分支 {branch} 声明了主加载器但没有设置 loader_version",
            context={"branch": branch},
            tip="在 branch.json 中添加 loader_version 字段",
        )

    def _get_default_code(self) -> str:
        return "E107"


class BranchNotFoundError(ConfigError):
    """分支不存在"""

    def __init__(self, branch: str, reason: str = ""):
        super().__init__(
            f"分支 {branch} 不存在" + (f": {reason}" if reason else ""),
            context={"branch": branch},
            tip="使用子命令添加分支: branch add",
        )

    def _get_default_code(self) -> str:
        return "E108"


class BranchAlreadyExistsError(ConfigError):
    """分支已存在"""

    def __init__(self, branch: str):
        super().__init__(
            f"分支 {branch} 已存在",
            context={"branch": branch},
            tip="使用 --force 覆盖现有分支，或先重命名 .mrpack 文件",
        )

    def _get_default_code(self) -> str:
        return "E109"


class ModpackAlreadyExistsError(ConfigError):
    """目录中已存在整合包"""

    def __init__(self, directory: str):
        super().__init__(
            f"目录 {directory} 中已存在整合包配置",
            context={"directory": directory},
            tip="使用 --force 重新初始化",
        )

    def _get_default_code(self) -> str:
        return "E110"


class InvalidPackFormatError(ConfigError):
    """不支持的配置格式版本"""

    def __init__(self, pack_format: Any, supported: int):
        super().__init__(
            f"当前版本不支持 pack format {pack_format}",
            context={"pack_format": pack_format},
            tip=f"请使用 pack format 为 {supported} 的配置",
        )

    def _get_default_code(self) -> str:
        return "E111"


class APIError(PackweaveError):
    """API 相关错误"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
        tip: Optional[str] = None,
    ):
        super().__init__(message, code, context, tip)
        self.response = response
        if response:
            self.context["status_code"] = response.status
            self.context["url"] = str(response.url)

    def _get_default_code(self) -> str:
        return "E200"

    def _get_default_tip(self) -> str:
        return f"检查网络连接，或{FILE_AN_ISSUE}"


class RequestFailedError(APIError):
    """请求发送失败（网络错误）"""

    def _get_default_code(self) -> str:
        return "E201"


class InvalidResponseError(APIError):
    """API 返回内容无法解析"""

    def _get_default_code(self) -> str:
        return "E202"

    def _get_default_tip(self) -> str:
        return FILE_AN_ISSUE


class APINotFoundError(APIError):
    """API 资源不存在"""

    def _get_default_code(self) -> str:
        return "E404"

    def _get_default_tip(self) -> str:
        return "检查项目 ID 或版本 ID 是否拼写正确"


class APIRateLimitError(APIError):
    """API 速率限制"""

    def _get_default_code(self) -> str:
        return "E429"

    def _get_default_tip(self) -> str:
        return "请稍后重试"


class APIServerError(APIError):
    """API 服务器错误"""

    def _get_default_code(self) -> str:
        return "E500"


class ResolveError(PackweaveError):
    """版本解析相关错误"""

    def _get_default_code(self) -> str:
        return "E600"


class ModpackProjectError(ResolveError):
    """尝试把整合包作为项目加入整合包"""

    def __init__(self, project: str):
        super().__init__(
            f"项目 {project} 本身是一个整合包",
            context={"project": project},
            tip=f"使用子命令移除该项目: project remove {project}",
        )

    def _get_default_code(self) -> str:
        return "E601"


class UnsupportedProjectTypeError(ResolveError):
    """不支持的项目类型"""

    def __init__(self, project: str, project_type: str):
        super().__init__(
            f"项目 {project} 的类型 {project_type} 不受支持",
            context={"project": project, "project_type": project_type},
            tip="只支持 mod、resourcepack 与 shader 类型的项目",
        )

    def _get_default_code(self) -> str:
        return "E602"


class NoFilesError(ResolveError):
    """版本不包含任何文件"""

    def __init__(self, version_id: str):
        super().__init__(
            f"版本 {version_id} 不包含任何文件",
            context={"version_id": version_id},
            tip="为该项目添加版本覆盖，指定其他版本",
        )

    def _get_default_code(self) -> str:
        return "E603"


class PackagerError(PackweaveError):
    """打包相关错误"""

    def _get_default_code(self) -> str:
        return "E400"


class MrpackError(PackagerError):
    """Mrpack 容器读写错误"""

    def _get_default_code(self) -> str:
        return "E401"

    def _get_default_tip(self) -> str:
        return "检查文件权限以及 .mrpack 文件是否损坏"


class ArchivePathError(PackagerError):
    """路径无法表示为归档内的相对路径"""

    def __init__(self, path: str):
        super().__init__(
            f"路径 {path} 无法表示为相对路径",
            context={"path": path},
        )

    def _get_default_code(self) -> str:
        return "E402"


class ExportIncompleteError(PackagerError):
    """导出完成，但部分条目失败"""

    def __init__(self, output_path: str, errors: List[PackweaveError]):
        super().__init__(
            f"导出 {output_path} 时有 {len(errors)} 个条目失败",
            context={
                "output_path": output_path,
                "errors": [str(error) for error in errors],
            },
        )
        self.output_path = output_path
        self.errors = errors

    def _get_default_code(self) -> str:
        return "E403"


class MrpackImportError(PackweaveError):
    """导入 mrpack 相关错误"""

    def _get_default_code(self) -> str:
        return "E700"


class ManifestMissingError(MrpackImportError):
    """mrpack 中缺少 modrinth.index.json"""

    def __init__(self, path: str):
        super().__init__(
            f"{path} 中缺少 modrinth.index.json",
            context={"path": path},
            tip="确认文件是有效的 Modrinth 整合包",
        )

    def _get_default_code(self) -> str:
        return "E701"


class ManifestInvalidError(MrpackImportError):
    """modrinth.index.json 无法解析"""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"{path} 中的 modrinth.index.json 无效: {reason}",
            context={"path": path, "reason": reason},
            tip="确认文件是有效的 Modrinth 整合包",
        )

    def _get_default_code(self) -> str:
        return "E702"


__all__ = [
    # 基础异常
    "PackweaveError",
    # 配置异常
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    "ProjectNotAddedError",
    "InclusionExclusionConflictError",
    "OverrideNotFoundError",
    "InclusionsNotFoundError",
    "MissingLoaderVersionError",
    "BranchNotFoundError",
    "BranchAlreadyExistsError",
    "ModpackAlreadyExistsError",
    "InvalidPackFormatError",
    # API 异常
    "APIError",
    "RequestFailedError",
    "InvalidResponseError",
    "APINotFoundError",
    "APIRateLimitError",
    "APIServerError",
    # 解析异常
    "ResolveError",
    "ModpackProjectError",
    "UnsupportedProjectTypeError",
    "NoFilesError",
    # 打包异常
    "PackagerError",
    "MrpackError",
    "ArchivePathError",
    "ExportIncompleteError",
    # 导入异常
    "MrpackImportError",
    "ManifestMissingError",
    "ManifestInvalidError",
]
