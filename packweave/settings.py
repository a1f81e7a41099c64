"""
工具设置

从 TOML/JSON/YAML 文件加载 packweave 自身的设置（与整合包配置无关）。
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import toml
import yaml

from packweave import __version__
from packweave.exceptions import ConfigParseError, ConfigValidationError


DEFAULT_SETTINGS_FILE_NAME = "packweave.toml"
MODRINTH_BASE_URL = "https://api.modrinth.com/v2"


@dataclass
class APISettings:
    base_url: str = MODRINTH_BASE_URL
    user_agent: str = f"packweave/{__version__}"
    timeout: float = 30.0


@dataclass
class UpdateSettings:
    no_alpha: bool = False
    no_beta: bool = False


@dataclass
class LogSettings:
    level: Optional[str] = None
    file: Optional[str] = None


@dataclass
class Settings:
    """packweave 设置"""

    api: APISettings = field(default_factory=APISettings)
    update: UpdateSettings = field(default_factory=UpdateSettings)
    log: LogSettings = field(default_factory=LogSettings)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        try:
            return cls(
                api=APISettings(**data.get("api", {})),
                update=UpdateSettings(**data.get("update", {})),
                log=LogSettings(**data.get("log", {})),
            )
        except TypeError as e:
            raise ConfigValidationError(f"设置文件包含未知字段: {e}")


def load_settings_file(path: Union[str, Path]) -> dict:
    """按后缀解析设置文件"""
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            return toml.load(path)
        elif suffix == ".json":
            return json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(
            f"设置文件 {path} 无效: {e}", context={"path": str(path)}
        )

    raise ConfigParseError(
        f"不支持的设置文件格式: {suffix}",
        context={"path": str(path)},
        tip="使用 .toml、.json 或 .yaml 文件",
    )


def load_settings(
    path: Optional[Union[str, Path]] = None,
    modpack_dir: Optional[Path] = None,
) -> Settings:
    """
    加载设置

    未指定路径时尝试读取整合包目录中的 packweave.toml，不存在则使用默认设置。
    """
    if path is None and modpack_dir is not None:
        default_path = Path(modpack_dir) / DEFAULT_SETTINGS_FILE_NAME
        if default_path.exists():
            path = default_path

    if path is None:
        return Settings()
    return Settings.from_dict(load_settings_file(path))
