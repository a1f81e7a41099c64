"""
配置持久化

负责 modpack.json、branch.json 与 .branch_files.json 的读写。
"""

import json
import os
import shutil
from pathlib import Path
from typing import Any, List

import aiofiles
from loguru import logger

from packweave.exceptions import (
    BranchNotFoundError,
    ConfigError,
    ConfigParseError,
    ModpackAlreadyExistsError,
)
from packweave.models import BranchConfig, BranchFiles, Modpack


MODPACK_CONFIG_FILE_NAME = "modpack.json"
BRANCH_CONFIG_FILE_NAME = "branch.json"
BRANCH_FILES_FILE_NAME = ".branch_files.json"
TARGET_DIRECTORY = "target"


def to_json(data: Any) -> str:
    """序列化为稳定的、以制表符缩进的 JSON"""
    return json.dumps(data, indent="\t", ensure_ascii=False)


async def write_json(path: Path, data: Any):
    try:
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(to_json(data))
    except OSError as e:
        raise ConfigError(
            f"写入文件 {path} 失败: {e}", context={"path": str(path)}
        )


async def read_json(path: Path) -> Any:
    """读取 JSON 文件，文件不存在时抛出 FileNotFoundError"""
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()
    except FileNotFoundError:
        raise
    except OSError as e:
        raise ConfigError(
            f"读取文件 {path} 失败: {e}", context={"path": str(path)}
        )

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigParseError(
            f"配置文件 {path} 无效: {e}", context={"path": str(path)}
        )


async def init_modpack(directory: Path, force: bool = False) -> Modpack:
    """在目录中初始化一个新的整合包"""
    directory = Path(directory)
    config_path = directory / MODPACK_CONFIG_FILE_NAME
    if not force and config_path.exists():
        raise ModpackAlreadyExistsError(str(directory))
    if directory.is_file():
        raise ConfigError(
            f"路径 {directory} 是一个文件",
            tip="删除该文件或更换目标目录",
        )

    directory.mkdir(parents=True, exist_ok=True)
    modpack = Modpack(directory=directory)
    await save_modpack(modpack)
    logger.info(f"已在 {directory} 初始化整合包")
    return modpack


async def load_modpack(directory: Path) -> Modpack:
    directory = Path(directory)
    config_path = directory / MODPACK_CONFIG_FILE_NAME
    try:
        data = await read_json(config_path)
    except FileNotFoundError:
        raise ConfigError(
            f"{directory} 中没有 {MODPACK_CONFIG_FILE_NAME}",
            context={"directory": str(directory)},
            tip="使用子命令初始化整合包: init",
        )
    return Modpack.from_dict(data, directory)


async def save_modpack(modpack: Modpack):
    await write_json(modpack.directory / MODPACK_CONFIG_FILE_NAME, modpack.to_dict())


def branch_dir(modpack: Modpack, branch: str) -> Path:
    return modpack.directory / branch


def _require_branch_dir(modpack: Modpack, branch: str) -> Path:
    path = branch_dir(modpack, branch)
    if not path.exists():
        raise BranchNotFoundError(branch)
    if not path.is_dir():
        raise BranchNotFoundError(branch, f"{path} 不是目录")
    return path


async def load_branch_config(modpack: Modpack, branch: str) -> BranchConfig:
    """读取分支配置，配置文件不存在时写入默认配置"""
    path = _require_branch_dir(modpack, branch) / BRANCH_CONFIG_FILE_NAME
    try:
        data = await read_json(path)
    except FileNotFoundError:
        logger.debug(f"分支 {branch} 没有 {BRANCH_CONFIG_FILE_NAME}，使用默认配置")
        config = BranchConfig()
        await save_branch_config(modpack, branch, config)
        return config
    return BranchConfig.from_dict(data)


async def save_branch_config(modpack: Modpack, branch: str, config: BranchConfig):
    await write_json(
        branch_dir(modpack, branch) / BRANCH_CONFIG_FILE_NAME, config.to_dict()
    )


async def load_branch_files(modpack: Modpack, branch: str) -> BranchFiles:
    path = _require_branch_dir(modpack, branch) / BRANCH_FILES_FILE_NAME
    try:
        data = await read_json(path)
    except FileNotFoundError:
        return BranchFiles()
    return BranchFiles.from_dict(data)


async def save_branch_files(modpack: Modpack, branch: str, files: BranchFiles):
    await write_json(branch_dir(modpack, branch) / BRANCH_FILES_FILE_NAME, files.to_dict())


async def create_branch(modpack: Modpack, name: str) -> BranchConfig:
    """
    创建分支

    注册分支名称并创建分支目录。分支已存在时直接返回现有配置。
    """
    if name not in modpack.branches:
        modpack.branches.append(name)
    path = branch_dir(modpack, name)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(
            f"创建目录 {path} 失败: {e}", context={"path": str(path)}
        )
    return await load_branch_config(modpack, name)


def remove_branches(modpack: Modpack, names: List[str]):
    """移除分支及其目录（包括 overrides）"""
    for name in names:
        if name not in modpack.branches:
            continue
        modpack.branches.remove(name)
        path = branch_dir(modpack, name)
        if os.path.isdir(path):
            try:
                shutil.rmtree(path)
            except OSError as e:
                raise ConfigError(
                    f"删除目录 {path} 失败: {e}", context={"path": str(path)}
                )
        logger.info(f"已移除分支 {name}")
