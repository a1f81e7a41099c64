"""
版本匹配服务

计算查询用的加载器与游戏版本集合，对候选版本排序并按稳定性挑选。
"""

from functools import cmp_to_key
from typing import List, Optional

import semver

from packweave.models import BranchConfig, Loader, VersionInfo, VersionType


# 原版资源包与原版光影总是可接受的
BASELINE_LOADERS = (Loader.MINECRAFT.value, Loader.VANILLA.value)


def _append_unique(values: List[str], value: str):
    if value not in values:
        values.append(value)


def parse_semver(version: str) -> Optional[semver.Version]:
    try:
        return semver.Version.parse(version)
    except (ValueError, TypeError):
        return None


class VersionMatcher:
    """版本匹配器"""

    def effective_loaders(self, branch_config: BranchConfig) -> List[str]:
        """分支可接受的加载器 + 主加载器 + 基础加载器"""
        loaders: List[str] = []
        for loader in branch_config.acceptable_loaders:
            _append_unique(loaders, loader.value)
        if branch_config.mod_loader is not None:
            _append_unique(loaders, branch_config.mod_loader.value)
        for loader in BASELINE_LOADERS:
            _append_unique(loaders, loader)
        return loaders

    def effective_game_versions(self, branch_config: BranchConfig) -> List[str]:
        """主游戏版本 + 可接受的游戏版本"""
        game_versions = [branch_config.minecraft_version]
        for version in branch_config.acceptable_minecraft_versions:
            _append_unique(game_versions, version)
        return game_versions

    @staticmethod
    def newest_game_version(version: VersionInfo) -> Optional[semver.Version]:
        """候选版本声明的游戏版本中最大的语义化版本，全部无法解析时为 None"""
        parsed = [parse_semver(v) for v in version.game_versions]
        parsed = [v for v in parsed if v is not None]
        return max(parsed) if parsed else None

    @classmethod
    def _compare(cls, a: VersionInfo, b: VersionInfo) -> int:
        newest_a = cls.newest_game_version(a)
        newest_b = cls.newest_game_version(b)
        if newest_a is None and newest_b is None:
            return 0
        if newest_a is None:
            return 1
        if newest_b is None:
            return -1
        # 降序
        return newest_b.compare(newest_a)

    def rank(self, candidates: List[VersionInfo]) -> List[VersionInfo]:
        """
        按兼容的最新游戏版本降序排序

        无法解析的排在可解析的之后；相等时保持原有顺序。
        """
        return sorted(candidates, key=cmp_to_key(self._compare))

    def select(
        self,
        ranked: List[VersionInfo],
        no_alpha: bool = False,
        no_beta: bool = False,
    ) -> Optional[VersionInfo]:
        """逐个检查稳定性，返回第一个可接受的候选版本"""
        for candidate in ranked:
            if candidate.version_type == VersionType.RELEASE:
                return candidate
            if candidate.version_type == VersionType.BETA and not no_beta:
                return candidate
            if candidate.version_type == VersionType.ALPHA and not no_alpha:
                return candidate
        return None
