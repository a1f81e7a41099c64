"""
策略判断

根据分支名与项目设置决定跳过、使用版本覆盖还是查询目录。
"""

from dataclasses import dataclass
from typing import Union

from packweave.models import Exclude, Include, ProjectSettings


@dataclass(frozen=True)
class Skip:
    """该项目不适用于此分支"""


@dataclass(frozen=True)
class UseOverride:
    """直接获取指定的版本"""

    version_id: str


@dataclass(frozen=True)
class UseQuery:
    """按加载器与游戏版本查询候选版本"""


PolicyDecision = Union[Skip, UseOverride, UseQuery]


def evaluate_policy(branch: str, settings: ProjectSettings) -> PolicyDecision:
    """
    判断项目在分支中的处理方式

    规则按顺序匹配：包含列表不含该分支、排除列表含该分支时跳过；
    存在该分支的版本覆盖时使用覆盖；否则查询。分支名按字面比较。
    """
    rule = settings.include_or_exclude
    if isinstance(rule, Include) and branch not in rule.branches:
        return Skip()
    if isinstance(rule, Exclude) and branch in rule.branches:
        return Skip()

    overrides = settings.version_overrides
    if overrides and branch in overrides:
        return UseOverride(overrides[branch])

    return UseQuery()
