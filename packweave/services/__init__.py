"""
Packweave 服务层

包含业务逻辑服务：API 客户端、策略判断、版本匹配、模组解析、依赖处理与 mrpack 导入。
"""

from packweave.services.api_client import CatalogClient, ModrinthClient
from packweave.services.policy import (
    PolicyDecision,
    Skip,
    UseOverride,
    UseQuery,
    evaluate_policy,
)
from packweave.services.version_matcher import VersionMatcher
from packweave.services.artifact_builder import ArtifactBuilder
from packweave.services.mod_resolver import FileResult, ResolveStatus, VersionResolver
from packweave.services.dependency_resolver import DependencyResolver
from packweave.services.mrpack_resolver import ImportReport, MrpackImporter

__all__ = [
    "CatalogClient",
    "ModrinthClient",
    "PolicyDecision",
    "Skip",
    "UseOverride",
    "UseQuery",
    "evaluate_policy",
    "VersionMatcher",
    "ArtifactBuilder",
    "FileResult",
    "ResolveStatus",
    "VersionResolver",
    "DependencyResolver",
    "ImportReport",
    "MrpackImporter",
]
