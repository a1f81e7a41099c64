"""
Packweave 打包层

包含 mrpack 生成器。
"""

from packweave.packager.mrpack import OVERRIDE_DIRS, MrpackBuilder, create_dependencies

__all__ = [
    "OVERRIDE_DIRS",
    "MrpackBuilder",
    "create_dependencies",
]
