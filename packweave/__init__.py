"""
Packweave

按分支管理 Modrinth 整合包：解析项目版本、导出与导入 .mrpack。
"""

__version__ = "0.1.0"
