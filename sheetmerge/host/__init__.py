"""
宿主边界 - 图纸来源与导出协作方

宿主应用（出图软件）只通过 ISheetSource / ISheetExporter 与本系统交互。
"""

from .folder_exporter import FolderSheetExporter
from .sheet_source import ManifestSheetSource, collect_sheets

__all__ = [
    "ManifestSheetSource",
    "FolderSheetExporter",
    "collect_sheets",
]
