"""
目录导出协作方 - 以预先导出的DXF目录充当宿主导出

宿主已把每张图纸导出为DXF时，按图号定位文件并复制到目标目录，
文件名保持不变（后续交付物沿用导出名）。

测试要点：
- test_export_copies_files: 复制且不改动源文件
- test_export_missing_sheet: 单张缺失跳过
- test_export_nothing_found: 全部缺失返回空列表
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..interfaces import ExportError, ISheetExporter
from ..models import SheetRef
from ..pipeline.file_locator import find_drawing_for_sheet

logger = logging.getLogger(__name__)


class FolderSheetExporter(ISheetExporter):
    """从已导出目录复制图纸文件"""

    def __init__(self, source_dir: Path, suffix: str = ".dxf"):
        self.source_dir = source_dir
        self.suffix = suffix

    def export_sheets(self, sheets: list[SheetRef], output_dir: Path) -> list[Path]:
        if not self.source_dir.is_dir():
            raise ExportError(f"导出源目录不存在: {self.source_dir}")
        if not sheets:
            return []

        output_dir.mkdir(parents=True, exist_ok=True)
        exported = []
        for sheet in sheets:
            source = find_drawing_for_sheet(sheet.identifier, self.source_dir, self.suffix)
            if source is None:
                logger.warning(f"未找到图纸导出文件: {sheet.identifier}")
                continue
            target = output_dir / source.name
            shutil.copy2(source, target)
            exported.append(target)

        logger.info(f"导出完成: {len(exported)}/{len(sheets)} -> {output_dir}")
        return exported
