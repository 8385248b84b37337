"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 宿主（出图软件）只通过 ISheetSource / ISheetExporter 暴露
3. 便于单元测试和mock替换

使用方式：
    from sheetmerge.interfaces import ISheetExporter

    class MyExporter(ISheetExporter):
        def export_sheets(self, sheets: list[SheetRef], output_dir: Path) -> list[Path]:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import MergeResult, PromotionStatus, SheetRef


# ============================================================================
# 宿主边界接口
# ============================================================================

class ISheetSource(ABC):
    """图纸来源接口 - 宿主只读数据边界"""

    @abstractmethod
    def get_sheet_identifiers(self) -> list[str]:
        """获取全部图号（保持宿主给出的顺序）"""
        ...

    @abstractmethod
    def get_sheet_outline_size(self, identifier: str) -> tuple[float, float] | None:
        """
        获取图纸幅面尺寸

        Returns:
            (宽mm, 高mm)，宿主未提供时返回None
        """
        ...

    @abstractmethod
    def get_revision_label(self, identifier: str) -> str | None:
        """获取版次标签"""
        ...


class ISheetExporter(ABC):
    """图纸导出协作方接口 - 每张图纸输出一个DXF"""

    @abstractmethod
    def export_sheets(self, sheets: list[SheetRef], output_dir: Path) -> list[Path]:
        """
        导出图纸

        文件名须能按图号定位：优先包含 " - {图号} - "，否则至少包含图号。

        Args:
            sheets: 待导出图纸
            output_dir: 输出目录

        Returns:
            实际生成的文件路径列表

        Raises:
            ExportError: 整批导出失败
        """
        ...


# ============================================================================
# CAD 处理模块接口
# ============================================================================

class IODAConverter(ABC):
    """ODA 转换器接口 - DXF→DWG 转换"""

    @abstractmethod
    def dxf_to_dwg(self, dxf_path: Path, output_dir: Path) -> Path:
        """
        DXF 转 DWG

        Args:
            dxf_path: 输入DXF文件路径
            output_dir: 输出目录

        Returns:
            生成的DWG文件路径

        Raises:
            ConversionError: 转换失败
        """
        ...


class IPaperToModelPromoter(ABC):
    """图纸空间提升器接口 - 将布局内容按视口对齐到模型空间"""

    @abstractmethod
    def promote(self, dxf_path: Path, content_only: bool = False) -> PromotionStatus:
        """
        原地改写DXF，只保留对齐后的模型空间内容

        流程：
        1. 定位第一个图纸空间布局（无则不处理）
        2. 取该布局第一个内容视口，计算仿射变换
        3. 组合图纸空间实体 + 模型空间副本为一个块，写入全新文档

        Args:
            dxf_path: DXF文件路径（会被覆盖）
            content_only: True 时不保留图纸空间实体（图签等）

        Returns:
            处理结果状态

        Raises:
            PromotionError: 文件不存在或解析失败
        """
        ...


class IDrawingMerger(ABC):
    """多图合并器接口"""

    @abstractmethod
    def merge_flat(
        self,
        source_paths: list[Path],
        output_path: Path,
        spacing: float = 220.0,
    ) -> MergeResult:
        """
        将各源文件的内容块沿X方向依次排布到新文档

        Args:
            source_paths: 已提升的源DXF（按合并顺序）
            output_path: 输出DXF路径
            spacing: 相邻两页的X间距(mm)

        Returns:
            合并结果（含被跳过源文件的说明）
        """
        ...

    @abstractmethod
    def merge_into_template(
        self,
        source_paths: list[Path],
        template_path: Path,
        output_path: Path,
        spacing: float = 220.0,
        insert_offset_x: float = 0.0,
        insert_offset_y: float = 0.0,
    ) -> MergeResult:
        """
        先平铺到内存中间文档，再整体注入模板模型空间

        模板布局中只有锁定图层上的实体会被保留；模板文件本身不会被修改。

        Raises:
            TemplateNotFoundError: 模板不存在
            MergeError: 没有任何可合并的源文件
        """
        ...


class ITitleBlockInserter(ABC):
    """图签插入器接口"""

    @abstractmethod
    def insert_into_model(
        self,
        target_path: Path,
        title_block_path: Path,
        sheet_width_mm: float,
        sheet_height_mm: float,
        view_scale: float,
        template_width_mm: float,
        template_height_mm: float,
        margin_mm: float = 10.0,
    ) -> str:
        """
        把图签DXF的模型空间作为块插入目标DXF模型空间左下角

        Returns:
            新建图签块名
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class SheetMergeError(Exception):
    """基础异常"""
    pass


class ConversionError(SheetMergeError):
    """转换错误"""
    pass


class ExportError(SheetMergeError):
    """导出错误"""
    pass


class PromotionError(SheetMergeError):
    """图纸空间提升错误"""
    pass


class MergeError(SheetMergeError):
    """合并错误"""
    pass


class TemplateNotFoundError(MergeError):
    """模板文件缺失"""
    pass


class TitleBlockError(SheetMergeError):
    """图签插入错误"""
    pass
