"""
CAD 处理模块 - 图纸空间提升/多图合并/图签插入/格式转换

子模块：
- dxf_helpers: 文档/布局/块查找与跨文档复制
- promoter: 图纸空间按视口提升到模型空间
- merger: 平铺合并与模板合并
- titleblock_inserter: 图签块插入
- oda_converter: DXF→DWG 转换
"""

from .merger import DrawingMerger
from .oda_converter import ODAConverter
from .promoter import PaperToModelPromoter
from .titleblock_inserter import TitleBlockInserter

__all__ = [
    "PaperToModelPromoter",
    "DrawingMerger",
    "TitleBlockInserter",
    "ODAConverter",
]
