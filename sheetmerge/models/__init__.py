"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- SheetRef / PartitionResult: 图纸引用与分组结果
- ViewportTransform / MergeResult: 图纸几何与合并结果
- ConsolidationReport: 一次导出动作的状态与交付结果
"""

from .drawing import MergeResult, PromotionStatus, ViewportTransform
from .report import (
    ConsolidationReport,
    ConsolidationState,
    DeliverableKind,
    DeliverableResult,
)
from .sheet import UNORDERED, GroupEntry, PartitionResult, SheetRef

__all__ = [
    "SheetRef",
    "GroupEntry",
    "PartitionResult",
    "UNORDERED",
    "ViewportTransform",
    "PromotionStatus",
    "MergeResult",
    "ConsolidationReport",
    "ConsolidationState",
    "DeliverableKind",
    "DeliverableResult",
]
