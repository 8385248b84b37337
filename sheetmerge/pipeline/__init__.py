"""
流水线模块 - 合并导出编排

子模块：
- stages: 阶段与进度区间
- file_locator: 按图号定位导出文件
- orchestrator: 状态机编排
"""

from .file_locator import find_drawing_for_sheet
from .orchestrator import ConsolidationOrchestrator
from .stages import CONSOLIDATION_STAGES, PipelineStage

__all__ = [
    "ConsolidationOrchestrator",
    "find_drawing_for_sheet",
    "CONSOLIDATION_STAGES",
    "PipelineStage",
]
