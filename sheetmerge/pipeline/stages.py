"""
流水线阶段定义

职责：
1. 定义各阶段名称与状态对应关系
2. 提供进度区间（0-100）供进度回调使用

测试要点：
- test_stage_progress_monotonic: 进度区间首尾相接且单调
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..models import ConsolidationState

# 进度回调：(阶段名, 百分比, 说明)
ProgressCallback = Callable[[str, int, str], None]


@dataclass(frozen=True)
class PipelineStage:
    """流水线阶段"""
    state: ConsolidationState
    progress_start: int  # 进度起点（0-100）
    progress_end: int    # 进度终点

    @property
    def name(self) -> str:
        return self.state.value.upper()


# 合并流水线各阶段配置
CONSOLIDATION_STAGES: list[PipelineStage] = [
    PipelineStage(ConsolidationState.PARTITIONING, 0, 5),
    PipelineStage(ConsolidationState.EXPORTING, 5, 30),
    PipelineStage(ConsolidationState.PROMOTING, 30, 55),
    PipelineStage(ConsolidationState.MERGING, 55, 95),
    PipelineStage(ConsolidationState.CLEANUP, 95, 100),
]


def stage_for(state: ConsolidationState) -> PipelineStage | None:
    for stage in CONSOLIDATION_STAGES:
        if stage.state == state:
            return stage
    return None
