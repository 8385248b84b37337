"""
合并报告模型 - 流水线状态与交付结果

状态机：
    IDLE → PARTITIONING → EXPORTING → PROMOTING → MERGING → CLEANUP → DONE
    任一状态遇不可恢复错误 → CLEANUP → FAILED
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ConsolidationState(str, Enum):
    """流水线状态"""
    IDLE = "idle"
    PARTITIONING = "partitioning"
    EXPORTING = "exporting"
    PROMOTING = "promoting"
    MERGING = "merging"
    CLEANUP = "cleanup"
    DONE = "done"
    FAILED = "failed"


class DeliverableKind(str, Enum):
    """交付物类型"""
    SINGLE = "single"
    GROUP = "group"


class DeliverableResult(BaseModel):
    """单个交付物（单张图纸或一个分组）"""
    kind: DeliverableKind
    key: str = Field(..., description="单张为图号，分组为组号")
    success: bool = False
    output_path: Path | None = None
    sources: list[str] = Field(default_factory=list, description="参与的图号")

    model_config = {"arbitrary_types_allowed": True}


class ConsolidationReport(BaseModel):
    """一次导出动作的结果"""
    state: ConsolidationState = ConsolidationState.IDLE
    state_history: list[ConsolidationState] = Field(
        default_factory=lambda: [ConsolidationState.IDLE]
    )
    deliverables: list[DeliverableResult] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list, description="累积告警信息")
    temp_dir: Path | None = None

    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: datetime | None = None

    model_config = {"arbitrary_types_allowed": True}

    def enter(self, state: ConsolidationState) -> None:
        """切换状态"""
        self.state = state
        self.state_history.append(state)

    def mark_done(self) -> None:
        """标记完成"""
        self.enter(ConsolidationState.DONE)
        self.finished_at = datetime.now()

    def mark_failed(self, error: str) -> None:
        """标记失败"""
        self.enter(ConsolidationState.FAILED)
        self.finished_at = datetime.now()
        self.messages.append(error)

    def add_message(self, message: str) -> None:
        """追加告警（不中断）"""
        self.messages.append(message)

    def add_deliverable(self, deliverable: DeliverableResult) -> DeliverableResult:
        self.deliverables.append(deliverable)
        return deliverable

    def get_deliverable(self, kind: DeliverableKind, key: str) -> DeliverableResult | None:
        for item in self.deliverables:
            if item.kind == kind and item.key == key:
                return item
        return None

    @property
    def success(self) -> bool:
        """流程完成且全部交付物成功"""
        return self.state == ConsolidationState.DONE and all(
            d.success for d in self.deliverables
        )

    @property
    def any_success(self) -> bool:
        return any(d.success for d in self.deliverables)
