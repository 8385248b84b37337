"""
图纸几何模型 - 视口变换与合并结果

视口变换（模型空间 → 图纸空间，不含旋转）：
    vp_scale = view_height / height
    scale    = 1 / vp_scale
    dx       = center.x - view_center.x / vp_scale
    dy       = center.y - view_center.y / vp_scale
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

# 图纸空间视口高度下限，低于此值视为无缩放
MIN_VIEWPORT_HEIGHT = 1e-9


class PromotionStatus(str, Enum):
    """图纸空间提升结果"""
    PROMOTED = "promoted"       # 按视口对齐后重写
    PAPER_ONLY = "paper_only"   # 无视口，仅保留图纸空间实体
    UNCHANGED = "unchanged"     # 无布局/无视口，未改写


class ViewportTransform(BaseModel):
    """视口推导的仿射变换"""
    vp_scale: float = Field(1.0, description="模型高度/图纸高度")
    scale: float = Field(1.0, description="统一缩放系数 = 1/vp_scale")
    dx: float = 0.0
    dy: float = 0.0

    @classmethod
    def from_viewport(
        cls,
        center: tuple[float, float],
        height: float,
        view_center: tuple[float, float],
        view_height: float,
    ) -> ViewportTransform:
        """由视口参数计算变换"""
        vp_scale = view_height / height if height > MIN_VIEWPORT_HEIGHT else 1.0
        if vp_scale <= MIN_VIEWPORT_HEIGHT:
            # 视图高度缺失时退化为1:1
            vp_scale = 1.0
        return cls(
            vp_scale=vp_scale,
            scale=1.0 / vp_scale,
            dx=center[0] - view_center[0] / vp_scale,
            dy=center[1] - view_center[1] / vp_scale,
        )

    def apply(self, x: float, y: float) -> tuple[float, float]:
        """模型空间点 → 图纸空间点"""
        return (self.dx + x * self.scale, self.dy + y * self.scale)


class MergeResult(BaseModel):
    """合并结果"""
    output_path: Path
    merged_sources: list[Path] = Field(default_factory=list)
    block_names: list[str] = Field(default_factory=list, description="各源文件在输出中的块名")
    messages: list[str] = Field(default_factory=list, description="被跳过源文件/清理失败说明")

    model_config = {"arbitrary_types_allowed": True}

    @property
    def merged_count(self) -> int:
        return len(self.merged_sources)
