"""
图签插入器 - 将图签DXF的模型空间作为块插入目标模型空间左下角

职责：
1. 图签DXF模型空间整体克隆为 TB_{token} 块
2. 按出图比例计算非等比缩放：
   sx = sheet_w / template_w * view_scale
   sy = sheet_h / template_h * view_scale
3. 插入点 = (margin * view_scale, margin * view_scale)
4. 目标文件原地覆盖，单位统一为毫米

依赖：
- ezdxf: DXF读写

测试要点：
- test_insert_scale_and_position: 缩放与插入点
- test_insert_missing_target / test_insert_missing_title_block: TitleBlockError
- test_insert_invalid_template_size: ValueError
"""

from __future__ import annotations

import logging
from pathlib import Path

import ezdxf
from ezdxf import units

from ..interfaces import ITitleBlockInserter, TitleBlockError
from .dxf_helpers import copy_entities_to_block, unique_block_name

logger = logging.getLogger(__name__)

TITLE_BLOCK_PREFIX = "TB_"


class TitleBlockInserter(ITitleBlockInserter):
    """图签插入器实现"""

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
        if not target_path.exists():
            raise TitleBlockError(f"目标DXF不存在: {target_path}")
        if not title_block_path.exists():
            raise TitleBlockError(f"图签DXF不存在: {title_block_path}")
        if template_width_mm <= 0 or template_height_mm <= 0:
            raise ValueError("图签模板尺寸必须为正数")

        try:
            target = ezdxf.readfile(str(target_path))
            title_block = ezdxf.readfile(str(title_block_path))
        except Exception as e:
            raise TitleBlockError(f"DXF解析失败: {e}") from e

        sx = sheet_width_mm / template_width_mm * view_scale
        sy = sheet_height_mm / template_height_mm * view_scale
        x = margin_mm * view_scale
        y = margin_mm * view_scale

        block = copy_entities_to_block(
            title_block,
            target,
            title_block.modelspace(),
            unique_block_name(TITLE_BLOCK_PREFIX),
        )
        target.modelspace().add_blockref(
            block.name,
            (x, y, 0),
            dxfattribs={"xscale": sx, "yscale": sy, "zscale": 1.0},
        )
        target.units = units.MM
        target.saveas(str(target_path))

        logger.info(f"图签已插入: {target_path.name} 块={block.name} 缩放=({sx:.4g}, {sy:.4g})")
        return block.name
