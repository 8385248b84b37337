"""
图纸空间提升器 - 按第一个视口把布局内容对齐到模型空间

职责：
1. 定位第一个图纸空间布局及其第一个内容视口
2. 由视口计算仿射变换（统一缩放 + 平移，不含旋转）
3. 组合块 = 图纸空间实体（图签等，可选）+ 按变换插入的模型空间副本
4. 写入只含该组合块及其原点插入的全新文档，覆盖原文件

无视口时：
- content_only=False：仅复制图纸空间实体（保证图签不丢）
- content_only=True：不改写

依赖：
- ezdxf: DXF读写、Importer 跨文档深拷贝

测试要点：
- test_promote_aligns_model_geometry: 模型点落在 center + (P - view_center)/vp_scale
- test_promote_content_only: 不含图纸空间实体
- test_promote_without_viewport: PS_ONLY 兜底 / content_only 不改写
- test_promote_without_paper_layout: 不改写
- test_promote_missing_file: PromotionError
"""

from __future__ import annotations

import logging
from pathlib import Path

import ezdxf
from ezdxf.addons import Importer

from ..interfaces import IPaperToModelPromoter, PromotionError
from ..models import PromotionStatus, ViewportTransform
from .dxf_helpers import (
    copy_entities_to_block,
    find_content_viewport,
    find_paper_layout,
    new_document,
    non_viewport_entities,
    unique_block_name,
)

logger = logging.getLogger(__name__)

PROMOTED_PREFIX = "PROMOTED_"
MODEL_COPY_PREFIX = "MODEL_COPY_"
PAPER_ONLY_PREFIX = "PS_ONLY_"


class PaperToModelPromoter(IPaperToModelPromoter):
    """图纸空间提升器实现"""

    def promote(self, dxf_path: Path, content_only: bool = False) -> PromotionStatus:
        """原地提升单个DXF"""
        if not dxf_path.exists():
            raise PromotionError(f"DXF文件不存在: {dxf_path}")

        try:
            doc = ezdxf.readfile(str(dxf_path))
        except Exception as e:
            raise PromotionError(f"DXF解析失败: {dxf_path.name}: {e}") from e

        paper = find_paper_layout(doc)
        if paper is None:
            logger.info(f"无图纸空间布局，保持原样: {dxf_path.name}")
            return PromotionStatus.UNCHANGED

        paper_entities = non_viewport_entities(paper)
        viewport = find_content_viewport(paper)

        if viewport is None:
            if content_only or not paper_entities:
                logger.info(f"布局无视口，保持原样: {dxf_path.name}")
                return PromotionStatus.UNCHANGED

            new_doc = new_document(doc.dxfversion)
            block = copy_entities_to_block(
                doc, new_doc, paper_entities, unique_block_name(PAPER_ONLY_PREFIX)
            )
            new_doc.modelspace().add_blockref(block.name, (0, 0))
            new_doc.saveas(str(dxf_path))
            logger.info(f"布局无视口，仅保留图纸空间实体: {dxf_path.name}")
            return PromotionStatus.PAPER_ONLY

        center = viewport.dxf.center
        view_center = viewport.dxf.view_center_point
        transform = ViewportTransform.from_viewport(
            center=(center.x, center.y),
            height=viewport.dxf.height,
            view_center=(view_center.x, view_center.y),
            view_height=viewport.dxf.view_height,
        )

        new_doc = new_document(doc.dxfversion)
        # 先建组合块，保证其在块表中位于模型副本之前（合并时按块序取内容块）
        combined = new_doc.blocks.new(name=unique_block_name(PROMOTED_PREFIX))
        model_copy = new_doc.blocks.new(name=unique_block_name(MODEL_COPY_PREFIX))

        importer = Importer(doc, new_doc)
        if not content_only:
            importer.import_entities(paper_entities, combined)
        importer.import_entities(doc.modelspace(), model_copy)
        importer.finalize()

        combined.add_blockref(
            model_copy.name,
            (transform.dx, transform.dy),
            dxfattribs={
                "xscale": transform.scale,
                "yscale": transform.scale,
                "zscale": 1.0,
                "rotation": 0.0,
            },
        )

        new_doc.modelspace().add_blockref(combined.name, (0, 0))
        new_doc.saveas(str(dxf_path))

        logger.info(
            f"提升完成: {dxf_path.name} scale={transform.scale:.6g} "
            f"offset=({transform.dx:.3f}, {transform.dy:.3f})"
        )
        return PromotionStatus.PROMOTED
