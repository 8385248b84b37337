"""
图纸分组器 - 按图号规则划分 单张/合并组

规则：
1. 无末尾 "--N" → 单张
2. 有 "--N" 但无 "-7-NN_" 组号 → 单张（仅有序号无组号不可合并）
3. 否则按组号归组，记录序号

每张图纸恰好出现在 singles 或某一组中，组内顺序见 PartitionResult.sorted_group。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models import PartitionResult, SheetRef
from .naming_rules import parse_group_key, parse_merge_order

logger = logging.getLogger(__name__)


class SheetPartitioner:
    """图纸分组器"""

    def partition(self, sheets: Iterable[SheetRef]) -> PartitionResult:
        """划分单张与合并组"""
        result = PartitionResult()

        for sheet in sheets:
            identifier = sheet.identifier or ""

            order = parse_merge_order(identifier)
            if order is None:
                result.singles.append(sheet)
                continue

            group_key = parse_group_key(identifier)
            if group_key is None:
                logger.info(f"图号含合并序号但无组号，按单张处理: {identifier}")
                result.singles.append(sheet)
                continue

            result.add_group_entry(group_key, sheet, order)

        logger.debug(f"分组完成: 单张={len(result.singles)} 分组={len(result.groups)}")
        return result
