"""
分组模块 - 图号规则/分组/命名

子模块：
- naming_rules: 合并序号/组号/名称分段解析
- partitioner: 单张与合并组划分
- file_namer: 分组合并文件命名
- paper_size: 图幅标签
"""

from .file_namer import build_combined_name
from .naming_rules import (
    NameParts,
    normalize_dashes,
    parse_group_key,
    parse_merge_order,
    parse_name_parts,
)
from .paper_size import paper_size_label
from .partitioner import SheetPartitioner

__all__ = [
    "NameParts",
    "normalize_dashes",
    "parse_merge_order",
    "parse_group_key",
    "parse_name_parts",
    "build_combined_name",
    "paper_size_label",
    "SheetPartitioner",
]
