"""
图纸模型 - 图号引用与分组结果

图号(identifier)由宿主给出，读取后不可变；本系统不保证图号唯一。
"""

from __future__ import annotations

import sys

from pydantic import BaseModel, Field

# 合并序号缺省值（"无序/排最后"）
UNORDERED = sys.maxsize


class SheetRef(BaseModel):
    """图纸引用"""
    identifier: str = Field(..., description="图号，如 E-7-05_PanelLayout--2")
    name: str = Field("", description="图名")
    revision: str | None = Field(None, description="版次")
    width_mm: float | None = Field(None, description="幅面宽")
    height_mm: float | None = Field(None, description="幅面高")

    model_config = {"frozen": True}

    @property
    def paper_size(self) -> str | None:
        """图幅标签(A0~A6或自定义尺寸)"""
        if self.width_mm is None or self.height_mm is None:
            return None
        from ..grouping.paper_size import paper_size_label

        return paper_size_label(self.width_mm, self.height_mm)


class GroupEntry(BaseModel):
    """分组内的一张图纸"""
    sheet: SheetRef
    order: int = UNORDERED

    @property
    def identifier(self) -> str:
        return self.sheet.identifier

    def sort_key(self) -> tuple[int, str, str]:
        """序号升序，同序号按图号（忽略大小写）排序"""
        return (self.order, self.identifier.upper(), self.identifier)


class PartitionResult(BaseModel):
    """分组结果：单张 + 按组号分组"""
    singles: list[SheetRef] = Field(default_factory=list)
    groups: dict[str, list[GroupEntry]] = Field(default_factory=dict)

    def add_group_entry(self, group_key: str, sheet: SheetRef, order: int) -> None:
        """追加组成员（首次出现时建组）"""
        self.groups.setdefault(group_key, []).append(GroupEntry(sheet=sheet, order=order))

    def sorted_group(self, group_key: str) -> list[GroupEntry]:
        """获取排序后的组成员"""
        return sorted(self.groups.get(group_key, []), key=GroupEntry.sort_key)

    def sorted_groups(self) -> dict[str, list[GroupEntry]]:
        """全部分组（组内已排序）"""
        return {key: self.sorted_group(key) for key in self.groups}

    def group_sheets(self) -> list[SheetRef]:
        """全部组内图纸（按组、组内顺序）"""
        return [entry.sheet for entries in self.sorted_groups().values() for entry in entries]

    @property
    def total(self) -> int:
        return len(self.singles) + sum(len(v) for v in self.groups.values())
