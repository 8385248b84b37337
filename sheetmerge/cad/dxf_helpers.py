"""
DXF 公共操作 - 文档/布局/块/视口的查找与跨文档复制

跨文档复制统一走 ezdxf.addons.Importer（深拷贝实体并补齐图层/线型/样式），
源文档与目标文档之间不共享任何实体对象。
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

import ezdxf
from ezdxf import units
from ezdxf.addons import Importer
from ezdxf.document import Drawing
from ezdxf.entities import DXFGraphic, Viewport
from ezdxf.layouts import BaseLayout, BlockLayout, Layout

DEFAULT_DXF_VERSION = "R2010"

# R2000 以下无布局对象，输出统一不低于 R2000
MIN_DXF_VERSION = "AC1015"

# 图纸空间布局自身的主视口
MAIN_VIEWPORT_ID = 1


def new_document(dxfversion: str | None = None) -> Drawing:
    """新建毫米单位的空文档"""
    if not dxfversion or dxfversion < MIN_DXF_VERSION:
        dxfversion = DEFAULT_DXF_VERSION
    doc = ezdxf.new(dxfversion=dxfversion)
    doc.units = units.MM
    return doc


def unique_token(length: int = 32) -> str:
    """随机十六进制串"""
    return uuid.uuid4().hex[:length]


def unique_block_name(prefix: str) -> str:
    return f"{prefix}{unique_token()}"


def find_paper_layout(doc: Drawing) -> Layout | None:
    """按标签顺序取第一个图纸空间布局"""
    for name in doc.layouts.names_in_taborder():
        layout = doc.layouts.get(name)
        if not layout.is_modelspace:
            return layout
    return None


def find_content_viewport(layout: BaseLayout) -> Viewport | None:
    """取布局中第一个内容视口（跳过主视口）"""
    for viewport in layout.query("VIEWPORT"):
        if viewport.dxf.get("id", 0) != MAIN_VIEWPORT_ID:
            return viewport
    return None


def non_viewport_entities(layout: BaseLayout) -> list[DXFGraphic]:
    return [e for e in layout if e.dxftype() != "VIEWPORT"]


def find_content_block(doc: Drawing) -> BaseLayout | None:
    """
    取内容块：第一个非保留且非空的块；否则非空的模型空间

    提升后的文件中即为 PROMOTED_/PS_ONLY_ 块。
    """
    for block in doc.blocks:
        name = block.name
        if not name or name.startswith("*"):
            continue
        if len(block) > 0:
            return block

    msp = doc.modelspace()
    if len(msp) > 0:
        return msp
    return None


def base_point_of(layout: BaseLayout) -> tuple[float, float, float]:
    """块基点（模型空间为原点）"""
    if isinstance(layout, BlockLayout):
        point = layout.block.dxf.base_point
        return (point.x, point.y, point.z)
    return (0.0, 0.0, 0.0)


def copy_entities_to_block(
    source: Drawing,
    target: Drawing,
    entities: Iterable[DXFGraphic],
    block_name: str,
    base_point: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> BlockLayout:
    """将源文档实体深拷贝到目标文档的新块中（嵌套块/图层一并导入）"""
    block = target.blocks.new(name=block_name, base_point=base_point)
    importer = Importer(source, target)
    importer.import_entities(entities, block)
    importer.finalize()
    return block
