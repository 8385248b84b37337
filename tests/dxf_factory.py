"""
测试用 DXF 构造与检查工具
"""

from __future__ import annotations

from pathlib import Path

import ezdxf
from ezdxf import units

# 示例图纸参数：视口 (210,150) 高200，模型视图中心 (1000,500) 视图高2000 → 1:10
VIEWPORT_CENTER = (210.0, 150.0)
VIEWPORT_SIZE = (300.0, 200.0)
VIEW_CENTER = (1000.0, 500.0)
VIEW_HEIGHT = 2000.0
MODEL_MARKER = (2000.0, 1500.0)


def build_sheet_dxf(
    path: Path,
    with_viewport: bool = True,
    paper_title: bool = True,
    model_blocks: bool = False,
) -> Path:
    """
    构造单张图纸DXF

    模型空间：GEOM 图层直线 + MODEL_MARKER 处的点
    图纸空间：A3 页面，可选内容视口与 TITLE 图层图签线
    model_blocks=True 时模型空间额外插入名为 TAG 的块（半径5的圆）
    """
    doc = ezdxf.new("R2010")
    doc.units = units.MM
    doc.layers.add("GEOM")
    doc.layers.add("TITLE")

    msp = doc.modelspace()
    msp.add_line((0, 0), MODEL_MARKER, dxfattribs={"layer": "GEOM"})
    msp.add_point(MODEL_MARKER, dxfattribs={"layer": "GEOM"})
    if model_blocks:
        tag = doc.blocks.new("TAG")
        tag.add_circle((0, 0), radius=5)
        msp.add_blockref("TAG", (100, 100))

    psp = doc.layout("Layout1")
    psp.page_setup(size=(420, 297), margins=(0, 0, 0, 0), units="mm")
    if with_viewport:
        psp.add_viewport(
            center=VIEWPORT_CENTER,
            size=VIEWPORT_SIZE,
            view_center_point=VIEW_CENTER,
            view_height=VIEW_HEIGHT,
        )
    if paper_title:
        psp.add_line((0, 0), (420, 0), dxfattribs={"layer": "TITLE"})

    path.parent.mkdir(parents=True, exist_ok=True)
    doc.saveas(str(path))
    return path


def build_template_dxf(path: Path) -> Path:
    """
    构造合并模板DXF

    图纸空间：主视口 + 锁定图层 FRAME 上的图框线
    + 未锁定图层 NOTES 上的文字与内容视口
    块表：TAG（半径50的圆），模型空间插入一次
    """
    doc = ezdxf.new("R2010")
    doc.units = units.MM
    frame = doc.layers.add("FRAME")
    frame.lock()
    doc.layers.add("NOTES")

    tag = doc.blocks.new("TAG")
    tag.add_circle((0, 0), radius=50)
    doc.modelspace().add_blockref("TAG", (-500, -500))

    psp = doc.layout("Layout1")
    psp.page_setup(size=(841, 594), margins=(0, 0, 0, 0), units="mm")
    psp.add_line((0, 0), (841, 0), dxfattribs={"layer": "FRAME"})
    psp.add_text("临时说明", dxfattribs={"layer": "NOTES", "insert": (10, 10)})
    psp.add_viewport(
        center=(420, 300),
        size=(600, 400),
        view_center_point=(0, 0),
        view_height=400,
        dxfattribs={"layer": "NOTES"},
    )

    path.parent.mkdir(parents=True, exist_ok=True)
    doc.saveas(str(path))
    return path


def build_title_block_dxf(path: Path) -> Path:
    """构造图签DXF（210x297 外框）"""
    doc = ezdxf.new("R2010")
    doc.units = units.MM
    doc.modelspace().add_lwpolyline(
        [(0, 0), (210, 0), (210, 297), (0, 297)], close=True
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    doc.saveas(str(path))
    return path


def flatten_inserts(layout) -> list:
    """递归展开INSERT，返回世界坐标下的基本实体"""
    result = []
    for entity in layout:
        if entity.dxftype() == "INSERT":
            result.extend(_flatten_insert(entity))
        else:
            result.append(entity)
    return result


def _flatten_insert(insert) -> list:
    result = []
    for entity in insert.virtual_entities():
        if entity.dxftype() == "INSERT":
            result.extend(_flatten_insert(entity))
        else:
            result.append(entity)
    return result


def find_points(entities) -> list[tuple[float, float]]:
    return [
        (e.dxf.location.x, e.dxf.location.y) for e in entities if e.dxftype() == "POINT"
    ]
