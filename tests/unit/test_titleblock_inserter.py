"""
图签插入器单元测试

每个模块完成后必须运行：pytest tests/unit/test_titleblock_inserter.py -v
"""

from pathlib import Path

import ezdxf
import pytest

from sheetmerge.cad import TitleBlockInserter
from sheetmerge.cad.titleblock_inserter import TITLE_BLOCK_PREFIX
from sheetmerge.interfaces import TitleBlockError
from tests.dxf_factory import build_sheet_dxf


def _title_block_inserts(path: Path) -> list:
    doc = ezdxf.readfile(str(path))
    return [
        e for e in doc.modelspace().query("INSERT") if e.dxf.name.startswith(TITLE_BLOCK_PREFIX)
    ]


class TestTitleBlockInserter:
    """图签插入测试"""

    def test_insert_scale_and_position(self, temp_dir: Path, title_block_dxf: Path):
        """A3图纸套用A4图签模板"""
        target = build_sheet_dxf(temp_dir / "sheet.dxf")

        name = TitleBlockInserter().insert_into_model(
            target, title_block_dxf,
            sheet_width_mm=420, sheet_height_mm=297, view_scale=1.0,
            template_width_mm=210, template_height_mm=297,
        )

        inserts = _title_block_inserts(target)
        assert len(inserts) == 1
        insert = inserts[0]
        assert insert.dxf.name == name
        assert insert.dxf.xscale == pytest.approx(2.0)
        assert insert.dxf.yscale == pytest.approx(1.0)
        assert (insert.dxf.insert.x, insert.dxf.insert.y) == pytest.approx((10.0, 10.0))

    def test_insert_with_view_scale(self, temp_dir: Path, title_block_dxf: Path):
        """出图比例同时作用于缩放与边距"""
        target = build_sheet_dxf(temp_dir / "sheet.dxf")
        TitleBlockInserter().insert_into_model(
            target, title_block_dxf,
            sheet_width_mm=210, sheet_height_mm=297, view_scale=100.0,
            template_width_mm=210, template_height_mm=297, margin_mm=5.0,
        )

        insert = _title_block_inserts(target)[0]
        assert insert.dxf.xscale == pytest.approx(100.0)
        assert insert.dxf.yscale == pytest.approx(100.0)
        assert (insert.dxf.insert.x, insert.dxf.insert.y) == pytest.approx((500.0, 500.0))

    def test_insert_copies_geometry(self, temp_dir: Path, title_block_dxf: Path):
        target = build_sheet_dxf(temp_dir / "sheet.dxf")
        name = TitleBlockInserter().insert_into_model(
            target, title_block_dxf, 420, 297, 1.0, 210, 297
        )

        block = ezdxf.readfile(str(target)).blocks.get(name)
        assert [e.dxftype() for e in block] == ["LWPOLYLINE"]

    def test_insert_missing_target(self, temp_dir: Path, title_block_dxf: Path):
        with pytest.raises(TitleBlockError):
            TitleBlockInserter().insert_into_model(
                temp_dir / "missing.dxf", title_block_dxf, 420, 297, 1.0, 210, 297
            )

    def test_insert_missing_title_block(self, temp_dir: Path):
        target = build_sheet_dxf(temp_dir / "sheet.dxf")
        with pytest.raises(TitleBlockError):
            TitleBlockInserter().insert_into_model(
                target, temp_dir / "missing.dxf", 420, 297, 1.0, 210, 297
            )

    @pytest.mark.parametrize("w,h", [(0, 297), (210, 0), (-1, 297)])
    def test_insert_invalid_template_size(self, temp_dir: Path, title_block_dxf: Path, w, h):
        """模板尺寸非正数"""
        target = build_sheet_dxf(temp_dir / "sheet.dxf")
        with pytest.raises(ValueError):
            TitleBlockInserter().insert_into_model(target, title_block_dxf, 420, 297, 1.0, w, h)
