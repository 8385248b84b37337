"""
宿主边界与文件定位单元测试

每个模块完成后必须运行：pytest tests/unit/test_host.py -v
"""

from pathlib import Path

import pytest

from sheetmerge.host import FolderSheetExporter, ManifestSheetSource, collect_sheets
from sheetmerge.interfaces import ExportError
from sheetmerge.models import SheetRef
from sheetmerge.pipeline import find_drawing_for_sheet

MANIFEST = """
sheets:
  - number: A-1
    name: 总平面
    revision: B
    width_mm: 420
    height_mm: 297
  - number: B-7-01_Foo--1
  - E-7-05_PanelLayout--2
  - name: 无图号
"""


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("0\nEOF\n", encoding="utf-8")
    return path


class TestFindDrawingForSheet:
    """导出文件定位测试"""

    def test_host_naming_preferred(self, temp_dir: Path):
        """优先匹配 " - 图号 - " """
        _touch(temp_dir / "A-10 plan.dxf")
        expected = _touch(temp_dir / "Project - A-1 - Plan.dxf")
        assert find_drawing_for_sheet("A-1", temp_dir) == expected

    def test_case_insensitive(self, temp_dir: Path):
        expected = _touch(temp_dir / "Project - e-7-05_x--1 - Plan.DXF")
        assert find_drawing_for_sheet("E-7-05_X--1", temp_dir) == expected

    def test_contains_fallback(self, temp_dir: Path):
        expected = _touch(temp_dir / "D-2.dxf")
        assert find_drawing_for_sheet("D-2", temp_dir) == expected

    def test_suffix_filter(self, temp_dir: Path):
        _touch(temp_dir / "D-2.dwg")
        assert find_drawing_for_sheet("D-2", temp_dir) is None
        assert find_drawing_for_sheet("D-2", temp_dir, suffix=".dwg") is not None

    def test_not_found(self, temp_dir: Path):
        assert find_drawing_for_sheet("X-9", temp_dir) is None
        assert find_drawing_for_sheet("X-9", temp_dir / "missing") is None
        assert find_drawing_for_sheet("", temp_dir) is None


class TestManifestSheetSource:
    """清单图纸来源测试"""

    @pytest.fixture
    def manifest(self, temp_dir: Path) -> Path:
        path = temp_dir / "sheets.yaml"
        path.write_text(MANIFEST, encoding="utf-8")
        return path

    def test_manifest_order(self, manifest: Path):
        """图号顺序与清单一致，无图号条目被忽略"""
        source = ManifestSheetSource(manifest)
        assert source.get_sheet_identifiers() == [
            "A-1", "B-7-01_Foo--1", "E-7-05_PanelLayout--2",
        ]

    def test_manifest_fields(self, manifest: Path):
        source = ManifestSheetSource(manifest)
        assert source.get_sheet_outline_size("A-1") == (420.0, 297.0)
        assert source.get_revision_label("A-1") == "B"
        assert source.get_sheet_name("A-1") == "总平面"

    def test_manifest_missing_size(self, manifest: Path):
        """未给尺寸返回None"""
        source = ManifestSheetSource(manifest)
        assert source.get_sheet_outline_size("B-7-01_Foo--1") is None
        assert source.get_revision_label("B-7-01_Foo--1") is None
        assert source.get_sheet_outline_size("unknown") is None

    def test_collect_sheets(self, manifest: Path):
        sheets = collect_sheets(ManifestSheetSource(manifest))
        assert sheets[0] == SheetRef(
            identifier="A-1", name="总平面", revision="B", width_mm=420, height_mm=297
        )
        assert sheets[0].paper_size == "A3"
        assert sheets[1].width_mm is None

    def test_manifest_invalid(self, temp_dir: Path):
        """格式错误抛 ExportError"""
        path = temp_dir / "bad.yaml"
        path.write_text("sheets: not-a-list\n", encoding="utf-8")
        with pytest.raises(ExportError):
            ManifestSheetSource(path)

    def test_manifest_missing(self, temp_dir: Path):
        with pytest.raises(ExportError):
            ManifestSheetSource(temp_dir / "missing.yaml")


class TestFolderSheetExporter:
    """目录导出测试"""

    def test_export_copies_files(self, temp_dir: Path):
        """复制且不改动源文件"""
        src = _touch(temp_dir / "src" / "Project - A-1 - Plan.dxf")
        before = src.read_bytes()
        out = temp_dir / "out"

        paths = FolderSheetExporter(temp_dir / "src").export_sheets([SheetRef(identifier="A-1")], out)

        assert paths == [out / "Project - A-1 - Plan.dxf"]
        assert paths[0].read_bytes() == before
        assert src.exists()

    def test_export_missing_sheet(self, temp_dir: Path):
        """单张缺失跳过"""
        _touch(temp_dir / "src" / "A-1.dxf")
        paths = FolderSheetExporter(temp_dir / "src").export_sheets(
            [SheetRef(identifier="A-1"), SheetRef(identifier="Z-9")], temp_dir / "out"
        )
        assert [p.name for p in paths] == ["A-1.dxf"]

    def test_export_nothing_found(self, temp_dir: Path):
        """全部缺失返回空列表，由调用方逐张记录"""
        (temp_dir / "src").mkdir()
        paths = FolderSheetExporter(temp_dir / "src").export_sheets(
            [SheetRef(identifier="Z-9")], temp_dir / "out"
        )
        assert paths == []

    def test_export_missing_source_dir(self, temp_dir: Path):
        with pytest.raises(ExportError):
            FolderSheetExporter(temp_dir / "none").export_sheets(
                [SheetRef(identifier="A-1")], temp_dir / "out"
            )
