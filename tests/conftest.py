"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(sheet_dxf_factory, temp_dir):
        path = sheet_dxf_factory(temp_dir / "a.dxf")
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from sheetmerge.config import RuntimeConfig
from sheetmerge.models import SheetRef
from tests.dxf_factory import build_sheet_dxf, build_template_dxf, build_title_block_dxf


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置"""
    return RuntimeConfig()


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sheet_dxf_factory() -> Callable[..., Path]:
    """单张图纸DXF构造器"""
    return build_sheet_dxf


@pytest.fixture
def template_dxf(temp_dir: Path) -> Path:
    """合并模板（锁定图层 FRAME + 未锁定图层 NOTES + 块 TAG）"""
    return build_template_dxf(temp_dir / "template" / "merge_template.dxf")


@pytest.fixture
def title_block_dxf(temp_dir: Path) -> Path:
    return build_title_block_dxf(temp_dir / "template" / "title_block.dxf")


# ============================================================================
# 数据模型 Fixtures
# ============================================================================

@pytest.fixture
def sample_sheets() -> list[SheetRef]:
    """示例图纸：两张单张 + 一个两页合并组"""
    return [
        SheetRef(identifier="A-1", width_mm=420, height_mm=297),
        SheetRef(identifier="B-7-01_Foo--1", width_mm=420, height_mm=297),
        SheetRef(identifier="C-7-01_Bar--2", width_mm=420, height_mm=297),
        SheetRef(identifier="D-2", width_mm=420, height_mm=297),
    ]
