"""
图纸来源 - 从YAML清单读取宿主图纸信息

清单格式：
    sheets:
      - number: E-7-05_PanelLayout--2
        name: 配电箱布置
        revision: B
        width_mm: 420
        height_mm: 297

职责：
- 实现 ISheetSource（只读，保持清单顺序）
- collect_sheets: 由任意 ISheetSource 构建 SheetRef 列表

测试要点：
- test_manifest_order: 图号顺序与清单一致
- test_manifest_missing_size: 未给尺寸返回None
- test_manifest_invalid: 格式错误抛 ExportError
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ..interfaces import ExportError, ISheetSource
from ..models import SheetRef

logger = logging.getLogger(__name__)


class ManifestSheetSource(ISheetSource):
    """YAML 清单图纸来源"""

    def __init__(self, manifest_path: Path):
        self.manifest_path = manifest_path
        self._entries: list[dict[str, Any]] = self._load(manifest_path)

    @staticmethod
    def _load(path: Path) -> list[dict[str, Any]]:
        if not path.exists():
            raise ExportError(f"图纸清单不存在: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ExportError(f"图纸清单解析失败: {path}: {e}") from e

        entries = data.get("sheets") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise ExportError(f"图纸清单缺少 sheets 列表: {path}")

        result = []
        for item in entries:
            if isinstance(item, str):
                item = {"number": item}
            if not isinstance(item, dict) or not str(item.get("number") or "").strip():
                logger.warning(f"清单条目无图号，已忽略: {item}")
                continue
            item["number"] = str(item["number"]).strip()
            result.append(item)
        return result

    def _entry(self, identifier: str) -> dict[str, Any] | None:
        for item in self._entries:
            if item["number"] == identifier:
                return item
        return None

    def get_sheet_identifiers(self) -> list[str]:
        return [item["number"] for item in self._entries]

    def get_sheet_outline_size(self, identifier: str) -> tuple[float, float] | None:
        item = self._entry(identifier)
        if not item:
            return None
        width, height = item.get("width_mm"), item.get("height_mm")
        if width is None or height is None:
            return None
        return float(width), float(height)

    def get_revision_label(self, identifier: str) -> str | None:
        item = self._entry(identifier)
        if not item or item.get("revision") is None:
            return None
        return str(item["revision"])

    def get_sheet_name(self, identifier: str) -> str:
        item = self._entry(identifier)
        return str(item.get("name") or "") if item else ""


def collect_sheets(source: ISheetSource) -> list[SheetRef]:
    """按宿主顺序构建图纸引用"""
    # 图名非必需接口，来源提供时一并读取
    get_name = getattr(source, "get_sheet_name", None)

    sheets = []
    for identifier in source.get_sheet_identifiers():
        size = source.get_sheet_outline_size(identifier)
        name = get_name(identifier) if get_name else ""
        sheets.append(
            SheetRef(
                identifier=identifier,
                name=name,
                revision=source.get_revision_label(identifier),
                width_mm=size[0] if size else None,
                height_mm=size[1] if size else None,
            )
        )
    return sheets
