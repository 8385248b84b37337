"""
导出文件定位 - 按图号在目录中查找对应图纸文件

匹配规则（文件名主干，忽略大小写）：
1. 包含 " - {图号} - "（宿主默认导出命名）
2. 否则包含 "{图号}"
均无匹配返回None；同级多个匹配按文件名排序取第一个。
"""

from __future__ import annotations

from pathlib import Path


def find_drawing_for_sheet(identifier: str, folder: Path, suffix: str = ".dxf") -> Path | None:
    """查找图号对应的导出文件"""
    if not identifier or not folder.is_dir():
        return None

    candidates = sorted(
        p for p in folder.iterdir() if p.is_file() and p.suffix.lower() == suffix.lower()
    )
    needle = identifier.lower()

    for path in candidates:
        if f" - {needle} - " in path.stem.lower():
            return path
    for path in candidates:
        if needle in path.stem.lower():
            return path
    return None
