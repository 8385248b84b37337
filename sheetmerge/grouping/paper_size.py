"""
图幅识别 - 由幅面尺寸得到 ISO 图幅标签

横竖向不敏感，容差10mm；不匹配时返回自定义尺寸，如 "275x390mm"。
"""

from __future__ import annotations

# 匹配容差(mm)
TOLERANCE_MM = 10.0

# ISO 图幅 (短边, 长边) mm
ISO_SIZES: dict[str, tuple[int, int]] = {
    "A0": (841, 1189),
    "A1": (594, 841),
    "A2": (420, 594),
    "A3": (297, 420),
    "A4": (210, 297),
    "A5": (148, 210),
    "A6": (105, 148),
}


def paper_size_label(width_mm: float, height_mm: float) -> str:
    """返回 ISO 图幅标签或自定义尺寸"""
    short_side = min(width_mm, height_mm)
    long_side = max(width_mm, height_mm)

    for label, (w, h) in ISO_SIZES.items():
        if abs(short_side - w) <= TOLERANCE_MM and abs(long_side - h) <= TOLERANCE_MM:
            return label

    return f"{round(width_mm)}x{round(height_mm)}mm"
