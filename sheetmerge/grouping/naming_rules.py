"""
图号规则解析 - 合并序号/组号/名称分段

图号文法：
    identifier := prefix "-7-" digits "_" title ["--" digits]

- 合并序号：末尾 "--N"（仅匹配ASCII双横线，不做横线归一化）
- 组号：任意位置的 "-7-NN_"（先将 – — 归一为 -）
- 名称分段：整串匹配上述文法，各段去除首尾分隔符，标题去除文件名非法字符

所有函数均不抛异常：不匹配返回None，调用方按单张图纸处理。

测试要点：
- test_parse_merge_order: 末尾序号（允许空格）
- test_parse_group_key_en_dash: en-dash 与 ASCII 等价
- test_parse_name_parts: 前缀/组号/标题拆分
"""

from __future__ import annotations

import re
from typing import NamedTuple

# 需要归一化为 "-" 的横线字符（en-dash, em-dash）
DASH_GLYPHS = ("–", "—")

# 名称分段首尾需要去除的分隔符
SEPARATORS = "_- "

# Windows 文件名非法字符 + 控制字符
INVALID_FILENAME_CHARS = '<>:"/\\|?*' + "".join(chr(i) for i in range(32))

MERGE_ORDER_PATTERN = re.compile(r"--\s*(\d+)\s*$")
GROUP_KEY_PATTERN = re.compile(r"-7-\s*([0-9]+)\s*_", re.IGNORECASE)
NAME_PARTS_PATTERN = re.compile(
    r"^(?P<prefix>.+?)-7-\s*(?P<group>\d+)\s*_(?P<title>.+?)(?:--\s*\d+\s*)?$"
)

GROUP_TOKEN = "-7-"


class NameParts(NamedTuple):
    """图号分段"""
    prefix: str
    group: str
    title: str


def normalize_dashes(text: str) -> str:
    """将 – — 归一化为 -"""
    for glyph in DASH_GLYPHS:
        text = text.replace(glyph, "-")
    return text


def strip_invalid_filename_chars(text: str) -> str:
    """去除文件名非法字符"""
    return "".join(c for c in text if c not in INVALID_FILENAME_CHARS)


def parse_merge_order(identifier: str | None) -> int | None:
    """解析末尾合并序号，如 "...--1" / "...-- 1" -> 1"""
    if not identifier or not identifier.strip():
        return None

    m = MERGE_ORDER_PATTERN.search(identifier)
    if not m:
        return None

    try:
        return int(m.group(1))
    except ValueError:
        return None


def parse_group_key(identifier: str | None) -> str | None:
    """解析组号，如 "...-7-05_..." -> "05" """
    if not identifier or not identifier.strip():
        return None

    m = GROUP_KEY_PATTERN.search(normalize_dashes(identifier))
    if not m:
        return None

    group = m.group(1).strip()
    return group or None


def parse_name_parts(identifier: str | None) -> NameParts | None:
    """拆分图号为 前缀/组号/标题"""
    if not identifier or not identifier.strip():
        return None

    m = NAME_PARTS_PATTERN.match(normalize_dashes(identifier))
    if not m:
        return None

    prefix = m.group("prefix").strip(SEPARATORS)
    group = m.group("group").strip()
    title = strip_invalid_filename_chars(m.group("title")).strip(SEPARATORS)

    if not prefix or not group or not title:
        return None
    return NameParts(prefix=prefix, group=group, title=title)
