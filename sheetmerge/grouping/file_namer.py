"""
合并文件命名 - 由代表图号生成分组输出文件名

优先：按文法拆分 → "{prefix}-7-{group}_{title}"
兜底：首个 "-7-" 之前的前缀 → "{prefix}-7-{group_key}"
再兜底："Group-{group_key}"

不抛异常，不返回空串。
"""

from __future__ import annotations

from .naming_rules import GROUP_TOKEN, SEPARATORS, normalize_dashes, parse_name_parts


def build_combined_name(representative_id: str | None, group_key: str) -> str:
    """生成分组合并文件名（不含扩展名）"""
    fallback = f"Group-{group_key}"
    if not representative_id or not representative_id.strip():
        return fallback

    parts = parse_name_parts(representative_id)
    if parts:
        # 使用代表图号自身解析出的组号
        return f"{parts.prefix}-7-{parts.group}_{parts.title}"

    normalized = normalize_dashes(representative_id)
    pos = normalized.find(GROUP_TOKEN)
    if pos > 0:
        prefix = normalized[:pos].rstrip(SEPARATORS)
        if prefix:
            return f"{prefix}-7-{group_key}"

    return fallback
