"""
多图合并器 - 将多个已提升的DXF合成为一个输出文件

职责：
1. merge_flat: 各源内容块克隆为 MERGE_{i}_{token} 块，沿X方向按间距依次插入
2. merge_into_template: 先平铺到内存中间文档，再整体注入模板模型空间
   - 块名与模板冲突时追加短随机串改名，不覆盖
   - 插入点 = 中间文档插入点 + (insert_offset_x, insert_offset_y)
   - 模板各布局仅保留锁定图层上的实体（布局主视口除外）

失败策略：
- 单个源文件缺失/不可读/无内容块：记录并跳过，其余照常合并
- 模板缺失：TemplateNotFoundError，不写任何输出
- 布局清理中单个实体失败：记录，不影响保存

依赖：
- ezdxf: DXF读写、Importer 跨文档深拷贝

测试要点：
- test_merge_flat_offsets: 第i个源插入在 X = i*spacing
- test_merge_flat_skips_missing: 缺失源被跳过
- test_template_block_collision: 同名块并存且名称不同
- test_template_paper_cleanup: 布局仅保留锁定图层实体
- test_template_untouched: 模板文件不被修改
"""

from __future__ import annotations

import logging
from pathlib import Path

import ezdxf
from ezdxf.addons import Importer
from ezdxf.document import Drawing
from ezdxf.lldxf.const import DXFValueError

from ..interfaces import IDrawingMerger, MergeError, TemplateNotFoundError
from ..models import MergeResult
from .dxf_helpers import (
    MAIN_VIEWPORT_ID,
    base_point_of,
    copy_entities_to_block,
    find_content_block,
    new_document,
    unique_token,
)

logger = logging.getLogger(__name__)

MERGE_PREFIX = "MERGE_"

# 冲突改名后缀长度
RENAME_TOKEN_LENGTH = 8


class DrawingMerger(IDrawingMerger):
    """多图合并器实现"""

    def merge_flat(
        self,
        source_paths: list[Path],
        output_path: Path,
        spacing: float = 220.0,
    ) -> MergeResult:
        """平铺合并到新文档"""
        if not source_paths:
            raise MergeError("没有可合并的源文件")

        result = MergeResult(output_path=output_path)
        target = new_document()
        self._flatten_sources(source_paths, target, spacing, result)
        if not result.merged_sources:
            raise MergeError(f"所有源文件均无法合并: {output_path.name}")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        target.saveas(str(output_path))
        logger.info(f"平铺合并完成: {output_path.name} ({result.merged_count}张)")
        return result

    def merge_into_template(
        self,
        source_paths: list[Path],
        template_path: Path,
        output_path: Path,
        spacing: float = 220.0,
        insert_offset_x: float = 0.0,
        insert_offset_y: float = 0.0,
    ) -> MergeResult:
        """平铺后注入模板"""
        if not template_path or not template_path.exists():
            raise TemplateNotFoundError(f"模板文件不存在: {template_path}")
        if not source_paths:
            raise MergeError("没有可合并的源文件")

        result = MergeResult(output_path=output_path)

        # 1. 中间文档（仅内存）
        intermediate = new_document()
        self._flatten_sources(source_paths, intermediate, spacing, result)
        if not result.merged_sources:
            raise MergeError(f"所有源文件均无法合并: {output_path.name}")
        self._strip_paper_layouts(intermediate)

        # 2. 载入模板（每次重新读取，不回写模板文件）
        try:
            template = ezdxf.readfile(str(template_path))
        except Exception as e:
            raise MergeError(f"模板解析失败: {template_path.name}: {e}") from e

        # 3. 块注入 + 插入重建
        renamed = self._inject_blocks(intermediate, template)
        msp = template.modelspace()
        for insert in intermediate.modelspace().query("INSERT"):
            position = insert.dxf.insert
            msp.add_blockref(
                renamed.get(insert.dxf.name, insert.dxf.name),
                (position.x + insert_offset_x, position.y + insert_offset_y, position.z),
                dxfattribs={
                    "xscale": insert.dxf.xscale,
                    "yscale": insert.dxf.yscale,
                    "zscale": insert.dxf.zscale,
                    "rotation": insert.dxf.rotation,
                },
            )
        result.block_names = [renamed.get(name, name) for name in result.block_names]

        # 4. 清理模板布局
        self._purge_paper_layouts(template, result)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        template.saveas(str(output_path))
        logger.info(
            f"模板合并完成: {output_path.name} ({result.merged_count}张, 模板 {template_path.name})"
        )
        return result

    def _flatten_sources(
        self,
        source_paths: list[Path],
        target: Drawing,
        spacing: float,
        result: MergeResult,
    ) -> None:
        """逐个源文件克隆内容块并沿X方向排布"""
        msp = target.modelspace()
        current_x = 0.0

        for path in source_paths:
            index = len(result.merged_sources)
            try:
                block_name = self._clone_content_block(path, target, index)
            except Exception as e:
                message = f"源文件合并失败，已跳过: {path.name}: {e}"
                logger.warning(message)
                result.messages.append(message)
                continue

            if block_name is None:
                message = f"源文件无可用内容块，已跳过: {path.name}"
                logger.warning(message)
                result.messages.append(message)
                continue

            msp.add_blockref(
                block_name,
                (current_x, 0),
                dxfattribs={"xscale": 1.0, "yscale": 1.0, "zscale": 1.0, "rotation": 0.0},
            )
            result.merged_sources.append(path)
            result.block_names.append(block_name)
            current_x += spacing

    def _clone_content_block(self, path: Path, target: Drawing, index: int) -> str | None:
        """克隆单个源文件的内容块，返回目标块名"""
        if not path.exists():
            raise FileNotFoundError(f"文件不存在: {path}")

        source = ezdxf.readfile(str(path))
        content = find_content_block(source)
        if content is None:
            return None

        block_name = f"{MERGE_PREFIX}{index}_{unique_token()}"
        copy_entities_to_block(source, target, content, block_name, base_point_of(content))
        return block_name

    def _strip_paper_layouts(self, doc: Drawing) -> None:
        """删除中间文档的图纸空间布局（ezdxf 至少保留一个，保留的清空）"""
        for name in list(doc.layouts.names()):
            layout = doc.layouts.get(name)
            if layout.is_modelspace:
                continue
            try:
                doc.layouts.delete(name)
            except DXFValueError:
                for entity in list(layout):
                    layout.delete_entity(entity)

    def _inject_blocks(self, source: Drawing, target: Drawing) -> dict[str, str]:
        """
        将源文档全部具名块克隆到目标文档，返回 {原块名: 目标块名}

        先统一建块并登记改名，再导入实体，嵌套INSERT由Importer按登记表重定向。
        匿名块（*U/*D）由Importer按引用自行导入。
        """
        importer = Importer(source, target)
        pending = []

        for block in source.blocks:
            name = block.name
            # 布局块与匿名块
            if name.startswith("*"):
                continue
            target_name = name
            while target_name in target.blocks:
                target_name = f"{name}_{unique_token(RENAME_TOKEN_LENGTH)}"
            if target_name != name:
                logger.debug(f"块名冲突，改名: {name} -> {target_name}")

            target_block = target.blocks.new(
                name=target_name, base_point=block.block.dxf.base_point
            )
            importer.imported_blocks[name] = target_name
            pending.append((block, target_block))

        for block, target_block in pending:
            importer.import_entities(block, target_block)
        importer.finalize()

        return dict(importer.imported_blocks)

    def _purge_paper_layouts(self, doc: Drawing, result: MergeResult) -> None:
        """模板布局只保留锁定图层上的实体"""
        locked_layers = {layer.dxf.name.upper() for layer in doc.layers if layer.is_locked()}

        for name in doc.layouts.names():
            layout = doc.layouts.get(name)
            if layout.is_modelspace:
                continue

            doomed = []
            for entity in layout:
                if entity.dxf.get("layer", "0").upper() in locked_layers:
                    continue
                if entity.dxftype() == "VIEWPORT" and entity.dxf.get("id", 0) == MAIN_VIEWPORT_ID:
                    continue
                doomed.append(entity)

            for entity in doomed:
                try:
                    layout.delete_entity(entity)
                except Exception as e:
                    message = f"布局 {name} 实体清理失败: {entity.dxftype()}: {e}"
                    logger.warning(message)
                    result.messages.append(message)
