"""
合并编排器 - 一次导出动作的完整流程

状态机：
    IDLE → PARTITIONING → EXPORTING → PROMOTING → MERGING → CLEANUP → DONE
    前置条件不满足 → CLEANUP → FAILED

职责：
1. 分组并校验前置条件（输出目录可创建；存在分组时模板必须存在）
2. 导出全部图纸到私有临时目录 output_dir/_tmp_dxf_merge_<hex>（单张/分组分目录）
3. 逐个提升临时副本（不触碰调用方文件）
4. 单张交付：复制或转DWG到输出目录，沿用导出文件名（可选插入图签）
5. 分组交付：按组内顺序合并到模板，命名 "{build_combined_name}.{ext}"
6. 无论成败都尝试删除临时目录，删除失败只记录

失败隔离：
- 单个文件的导出缺失/提升失败/交付失败只影响对应交付物
- 某一批导出抛 ExportError 只影响该批交付物
- SheetMergeError 使流程进入 FAILED 并返回报告；其他异常标记 FAILED 后继续抛出

测试要点：
- test_end_to_end: 单张与分组输出、命名、临时目录清理
- test_missing_template_fails_fast: 无模板时 FAILED 且无输出
- test_promotion_failure_isolated: 单张提升失败不影响其他交付物
- test_export_error_isolated_to_batch: 某一批导出失败不影响另一批
- test_progress_callback: 进度回调单调递增
"""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path

from ..cad import DrawingMerger, ODAConverter, PaperToModelPromoter, TitleBlockInserter
from ..config import RuntimeConfig, get_config
from ..grouping import SheetPartitioner, build_combined_name
from ..grouping.naming_rules import strip_invalid_filename_chars
from ..interfaces import (
    ExportError,
    IDrawingMerger,
    IODAConverter,
    IPaperToModelPromoter,
    ISheetExporter,
    ITitleBlockInserter,
    SheetMergeError,
    TemplateNotFoundError,
)
from ..models import (
    ConsolidationReport,
    ConsolidationState,
    DeliverableKind,
    DeliverableResult,
    GroupEntry,
    PartitionResult,
    SheetRef,
)
from .file_locator import find_drawing_for_sheet
from .stages import ProgressCallback, stage_for

logger = logging.getLogger(__name__)

SINGLES_DIR = "singles"
GROUPS_DIR = "groups"
MERGED_DIR = "merged"


class ConsolidationOrchestrator:
    """合并编排器"""

    def __init__(
        self,
        exporter: ISheetExporter,
        config: RuntimeConfig | None = None,
        promoter: IPaperToModelPromoter | None = None,
        merger: IDrawingMerger | None = None,
        partitioner: SheetPartitioner | None = None,
        oda: IODAConverter | None = None,
        title_block_inserter: ITitleBlockInserter | None = None,
        progress_cb: ProgressCallback | None = None,
    ):
        self.exporter = exporter
        self.config = config or get_config()
        self.promoter = promoter or PaperToModelPromoter()
        self.merger = merger or DrawingMerger()
        self.partitioner = partitioner or SheetPartitioner()
        self.title_block_inserter = title_block_inserter or TitleBlockInserter()
        self.progress_cb = progress_cb
        self._oda = oda

    @property
    def oda(self) -> IODAConverter:
        """仅在需要DWG交付时创建"""
        if self._oda is None:
            self._oda = ODAConverter(config=self.config)
        return self._oda

    @property
    def output_suffix(self) -> str:
        return f".{self.config.merge.output_format}"

    # ------------------------------------------------------------------
    # 主流程
    # ------------------------------------------------------------------

    def run(self, sheets: list[SheetRef], output_dir: Path) -> ConsolidationReport:
        """执行一次合并导出"""
        report = ConsolidationReport()
        failure: str | None = None

        try:
            self._execute(sheets, output_dir, report)
        except SheetMergeError as e:
            logger.error(f"合并流程失败: {e}")
            failure = str(e)
        except Exception as e:
            logger.exception("合并流程异常终止")
            self._cleanup(report)
            report.mark_failed(f"流程异常: {e}")
            raise

        self._cleanup(report)
        if failure is not None:
            report.mark_failed(failure)
        else:
            report.mark_done()
            self._notify(ConsolidationState.DONE, 100, "完成")

        succeeded = sum(1 for d in report.deliverables if d.success)
        logger.info(
            f"合并流程结束: 状态={report.state.value} 交付={succeeded}/{len(report.deliverables)}"
        )
        return report

    def _execute(self, sheets: list[SheetRef], output_dir: Path, report: ConsolidationReport) -> None:
        self._enter(report, ConsolidationState.PARTITIONING)
        partition = self.partitioner.partition(sheets)
        groups = partition.sorted_groups()
        self._check_preconditions(partition, output_dir)
        single_results, group_results = self._register_deliverables(partition, groups, report)

        temp_dir = output_dir / f"{self.config.merge.temp_dir_prefix}{uuid.uuid4().hex}"
        temp_dir.mkdir(parents=True)
        report.temp_dir = temp_dir

        self._enter(report, ConsolidationState.EXPORTING)
        single_files = self._export(partition.singles, temp_dir / SINGLES_DIR, report)
        group_files = self._export(partition.group_sheets(), temp_dir / GROUPS_DIR, report)

        self._enter(report, ConsolidationState.PROMOTING)
        single_files = self._promote_all(single_files, report)
        group_files = self._promote_all(group_files, report)

        self._enter(report, ConsolidationState.MERGING)
        for sheet, deliverable in zip(partition.singles, single_results):
            self._deliver_single(
                sheet, deliverable, single_files.get(sheet.identifier), output_dir, report
            )
        for group_key, entries in groups.items():
            self._deliver_group(
                group_results[group_key], [e.sheet for e in entries], group_files, output_dir, report
            )

    def _check_preconditions(self, partition: PartitionResult, output_dir: Path) -> None:
        """前置条件校验（不满足则不产生任何输出）"""
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportError(f"输出目录无法创建: {output_dir}: {e}") from e

        if partition.groups:
            template = self.config.template_path
            if template is None or not template.exists():
                raise TemplateNotFoundError(
                    f"存在 {len(partition.groups)} 个合并组，但合并模板不存在: {template}"
                )

    def _register_deliverables(
        self,
        partition: PartitionResult,
        groups: dict[str, list[GroupEntry]],
        report: ConsolidationReport,
    ) -> tuple[list[DeliverableResult], dict[str, DeliverableResult]]:
        """登记全部交付物（初始为未成功）"""
        singles = [
            report.add_deliverable(
                DeliverableResult(
                    kind=DeliverableKind.SINGLE,
                    key=sheet.identifier,
                    sources=[sheet.identifier],
                )
            )
            for sheet in partition.singles
        ]
        grouped = {
            group_key: report.add_deliverable(
                DeliverableResult(
                    kind=DeliverableKind.GROUP,
                    key=group_key,
                    sources=[e.identifier for e in entries],
                )
            )
            for group_key, entries in groups.items()
        }
        return singles, grouped

    # ------------------------------------------------------------------
    # 各阶段
    # ------------------------------------------------------------------

    def _export(
        self,
        sheets: list[SheetRef],
        export_dir: Path,
        report: ConsolidationReport,
    ) -> dict[str, Path]:
        """导出并按图号定位文件，返回 {图号: 临时文件}"""
        if not sheets:
            return {}

        export_dir.mkdir(parents=True, exist_ok=True)
        try:
            self.exporter.export_sheets(sheets, export_dir)
        except ExportError as e:
            # 本批交付物保持未成功，其余批次照常
            self._warn(report, f"导出失败: {e}")
            return {}

        located: dict[str, Path] = {}
        for sheet in sheets:
            path = find_drawing_for_sheet(sheet.identifier, export_dir)
            if path is None:
                self._warn(report, f"未找到导出文件: {sheet.identifier}")
                continue
            located[sheet.identifier] = path
        return located

    def _promote_all(self, files: dict[str, Path], report: ConsolidationReport) -> dict[str, Path]:
        """逐个提升，失败的文件从结果中剔除"""
        promoted: dict[str, Path] = {}
        for identifier, path in files.items():
            try:
                status = self.promoter.promote(path, content_only=self.config.merge.content_only)
            except Exception as e:
                self._warn(report, f"图纸空间提升失败: {identifier}: {e}")
                continue
            logger.debug(f"提升结果: {identifier} -> {status.value}")
            promoted[identifier] = path
        return promoted

    def _deliver_single(
        self,
        sheet: SheetRef,
        deliverable: DeliverableResult,
        source: Path | None,
        output_dir: Path,
        report: ConsolidationReport,
    ) -> None:
        if source is None:
            return

        self._insert_title_block(sheet, source, report)
        try:
            deliverable.output_path = self._deliver_file(source, output_dir)
        except Exception as e:
            self._warn(report, f"单张交付失败: {sheet.identifier}: {e}")
            return
        deliverable.success = True

    def _deliver_group(
        self,
        deliverable: DeliverableResult,
        members: list[SheetRef],
        files: dict[str, Path],
        output_dir: Path,
        report: ConsolidationReport,
    ) -> None:
        group_key = deliverable.key
        sources = [files[s.identifier] for s in members if s.identifier in files]
        if not sources:
            self._warn(report, f"合并组无可用图纸: {group_key}")
            return

        name = strip_invalid_filename_chars(build_combined_name(members[0].identifier, group_key))
        merge_cfg = self.config.merge
        if merge_cfg.output_format == "dxf":
            merged_path = output_dir / f"{name}.dxf"
        else:
            merged_path = report.temp_dir / MERGED_DIR / f"{name}.dxf"

        try:
            result = self.merger.merge_into_template(
                sources,
                self.config.template_path,
                merged_path,
                spacing=merge_cfg.sheet_spacing_mm,
                insert_offset_x=merge_cfg.insert_offset_x_mm,
                insert_offset_y=merge_cfg.insert_offset_y_mm,
            )
            for message in result.messages:
                report.add_message(f"[{group_key}] {message}")
            output_path = merged_path
            if merge_cfg.output_format != "dxf":
                output_path = self.oda.dxf_to_dwg(merged_path, output_dir)
        except Exception as e:
            self._warn(report, f"合并组交付失败: {group_key}: {e}")
            return

        deliverable.output_path = output_path
        deliverable.success = True
        logger.info(f"合并组完成: {group_key} -> {output_path.name} ({result.merged_count}张)")

    def _deliver_file(self, source: Path, output_dir: Path) -> Path:
        if self.config.merge.output_format == "dxf":
            target = output_dir / source.name
            shutil.copy2(source, target)
            return target
        return self.oda.dxf_to_dwg(source, output_dir)

    def _insert_title_block(self, sheet: SheetRef, path: Path, report: ConsolidationReport) -> None:
        """配置了图签时为单张插入（失败只记录）"""
        tb_path = self.config.title_block_path
        if tb_path is None:
            return
        if sheet.width_mm is None or sheet.height_mm is None:
            self._warn(report, f"缺少幅面尺寸，未插入图签: {sheet.identifier}")
            return

        tb = self.config.title_block
        try:
            self.title_block_inserter.insert_into_model(
                path,
                tb_path,
                sheet_width_mm=sheet.width_mm,
                sheet_height_mm=sheet.height_mm,
                view_scale=1.0,
                template_width_mm=tb.width_mm,
                template_height_mm=tb.height_mm,
                margin_mm=tb.margin_mm,
            )
        except (SheetMergeError, ValueError) as e:
            self._warn(report, f"图签插入失败: {sheet.identifier}: {e}")

    def _cleanup(self, report: ConsolidationReport) -> None:
        """删除临时目录（失败只记录）"""
        self._enter(report, ConsolidationState.CLEANUP)
        temp_dir = report.temp_dir
        if temp_dir is None or not temp_dir.exists():
            return
        try:
            shutil.rmtree(temp_dir)
        except OSError as e:
            self._warn(report, f"临时目录删除失败: {temp_dir}: {e}")

    # ------------------------------------------------------------------
    # 工具
    # ------------------------------------------------------------------

    def _enter(self, report: ConsolidationReport, state: ConsolidationState) -> None:
        report.enter(state)
        logger.info(f"进入阶段: {state.value}")
        stage = stage_for(state)
        if stage is not None:
            self._notify(state, stage.progress_start, f"开始阶段: {stage.name}")

    def _notify(self, state: ConsolidationState, percent: int, message: str) -> None:
        if self.progress_cb:
            self.progress_cb(state.value, percent, message)

    @staticmethod
    def _warn(report: ConsolidationReport, message: str) -> None:
        logger.warning(message)
        report.add_message(message)
