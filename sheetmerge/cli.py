"""
命令行入口 - 按清单把预导出的DXF合并为交付件

用法：
    sheetmerge --manifest sheets.yaml --source-dir exported/ --out-dir out/
    sheetmerge ... --template template.dxf --spacing 250

退出码：全部交付物成功为0，否则为1。
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .config import RuntimeConfig, reload_config
from .host import FolderSheetExporter, ManifestSheetSource, collect_sheets
from .interfaces import SheetMergeError
from .pipeline import ConsolidationOrchestrator

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetmerge",
        description="按图号规则合并图纸DXF",
    )
    parser.add_argument("--manifest", required=True, help="图纸清单YAML")
    parser.add_argument("--source-dir", required=True, help="已导出的DXF目录")
    parser.add_argument("--out-dir", required=True, help="交付件输出目录")
    parser.add_argument("--config", default="", help="运行期配置YAML（默认：config/sheetmerge.yaml）")
    parser.add_argument("--template", default="", help="合并模板DXF（覆盖配置）")
    parser.add_argument("--spacing", type=float, default=None, help="合并排布间距mm（覆盖配置）")
    return parser


def setup_logging(config: RuntimeConfig) -> None:
    """按配置初始化根日志"""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.logging.log_to_file:
        handlers.append(logging.FileHandler(config.logging.log_file, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, config.logging.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    config = reload_config(args.config or None)
    if args.template:
        config.merge.template_path = str(Path(args.template).resolve())
    if args.spacing is not None:
        config.merge.sheet_spacing_mm = args.spacing
    setup_logging(config)

    try:
        source = ManifestSheetSource(Path(args.manifest))
    except SheetMergeError as e:
        logger.error(str(e))
        return 1

    sheets = collect_sheets(source)
    orchestrator = ConsolidationOrchestrator(
        exporter=FolderSheetExporter(Path(args.source_dir)),
        config=config,
        progress_cb=lambda stage, percent, message: logger.debug(f"[{percent:3d}%] {message}"),
    )
    report = orchestrator.run(sheets, Path(args.out_dir))

    for deliverable in report.deliverables:
        status = "OK" if deliverable.success else "FAILED"
        target = deliverable.output_path.name if deliverable.output_path else "-"
        print(f"{deliverable.kind.value:6s} {deliverable.key}: {status} {target}")
    for message in report.messages:
        print(f"  ! {message}")
    if report.any_success and not report.success:
        print("部分交付成功")

    return 0 if report.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
