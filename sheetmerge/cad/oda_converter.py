"""
ODA 转换器 - 交付件 DXF→DWG 转换

职责：
- 调用 ODA File Converter 将单个DXF转为DWG
- 处理超时和错误

ODA 按目录批量转换，过滤器使用精确文件名，避免同目录其他DXF被一并转换。

依赖：
- ODA File Converter 可执行文件（路径由运行期配置 oda.exe_path 指定）

测试要点：
- test_dxf_to_dwg_success: 命令行参数与输出路径
- test_dxf_to_dwg_timeout: 超时处理
- test_dxf_to_dwg_file_not_found: 文件不存在
- test_missing_exe: 可执行文件缺失
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..config import RuntimeConfig, get_config
from ..interfaces import ConversionError, IODAConverter

logger = logging.getLogger(__name__)

# 输出 DWG 版本
OUTPUT_VERSION = "ACAD2018"


class ODAConverter(IODAConverter):
    """ODA File Converter 封装"""

    def __init__(
        self,
        exe_path: str | None = None,
        timeout: int | None = None,
        config: RuntimeConfig | None = None,
    ):
        config = config or get_config()
        exe = exe_path or config.oda.exe_path
        self.exe_path = Path(exe) if exe else None
        self.timeout = timeout or config.timeouts.oda_convert_sec
        self.work_dir = Path(config.oda.work_dir) if config.oda.work_dir else None

    def _ensure_exe(self) -> None:
        if not self.exe_path or not self.exe_path.exists():
            raise ConversionError(f"ODA可执行文件不存在: {self.exe_path}")
        if self.work_dir:
            self.work_dir.mkdir(parents=True, exist_ok=True)

    def dxf_to_dwg(self, dxf_path: Path, output_dir: Path) -> Path:
        """DXF 转 DWG"""
        if not dxf_path.exists():
            raise ConversionError(f"DXF文件不存在: {dxf_path}")

        self._ensure_exe()
        output_dir.mkdir(parents=True, exist_ok=True)

        cmd = [
            str(self.exe_path),
            str(dxf_path.parent),
            str(output_dir),
            OUTPUT_VERSION,
            "DWG",
            "0",  # Recursive
            "1",  # Audit
            dxf_path.name,  # Filter
        ]

        logger.debug(f"ODA转换: {' '.join(cmd)}")
        try:
            subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
                cwd=str(self.work_dir) if self.work_dir else None,
            )
        except subprocess.TimeoutExpired as e:
            raise ConversionError(f"ODA转换超时: {dxf_path}") from e
        except subprocess.CalledProcessError as e:
            detail = e.stderr or e.stdout or ""
            raise ConversionError(f"ODA转换失败: {detail}") from e

        return self._resolve_output(output_dir, dxf_path.stem, ".dwg")

    @staticmethod
    def _resolve_output(output_dir: Path, stem: str, suffix: str) -> Path:
        expected = output_dir / f"{stem}{suffix}"
        if expected.exists():
            return expected
        for candidate in output_dir.glob(f"{stem}.*"):
            if candidate.suffix.lower() == suffix:
                return candidate
        raise ConversionError(f"转换后文件不存在: {expected}")
