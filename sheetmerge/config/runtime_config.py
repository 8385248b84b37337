"""
运行期配置 - 读取 config/sheetmerge.yaml

职责：
- 加载模板路径/排布间距/图签/ODA等运行参数
- 提供环境变量覆盖机制（SHEETMERGE_ 前缀）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

DEFAULT_CONFIG_PATH = Path("config/sheetmerge.yaml")


class MergeConfig(BaseModel):
    """合并配置"""

    template_path: str = ""
    sheet_spacing_mm: float = 220.0
    insert_offset_x_mm: float = 0.0
    insert_offset_y_mm: float = 0.0
    content_only: bool = False
    output_format: Literal["dxf", "dwg"] = "dxf"
    temp_dir_prefix: str = "_tmp_dxf_merge_"


class TitleBlockConfig(BaseModel):
    """图签配置（path为空则不插入）"""

    path: str = ""
    width_mm: float = 0.0
    height_mm: float = 0.0
    margin_mm: float = 10.0


class ODAConfig(BaseModel):
    """ODA转换器配置"""

    exe_path: str = ""
    work_dir: str | None = None


class TimeoutConfig(BaseModel):
    """超时配置"""

    oda_convert_sec: int = 600


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "sheetmerge.log"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    merge: MergeConfig = Field(default_factory=MergeConfig)
    title_block: TitleBlockConfig = Field(default_factory=TitleBlockConfig)
    oda: ODAConfig = Field(default_factory=ODAConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "SHEETMERGE_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        config = cls(
            merge=MergeConfig(**cls._extract(runtime_opts, "merge")),
            title_block=TitleBlockConfig(**cls._extract(runtime_opts, "title_block")),
            oda=ODAConfig(**cls._extract(runtime_opts, "oda_converter")),
            timeouts=TimeoutConfig(**cls._extract(runtime_opts, "timeouts")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if self.merge.template_path:
            self.merge.template_path = self._absolute(base_dir, self.merge.template_path)
        if self.title_block.path:
            self.title_block.path = self._absolute(base_dir, self.title_block.path)
        if self.oda.exe_path:
            self.oda.exe_path = self._absolute(base_dir, self.oda.exe_path)
        if self.oda.work_dir:
            self.oda.work_dir = self._absolute(base_dir, self.oda.work_dir)

    @staticmethod
    def _absolute(base_dir: Path, value: str) -> str:
        path = Path(value)
        if path.is_absolute():
            return value
        return str((base_dir / path).resolve())

    @property
    def template_path(self) -> Path | None:
        """模板路径（未配置返回None）"""
        return Path(self.merge.template_path) if self.merge.template_path else None

    @property
    def title_block_path(self) -> Path | None:
        """图签路径（未配置返回None）"""
        return Path(self.title_block.path) if self.title_block.path else None


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    _config = RuntimeConfig.from_yaml(yaml_path or DEFAULT_CONFIG_PATH)
    return _config
