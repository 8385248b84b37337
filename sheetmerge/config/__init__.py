"""
配置层 - 加载运行期配置

职责：
- 加载 config/sheetmerge.yaml（运行期参数）
- 提供类型安全的配置访问接口
"""

from .runtime_config import (
    LoggingConfig,
    MergeConfig,
    ODAConfig,
    RuntimeConfig,
    TimeoutConfig,
    TitleBlockConfig,
    get_config,
    reload_config,
)

__all__ = [
    "RuntimeConfig",
    "MergeConfig",
    "TitleBlockConfig",
    "ODAConfig",
    "TimeoutConfig",
    "LoggingConfig",
    "get_config",
    "reload_config",
]
