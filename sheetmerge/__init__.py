"""
图纸合并系统 - 核心模块

模块结构：
- config/     运行期配置加载
- models/     数据模型定义
- grouping/   图号规则解析/分组/合并文件命名
- cad/        CAD 处理（图纸空间提升/多图合并/图签插入/DWG转换）
- host/       宿主边界（图纸来源/导出协作方）
- pipeline/   流水线编排
- cli         命令行入口
"""

__version__ = "0.1.0"
