"""构建服务模块

根据打包配置收集文件并生成 makeself 归档。
"""

from .builder import Builder, BuildError, BuildResult
from .collector import FileCollector, collect_entries, entries_from_files

__all__ = [
    "Builder",
    "BuildError",
    "BuildResult",
    "FileCollector",
    "collect_entries",
    "entries_from_files",
]
