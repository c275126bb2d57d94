"""通用工具模块"""

from .logging import (
    LogStage,
    OutputLevel,
    configure_logging,
    debug,
    error,
    info,
    set_log_file,
    set_log_level,
    success,
    warning,
)

from .paths import (
    ensure_directory,
    format_size,
    normalize_archive_path,
    safe_path_join,
)

__all__ = [
    # 日志相关
    "LogStage",
    "OutputLevel",
    "configure_logging",
    "debug",
    "error",
    "info",
    "set_log_file",
    "set_log_level",
    "success",
    "warning",

    # 路径相关
    "ensure_directory",
    "format_size",
    "normalize_archive_path",
    "safe_path_join",
]
