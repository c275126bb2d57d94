"""归档模块

提供 makeself 自解压归档的创建功能，以及按格式名创建归档的工厂函数。
"""

from typing import Any, Callable, Dict, Optional

from ..config.schema import CompressionFormat, MakeselfConfig
from .base import Archive
from .command import DEFAULT_LABEL, build_arguments
from .entry import FileEntry, stage_file
from .errors import (
    ArchiveClosedError,
    ArchiveError,
    ArchiveIOError,
    EntryExistsError,
    GeneratorFailedError,
    SourceNotFoundError,
    ToolNotFoundError,
    UnsupportedEntryError,
    UnsupportedFormatError,
)
from .generator import (
    GeneratorResult,
    MakeselfGenerator,
    check_makeself_available,
    get_makeself_version,
)
from .makeself import DEFAULT_INSTALL_SCRIPT, MakeselfArchive
from .staging import StagingArea
from .target import BufferedTarget, DirectTarget, NameableFile, Writable, select_target

MAKESELF_FORMAT = "makeself"

# 选项函数修改一个待验证的配置字典
MakeselfOption = Callable[[Dict[str, Any]], None]


def with_label(label: str) -> MakeselfOption:
    """设置归档标签"""
    def apply(cfg: Dict[str, Any]) -> None:
        cfg["label"] = label
    return apply


def with_script(script: str) -> MakeselfOption:
    """设置内联安装脚本"""
    def apply(cfg: Dict[str, Any]) -> None:
        cfg["install_script"] = script
    return apply


def with_script_file(script_file: str) -> MakeselfOption:
    """设置安装脚本文件路径"""
    def apply(cfg: Dict[str, Any]) -> None:
        cfg["install_script_file"] = script_file
    return apply


def with_compression(compression: Any) -> MakeselfOption:
    """设置压缩格式：gzip, bzip2, xz, lzo, lz4, zstd, pigz, compress, none，或布尔开关"""
    def apply(cfg: Dict[str, Any]) -> None:
        cfg["compression"] = compression
    return apply


def with_extra_args(*args: str) -> MakeselfOption:
    """追加透传参数，可多次调用"""
    def apply(cfg: Dict[str, Any]) -> None:
        cfg["extra_args"] = list(cfg.get("extra_args", ())) + list(args)
    return apply


def with_lsm_template(content: str) -> MakeselfOption:
    """设置内联 LSM 内容"""
    def apply(cfg: Dict[str, Any]) -> None:
        cfg["lsm_content"] = content
    return apply


def with_lsm_file(path: str) -> MakeselfOption:
    """设置 LSM 文件路径"""
    def apply(cfg: Dict[str, Any]) -> None:
        cfg["lsm_file"] = path
    return apply


def new_archive(target: Any, fmt: str, **kwargs) -> Archive:
    """按格式名创建归档

    Raises:
        UnsupportedFormatError: 格式不受支持
    """
    if fmt == MAKESELF_FORMAT:
        return MakeselfArchive(target, **kwargs)
    raise UnsupportedFormatError(f"无效的归档格式: {fmt}")


def new_archive_with_options(
    target: Any,
    fmt: str,
    output_path: Optional[str] = None,
    *options: MakeselfOption,
    **kwargs,
) -> Archive:
    """使用选项函数创建归档，目前仅 makeself 格式支持选项"""
    if fmt != MAKESELF_FORMAT:
        return new_archive(target, fmt, **kwargs)

    cfg: Dict[str, Any] = {}
    for option in options:
        option(cfg)
    return MakeselfArchive.with_config(target, output_path, MakeselfConfig(**cfg), **kwargs)


__all__ = [
    "Archive",
    "MakeselfArchive",
    "MakeselfConfig",
    "CompressionFormat",
    "FileEntry",
    "StagingArea",
    "MakeselfGenerator",
    "GeneratorResult",
    "NameableFile",
    "Writable",
    "DirectTarget",
    "BufferedTarget",
    "select_target",
    "build_arguments",
    "stage_file",
    "DEFAULT_INSTALL_SCRIPT",
    "DEFAULT_LABEL",
    "MAKESELF_FORMAT",
    "new_archive",
    "new_archive_with_options",
    "with_label",
    "with_script",
    "with_script_file",
    "with_compression",
    "with_extra_args",
    "with_lsm_template",
    "with_lsm_file",
    "check_makeself_available",
    "get_makeself_version",

    # 异常类
    "ArchiveError",
    "ArchiveClosedError",
    "ArchiveIOError",
    "EntryExistsError",
    "GeneratorFailedError",
    "SourceNotFoundError",
    "ToolNotFoundError",
    "UnsupportedEntryError",
    "UnsupportedFormatError",
]
