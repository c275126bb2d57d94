"""
文件条目

描述待加入归档的单个文件，并负责将其复制到暂存区。
"""

import os
import shutil
import stat
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from ..utils.logging import debug, LogStage
from .errors import ArchiveIOError, SourceNotFoundError, UnsupportedEntryError
from .staging import StagingArea

Timestamp = Union[datetime, float, int]


@dataclass(frozen=True)
class FileEntry:
    """归档文件条目"""
    source: Path  # 源文件路径
    destination: str  # 归档内的相对路径
    mode: Optional[int] = None  # 权限覆盖，None 或 0 表示沿用源文件权限
    mtime: Optional[Timestamp] = None  # 修改时间覆盖，None 或 0 表示沿用源文件时间
    owner: Optional[str] = None  # 仅记录，不应用（通常需要 root 权限）
    group: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "source", Path(self.source))
        object.__setattr__(self, "destination", str(self.destination))

    def timestamp(self) -> Optional[float]:
        """返回以秒为单位的修改时间覆盖，未设置或为零时返回 None"""
        if self.mtime is None:
            return None
        if isinstance(self.mtime, datetime):
            value = self.mtime.timestamp()
        else:
            value = float(self.mtime)
        return value or None


def stage_file(staging: StagingArea, entry: FileEntry, destination: str) -> Path:
    """将条目复制到暂存区

    Args:
        staging: 暂存区
        entry: 文件条目
        destination: 规范化后的目标路径

    Returns:
        Path: 暂存区内的文件路径

    Raises:
        SourceNotFoundError: 源文件不存在
        ArchiveIOError: 源文件无法读取或目标无法写入
        UnsupportedEntryError: 源为目录或目标路径越界
    """
    target = staging.path_for(destination)
    source = entry.source

    try:
        src_stat = os.stat(source)
    except FileNotFoundError as e:
        raise SourceNotFoundError(f"源文件不存在: {source}", path=str(source)) from e
    except OSError as e:
        raise ArchiveIOError(f"无法读取源文件信息 {source}: {e}", path=str(source)) from e

    if stat.S_ISDIR(src_stat.st_mode):
        raise UnsupportedEntryError(f"makeself 归档不支持目录条目: {source}", path=str(source))

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArchiveIOError(f"无法创建目录 {target.parent}: {e}", path=str(target.parent)) from e

    try:
        shutil.copyfile(source, target)
    except OSError as e:
        raise ArchiveIOError(f"复制文件失败 {source} -> {target}: {e}", path=str(source)) from e

    mode = entry.mode if entry.mode else stat.S_IMODE(src_stat.st_mode)
    try:
        os.chmod(target, mode)
    except OSError as e:
        raise ArchiveIOError(f"设置权限失败 {target}: {e}", path=str(target)) from e

    ts = entry.timestamp()
    if ts is not None:
        try:
            os.utime(target, (ts, ts))
        except (OSError, OverflowError, ValueError) as e:
            raise ArchiveIOError(f"设置修改时间失败 {target}: {e}", path=str(target)) from e

    if entry.owner or entry.group:
        debug(f"忽略属主/属组设置: {destination} ({entry.owner or '-'}:{entry.group or '-'})", stage=LogStage.STAGE)

    return target
