"""
暂存区

归档内容在交给 makeself 之前的临时目录，其结构与归档内的文件树一致。
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..utils.logging import debug, LogStage
from ..utils.paths import safe_path_join
from .errors import ArchiveIOError, UnsupportedEntryError

STAGING_PREFIX = "makeself-"


class StagingArea:
    """独占的临时目录

    由单个归档构建器独占，关闭时销毁。各写入方使用互不重叠的相对路径，
    无需加锁。
    """

    def __init__(self, root: Path):
        self.root = root
        self._destroyed = False

    @classmethod
    def create(cls, prefix: str = STAGING_PREFIX) -> "StagingArea":
        """分配唯一命名的临时目录

        Raises:
            ArchiveIOError: 无法创建临时目录
        """
        try:
            root = Path(tempfile.mkdtemp(prefix=prefix))
        except OSError as e:
            raise ArchiveIOError(f"无法创建暂存目录: {e}") from e
        debug(f"创建暂存目录: {root}", stage=LogStage.STAGE)
        return cls(root)

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def path_for(self, relative: Union[str, Path]) -> Path:
        """返回相对路径在暂存区内的绝对路径

        Raises:
            UnsupportedEntryError: 绝对路径或包含 ``..`` 的路径
        """
        try:
            return safe_path_join(self.root, relative)
        except ValueError as e:
            raise UnsupportedEntryError(str(e), path=str(relative)) from e

    def exists(self, relative: Union[str, Path]) -> bool:
        return self.path_for(relative).exists()

    def write_bytes(self, relative: Union[str, Path], content: bytes, mode: Optional[int] = None) -> Path:
        """写入文件并设置权限

        Raises:
            ArchiveIOError: 写入失败
        """
        target = self.path_for(relative)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
            if mode is not None:
                os.chmod(target, mode)
        except OSError as e:
            raise ArchiveIOError(f"写入暂存文件失败 {target}: {e}", path=str(target)) from e
        return target

    def write_text(self, relative: Union[str, Path], content: str, mode: Optional[int] = None) -> Path:
        return self.write_bytes(relative, content.encode("utf-8"), mode)

    def destroy(self) -> None:
        """递归删除暂存目录，忽略所有错误"""
        if self._destroyed:
            return
        self._destroyed = True
        shutil.rmtree(self.root, ignore_errors=True)
        debug(f"已清理暂存目录: {self.root}", stage=LogStage.CLEANUP)

    def __repr__(self) -> str:
        return f"StagingArea({str(self.root)!r})"
