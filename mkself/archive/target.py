"""
输出目标策略

目标是可寻址文件时，makeself 直接写入最终路径；否则先写入临时文件，
再整体复制到目标字节流。
"""

import os
import shutil
import stat
import tempfile
from typing import Any, Optional, Protocol, runtime_checkable

from ..utils.logging import debug, warning, LogStage
from ..utils.paths import ensure_directory
from .errors import ArchiveIOError

SCRATCH_PREFIX = "makeself-output-"
EXECUTABLE_BITS = 0o111


@runtime_checkable
class Writable(Protocol):
    """可写字节流能力"""

    def write(self, data: bytes) -> Any:
        ...


@runtime_checkable
class NameableFile(Protocol):
    """可寻址文件能力：可写、可截断，并且拥有文件系统路径"""

    name: Any

    def write(self, data: bytes) -> Any:
        ...

    def flush(self) -> None:
        ...

    def truncate(self, size: Optional[int] = None) -> int:
        ...

    def seek(self, offset: int, whence: int = 0) -> int:
        ...


def nameable_path(target: Any) -> Optional[str]:
    """返回目标对应的普通文件绝对路径，不具备该能力时返回 None"""
    if not isinstance(target, NameableFile):
        return None
    name = getattr(target, "name", None)
    if not isinstance(name, str) or not name:
        return None
    path = os.path.abspath(name)
    if not os.path.isfile(path):
        return None
    return path


def _sink_fileno(target: Any) -> Optional[int]:
    """返回指向普通文件的描述符，不可用时返回 None"""
    try:
        fd = target.fileno()
        if stat.S_ISREG(os.fstat(fd).st_mode):
            return fd
    except (AttributeError, OSError, ValueError):
        pass
    return None


class OutputTarget:
    """输出目标策略基类"""

    direct = False

    def prepare(self) -> str:
        """在调用 makeself 之前调用，返回 makeself 的输出路径"""
        raise NotImplementedError

    def finalize(self) -> None:
        """makeself 成功后调用"""

    def cleanup(self) -> None:
        """无论成功与否都会调用"""


class DirectTarget(OutputTarget):
    """直接写入：makeself 在最终路径上创建归档，无需额外复制"""

    direct = True

    def __init__(self, path: str, target: Any = None):
        self.path = path
        self.target = target

    def prepare(self) -> str:
        ensure_directory(os.path.dirname(self.path) or ".")
        if self.target is not None and nameable_path(self.target) == self.path:
            # 目标文件即输出文件：清空并回到开头，文件句柄留给调用方关闭
            try:
                self.target.flush()
                self.target.truncate(0)
                self.target.seek(0)
            except (OSError, ValueError) as e:
                raise ArchiveIOError(f"无法截断目标文件 {self.path}: {e}", path=self.path) from e
        debug(f"直接写入输出文件: {self.path}", stage=LogStage.WRITE)
        return self.path


class BufferedTarget(OutputTarget):
    """缓冲写入：makeself 写入临时文件，成功后复制到目标字节流"""

    def __init__(self, target: Any):
        self.target = target
        self.scratch_path: Optional[str] = None
        self.bytes_written = 0

    def prepare(self) -> str:
        try:
            fd, path = tempfile.mkstemp(prefix=SCRATCH_PREFIX)
            os.close(fd)
        except OSError as e:
            raise ArchiveIOError(f"无法创建临时输出文件: {e}") from e
        self.scratch_path = path
        debug(f"使用临时输出文件: {path}", stage=LogStage.WRITE)
        return path

    def finalize(self) -> None:
        if self.scratch_path is None:
            raise ArchiveIOError("临时输出文件尚未创建")
        try:
            with open(self.scratch_path, "rb") as src:
                shutil.copyfileobj(src, self.target)
                self.bytes_written = src.tell()
            flush = getattr(self.target, "flush", None)
            if callable(flush):
                flush()
        except OSError as e:
            raise ArchiveIOError(f"复制 makeself 归档失败: {e}", path=self.scratch_path) from e

        self._make_executable()

    def _make_executable(self) -> None:
        """目标若为已打开的普通文件，为其添加可执行权限"""
        fd = _sink_fileno(self.target)
        if fd is None:
            return
        try:
            mode = stat.S_IMODE(os.fstat(fd).st_mode)
            os.fchmod(fd, mode | EXECUTABLE_BITS)
        except (OSError, AttributeError, NotImplementedError) as e:
            # 归档内容正确比可执行位更重要
            warning(f"无法为 makeself 归档设置可执行权限: {e}", stage=LogStage.WRITE)

    def cleanup(self) -> None:
        if self.scratch_path is None:
            return
        try:
            os.remove(self.scratch_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            debug(f"删除临时输出文件失败 {self.scratch_path}: {e}", stage=LogStage.CLEANUP)
        self.scratch_path = None


def select_target(output_path: Optional[str], target: Any) -> OutputTarget:
    """已解析出输出路径时直接写入，否则缓冲写入"""
    if output_path:
        return DirectTarget(output_path, target)
    return BufferedTarget(target)
