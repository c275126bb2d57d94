"""
归档错误定义

makeself 归档构建过程中可能出现的全部错误类型。
"""

from typing import Optional, Sequence


class ArchiveError(Exception):
    """归档错误基类"""
    pass


class ToolNotFoundError(ArchiveError):
    """PATH 中找不到 makeself 生成器"""
    pass


class EntryExistsError(ArchiveError):
    """目标路径已存在于归档中"""

    def __init__(self, destination: str):
        super().__init__(f"文件已存在于归档中: {destination}")
        self.destination = destination


class ArchiveClosedError(ArchiveError):
    """归档已关闭"""

    def __init__(self, message: str = "无法向已关闭的归档添加文件"):
        super().__init__(message)


class UnsupportedEntryError(ArchiveError):
    """不支持的条目（目录、越界路径等）"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class UnsupportedFormatError(ArchiveError):
    """不支持的归档格式或操作"""
    pass


class ArchiveIOError(ArchiveError, OSError):
    """文件读写错误，附带出错路径"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class SourceNotFoundError(ArchiveIOError, FileNotFoundError):
    """源文件或脚本文件不存在"""
    pass


class GeneratorFailedError(ArchiveError):
    """makeself 以非零状态退出"""

    def __init__(self, tool: str, returncode: int, stderr: str, command: Sequence[str] = ()):
        detail = stderr.strip()
        message = f"{tool} 执行失败 (退出码 {returncode})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.tool = tool
        self.returncode = returncode
        self.stderr = stderr
        self.command = list(command)
