"""
路径工具

归档内目标路径的规范化与暂存区内的安全拼接。
"""

from pathlib import Path, PurePosixPath
from typing import Union

PathLike = Union[str, Path]

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def ensure_directory(path: PathLike) -> Path:
    """创建目录（包括父目录），已存在时不报错"""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def _posix(path: PathLike) -> PurePosixPath:
    return PurePosixPath(str(path).replace("\\", "/"))


def normalize_archive_path(path: PathLike) -> str:
    """将归档内的目标路径规范化为 POSIX 形式

    去除多余的分隔符和 ``.`` 片段，使 ``a//b`` 与 ``./a/b`` 视为同一条目。
    """
    posix = _posix(path)
    parts = [p for p in posix.parts if p not in (".", "", "/")]
    joined = "/".join(parts)
    return "/" + joined if posix.is_absolute() else joined


def safe_path_join(root: PathLike, *relatives: PathLike) -> Path:
    """在 root 下拼接相对路径

    Args:
        root: 根目录
        *relatives: 相对路径片段，可使用 ``/`` 或 ``\\`` 分隔

    Returns:
        Path: root 内部的路径

    Raises:
        ValueError: 片段为绝对路径或包含 ``..``
    """
    result = Path(root)
    for relative in relatives:
        posix = _posix(relative)
        if posix.is_absolute() or Path(relative).is_absolute():
            raise ValueError(f"不允许使用绝对路径: {relative}")
        if ".." in posix.parts:
            raise ValueError(f"检测到目录穿越尝试: {relative}")
        result = result.joinpath(*posix.parts)
    return result


def format_size(size_bytes: int) -> str:
    """格式化文件大小，如 ``512 B``、``1.5 MB``"""
    size = float(size_bytes)
    for unit in SIZE_UNITS[:-1]:
        if size < 1024.0:
            break
        size /= 1024.0
    else:
        unit = SIZE_UNITS[-1]

    if unit == "B":
        return f"{int(size)} B"
    return f"{size:.1f} {unit}"
