"""
文件收集器

将配置中的输入路径展开为逐个文件的归档条目，支持 glob 模式排除。
makeself 归档不接受目录条目，目录必须在这里被展开。
"""

import fnmatch
from pathlib import Path, PurePosixPath
from typing import Dict, Iterator, List, Optional, Set

from ..archive.entry import FileEntry
from ..config.schema import FileModel, InputPathModel
from ..utils.logging import debug, LogStage


class FileCollector:
    """文件收集器

    扫描输入路径，应用排除规则，生成按目标路径排序且不重复的条目列表。
    """

    def __init__(self):
        self.collected: List[FileEntry] = []
        self.excluded_patterns: List[str] = []
        self.total_size: int = 0
        self._destinations: Set[str] = set()

    def collect(
        self,
        inputs: List[InputPathModel],
        exclude_patterns: Optional[List[str]] = None,
    ) -> List[FileEntry]:
        """收集文件

        Args:
            inputs: 输入路径配置列表
            exclude_patterns: 排除模式列表（glob 格式）

        Returns:
            List[FileEntry]: 归档条目列表

        Raises:
            FileNotFoundError: 输入路径不存在
            ValueError: 输入路径既不是文件也不是目录
        """
        self.collected = []
        self.excluded_patterns = exclude_patterns or []
        self.total_size = 0
        self._destinations = set()

        for input_config in inputs:
            input_path = Path(input_config.path)
            prefix = PurePosixPath(input_config.prefix.replace('\\', '/')) if input_config.prefix else PurePosixPath()

            if not input_path.exists():
                raise FileNotFoundError(f"输入路径不存在: {input_path}")

            if input_path.is_file():
                self._add(input_path, prefix / input_path.name)
            elif input_path.is_dir():
                base = input_path.parent if input_config.preserve_structure else input_path
                for file_path in self._walk_directory(input_path, input_config.recursive):
                    relative = PurePosixPath(file_path.relative_to(base).as_posix())
                    self._add(file_path, prefix / relative)
            else:
                raise ValueError(f"输入路径既不是文件也不是目录: {input_path}")

        # 按目标路径排序，确保输出一致性
        self.collected.sort(key=lambda e: e.destination)
        return self.collected

    def get_statistics(self) -> Dict[str, int]:
        """获取收集统计信息"""
        return {
            'total_files': len(self.collected),
            'total_size': self.total_size,
        }

    def _add(self, file_path: Path, destination: PurePosixPath) -> None:
        dest = destination.as_posix()
        if self._is_excluded(dest):
            debug(f"排除: {dest}", stage=LogStage.COLLECT)
            return
        if dest in self._destinations:
            debug(f"跳过重复目标: {dest} ({file_path})", stage=LogStage.COLLECT)
            return
        self._destinations.add(dest)
        self.collected.append(FileEntry(source=file_path.resolve(), destination=dest))
        self.total_size += file_path.stat().st_size

    def _walk_directory(self, directory: Path, recursive: bool) -> Iterator[Path]:
        """遍历目录下的普通文件"""
        for item in sorted(directory.iterdir()):
            if item.is_dir():
                if recursive:
                    yield from self._walk_directory(item, recursive)
            elif item.is_file():
                yield item

    def _is_excluded(self, path: str) -> bool:
        """检查路径是否被排除"""
        for pattern in self.excluded_patterns:
            if self._match_pattern(path, pattern.replace('\\', '/')):
                return True
        return False

    def _match_pattern(self, path: str, pattern: str) -> bool:
        """匹配单个模式"""
        if fnmatch.fnmatch(path, pattern):
            return True

        # 目录模式（以 / 结尾）匹配目录内的所有文件
        if pattern.endswith('/'):
            dir_pattern = pattern.rstrip('/')
            parts = path.split('/')[:-1]
            return any(fnmatch.fnmatch(part, dir_pattern) for part in parts) or path.startswith(dir_pattern + '/')

        # 不含分隔符的模式匹配任意层级的文件名
        if '/' not in pattern:
            return fnmatch.fnmatch(path.rsplit('/', 1)[-1], pattern)

        return False


def entries_from_files(files: List[FileModel]) -> List[FileEntry]:
    """将显式文件配置转换为归档条目"""
    return [
        FileEntry(
            source=Path(f.src),
            destination=f.destination(),
            mode=f.info.mode,
            mtime=f.info.mtime,
            owner=f.info.owner,
            group=f.info.group,
        )
        for f in files
    ]


def collect_entries(
    inputs: List[InputPathModel],
    exclude_patterns: Optional[List[str]] = None,
) -> List[FileEntry]:
    """便捷函数：收集文件"""
    return FileCollector().collect(inputs, exclude_patterns)
