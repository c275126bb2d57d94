"""
构建器主类

根据打包配置收集文件，创建 makeself 归档并写入输出文件。
归档先生成到输出目录下的临时文件，成功后才替换目标文件。
"""

import os
import stat
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..archive.entry import FileEntry
from ..archive.errors import ArchiveError, ArchiveIOError, EntryExistsError, ToolNotFoundError
from ..archive.generator import GENERATOR_NAMES, MakeselfGenerator, default_generator, not_found_message
from ..archive.makeself import MakeselfArchive
from ..config.schema import PackageConfig
from ..utils.logging import debug, error, info, success, warning, LogStage
from ..utils.paths import ensure_directory, format_size
from .collector import FileCollector, entries_from_files

# 进度回调类型: (阶段, 当前, 总数, 消息)
ProgressCallback = Callable[[str, int, int, str], None]

ARCHIVE_MODE = 0o755


class BuildError(Exception):
    """构建错误"""
    pass


@dataclass
class BuildResult:
    """构建结果"""
    success: bool
    output_path: Optional[Path] = None
    output_size: Optional[int] = None
    file_count: int = 0
    build_time: Optional[float] = None
    error: Optional[str] = None


class Builder:
    """makeself 归档构建器"""

    def __init__(self, generator: Optional[MakeselfGenerator] = None):
        """
        Args:
            generator: 外部生成器，默认在 PATH 中查找 makeself
        """
        self.generator = generator or default_generator

    def build(
        self,
        config: PackageConfig,
        output_path: Optional[Union[str, Path]] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BuildResult:
        """构建归档

        失败时已存在的输出文件保持不变。

        Args:
            config: 打包配置
            output_path: 输出文件路径，默认使用配置中的 output
            progress_callback: 进度回调函数

        Returns:
            BuildResult: 构建结果，失败时 success 为 False
        """
        start = time.time()
        output = Path(output_path) if output_path else Path(config.default_output())

        try:
            count = self._build(config, output, progress_callback)
        except (ArchiveError, BuildError, OSError, ValueError) as e:
            error(f"构建失败: {e}", stage=LogStage.DONE)
            return BuildResult(success=False, output_path=output, error=str(e), build_time=time.time() - start)

        size = output.stat().st_size
        elapsed = time.time() - start
        success(f"归档构建成功: {output}", stage=LogStage.DONE)
        info(f"  文件数量: {count}")
        info(f"  最终大小: {format_size(size)}")
        info(f"  构建时间: {elapsed:.1f}秒")
        return BuildResult(
            success=True,
            output_path=output,
            output_size=size,
            file_count=count,
            build_time=elapsed,
        )

    def collect(self, config: PackageConfig) -> List[FileEntry]:
        """收集全部条目：显式文件在前，输入目录展开的文件在后"""
        entries = entries_from_files(config.files)
        if config.inputs:
            collector = FileCollector()
            entries.extend(collector.collect(config.inputs, config.exclude))
            stats = collector.get_statistics()
            info(f"收集到 {stats['total_files']} 个文件，共 {format_size(stats['total_size'])}", stage=LogStage.COLLECT)
        return entries

    def _build(self, config: PackageConfig, output: Path, progress_callback: Optional[ProgressCallback]) -> int:
        info(f"开始构建归档: {output}", stage=LogStage.INIT)
        if self.generator.locate() is None:
            raise ToolNotFoundError(not_found_message(GENERATOR_NAMES))

        entries = self.collect(config)
        if not entries:
            raise BuildError("没有可打包的文件")

        makeself_config = config.makeself.model_copy(update={"label": config.default_label()})
        ensure_directory(output.parent)

        scratch = self._create_scratch(output)
        try:
            with open(scratch, "wb") as f:
                added = self._assemble(f, makeself_config, entries, output, progress_callback)
            mode = stat.S_IMODE(os.stat(scratch).st_mode)
            os.chmod(scratch, mode | ARCHIVE_MODE)
            os.replace(scratch, output)
        finally:
            self._remove_scratch(scratch)

        debug(f"已添加 {added}/{len(entries)} 个文件", stage=LogStage.STAGE)
        return added

    def _assemble(self, sink, makeself_config, entries: List[FileEntry], output: Path,
                  progress_callback: Optional[ProgressCallback]) -> int:
        added = 0
        archive = MakeselfArchive.with_config(sink, None, makeself_config, generator=self.generator)
        with archive:
            total = len(entries)
            for index, entry in enumerate(entries, start=1):
                try:
                    archive.add(entry)
                    added += 1
                except EntryExistsError:
                    warning(f"跳过重复文件: {entry.destination}", stage=LogStage.STAGE)
                if progress_callback:
                    progress_callback("添加文件", index, total, entry.destination)

            if progress_callback:
                progress_callback("生成归档", 0, 1, str(output))
            archive.close()
            if progress_callback:
                progress_callback("生成归档", 1, 1, str(output))
        return added

    @staticmethod
    def _create_scratch(output: Path) -> Path:
        """在输出目录下创建临时文件"""
        try:
            fd, name = tempfile.mkstemp(prefix=f".{output.name}.", suffix=".tmp", dir=str(output.parent))
            os.close(fd)
        except OSError as e:
            raise ArchiveIOError(f"无法在 {output.parent} 创建临时文件: {e}", path=str(output.parent)) from e
        return Path(name)

    @staticmethod
    def _remove_scratch(scratch: Path) -> None:
        """删除本次构建的临时文件（替换成功后已不存在）"""
        try:
            scratch.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            warning(f"无法删除临时文件 {scratch}: {e}", stage=LogStage.CLEANUP)
