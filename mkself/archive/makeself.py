"""
makeself 自解压归档

文件先复制到独占的暂存目录，关闭时调用外部 makeself 生成可执行归档。
目标为可寻址文件时 makeself 直接写入该路径，否则写入临时文件后复制到目标流。

示例::

    with open("app.run", "wb") as f:
        archive = MakeselfArchive(f)
        archive.add(FileEntry(source="build/app", destination="app"))
        archive.close()
"""

import os
from pathlib import Path
from typing import Any, FrozenSet, Optional, Set, Union

from ..config.schema import MakeselfConfig
from ..utils.logging import debug, info, success, LogStage
from ..utils.paths import format_size, normalize_archive_path
from .base import Archive
from .command import INSTALL_SCRIPT_NAME, LSM_FILE_NAME, build_arguments
from .entry import FileEntry, Timestamp, stage_file
from .errors import (
    ArchiveClosedError,
    ArchiveError,
    EntryExistsError,
    GeneratorFailedError,
    ToolNotFoundError,
    UnsupportedEntryError,
    UnsupportedFormatError,
)
from .generator import GENERATOR_NAMES, MakeselfGenerator, default_generator, not_found_message
from .resolver import resolve_descriptor, resolve_install_script, resolve_output_path
from .staging import StagingArea
from .target import select_target

DEFAULT_INSTALL_SCRIPT = """#!/bin/bash
# Default installation script for makeself archive
# This script is executed after extraction

# Make binaries executable
find . -type f -perm -u+x -exec chmod +x {} \\;

echo "Archive extracted successfully to $(pwd)"
echo "Files:"
find . -type f | sort
"""

SCRIPT_MODE = 0o755
DESCRIPTOR_MODE = 0o644


class MakeselfArchive(Archive):
    """makeself 归档构建器

    状态只有打开和关闭两种，关闭不可逆。单个实例不是线程安全的。
    """

    def __init__(
        self,
        target: Any,
        config: Optional[MakeselfConfig] = None,
        output_path: Optional[Union[str, Path]] = None,
        generator: Optional[MakeselfGenerator] = None,
    ):
        """
        Args:
            target: 输出目标，可写字节流或已打开的文件
            config: makeself 配置
            output_path: 输出路径，优先级低于 config.output_path
            generator: 外部生成器，默认在 PATH 中查找 makeself
        """
        self.config = config or MakeselfConfig()
        self.generator = generator or default_generator
        self._target = target
        self._files: Set[str] = set()
        self._reserved: Set[str] = set()
        self._closed = False
        self._close_error: Optional[BaseException] = None

        self._staging = StagingArea.create()
        try:
            self._output_path = resolve_output_path(
                self.config,
                os.fspath(output_path) if output_path else None,
                target,
            )

            script = resolve_install_script(self.config)
            if script is not None:
                self._staging.write_bytes(INSTALL_SCRIPT_NAME, script, SCRIPT_MODE)
                self._reserved.add(INSTALL_SCRIPT_NAME)
                debug("已写入自定义安装脚本", stage=LogStage.CONFIG)

            if self.config.lsm_file is not None or self.config.lsm_content is not None:
                self._reserved.add(LSM_FILE_NAME)
        except BaseException:
            self._staging.destroy()
            raise

    @classmethod
    def with_install_script(cls, target: Any, install_script: str, **kwargs) -> "MakeselfArchive":
        """使用自定义安装脚本内容创建归档"""
        return cls(target, MakeselfConfig(install_script=install_script), **kwargs)

    @classmethod
    def with_config(
        cls,
        target: Any,
        output_path: Optional[Union[str, Path]],
        config: MakeselfConfig,
        **kwargs,
    ) -> "MakeselfArchive":
        """使用完整配置创建归档"""
        return cls(target, config, output_path=output_path, **kwargs)

    @classmethod
    def copy(cls, source: Any, target: Any) -> "MakeselfArchive":
        raise UnsupportedFormatError("不支持复制 makeself 归档")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def output_path(self) -> Optional[str]:
        return self._output_path

    @property
    def staging_dir(self) -> Path:
        return self._staging.root

    @property
    def files(self) -> FrozenSet[str]:
        return frozenset(self._files)

    def add(
        self,
        entry: Union[FileEntry, str, Path],
        destination: Optional[str] = None,
        mode: Optional[int] = None,
        mtime: Optional[Timestamp] = None,
    ) -> None:
        """添加文件

        可以传入 FileEntry，也可以直接传入源路径和目标路径。

        Raises:
            ArchiveClosedError: 归档已关闭
            EntryExistsError: 目标路径重复
            UnsupportedEntryError: 源为目录或目标路径无效
            SourceNotFoundError: 源文件不存在
            ArchiveIOError: 读写失败
        """
        if not isinstance(entry, FileEntry):
            if destination is None:
                destination = Path(entry).name
            entry = FileEntry(source=Path(entry), destination=destination, mode=mode, mtime=mtime)

        if self._closed:
            raise ArchiveClosedError()

        key = normalize_archive_path(entry.destination)
        if key in self._files or key in self._reserved:
            raise EntryExistsError(entry.destination)
        if not key:
            raise UnsupportedEntryError(f"目标路径无效: {entry.destination!r}", path=entry.destination)

        stage_file(self._staging, entry, key)
        self._files.add(key)
        debug(f"添加文件: {entry.source} -> {key}", stage=LogStage.STAGE)

    def close(self) -> None:
        """生成归档并清理暂存目录

        重复调用不会再次执行 makeself；首次关闭失败时，后续调用抛出同一错误。

        Raises:
            ToolNotFoundError: 找不到 makeself
            GeneratorFailedError: makeself 以非零状态退出
            ArchiveIOError: 读写失败
        """
        if self._closed:
            if self._close_error is not None:
                raise self._close_error
            return
        self._closed = True

        try:
            self._generate()
        except Exception as e:
            self._close_error = e
            raise
        except BaseException:
            # KeyboardInterrupt 等不保存，后续调用报告归档未生成
            self._close_error = ArchiveError("归档生成被中断，未生成归档")
            raise
        finally:
            self._staging.destroy()

    def discard(self) -> None:
        """放弃归档：标记为已关闭并清理暂存目录，不调用 makeself"""
        if self._closed:
            return
        self._closed = True
        self._staging.destroy()
        debug("归档已放弃", stage=LogStage.CLEANUP)

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.discard()
        elif not self._closed:
            self.close()
        return False

    def _generate(self) -> None:
        tool = self.generator.locate()
        if tool is None:
            raise ToolNotFoundError(not_found_message(GENERATOR_NAMES))

        if not self._staging.exists(INSTALL_SCRIPT_NAME):
            self._staging.write_text(INSTALL_SCRIPT_NAME, DEFAULT_INSTALL_SCRIPT, SCRIPT_MODE)
            debug("已写入默认安装脚本", stage=LogStage.CONFIG)

        lsm_path = None
        descriptor = resolve_descriptor(self.config)
        if descriptor is not None:
            lsm_path = str(self._staging.write_bytes(LSM_FILE_NAME, descriptor, DESCRIPTOR_MODE))

        output = select_target(self._output_path, self._target)
        try:
            output_path = output.prepare()
            args = build_arguments(self.config, str(self._staging.root), output_path, lsm_path)

            info(f"生成 makeself 归档 ({len(self._files)} 个文件): {output_path}", stage=LogStage.GENERATE)
            result = self.generator.run(args, command=tool)
            if result.returncode != 0:
                raise GeneratorFailedError(tool, result.returncode, result.stderr, [tool, *args])
            if result.stdout.strip():
                debug(result.stdout.strip(), stage=LogStage.GENERATE)

            output.finalize()
        finally:
            output.cleanup()

        if output.direct:
            size = os.path.getsize(output_path) if os.path.exists(output_path) else 0
        else:
            size = output.bytes_written
        success(f"makeself 归档完成 - 大小: {format_size(size)}", stage=LogStage.DONE)
