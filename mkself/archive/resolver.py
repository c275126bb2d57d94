"""
配置解析

用按优先级排列的提供者链决定安装脚本、输出路径和 LSM 描述的来源，
第一个给出值的提供者胜出。
"""

import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional, TypeVar

from ..config.schema import MakeselfConfig
from .errors import ArchiveIOError, SourceNotFoundError
from .target import nameable_path

T = TypeVar("T")

Provider = Callable[[], Optional[T]]


def first_provided(providers: Iterable[Provider]) -> Optional[T]:
    """按顺序询问提供者，返回第一个非 None 的值"""
    for provider in providers:
        value = provider()
        if value is not None:
            return value
    return None


def read_file_provider(path: Optional[Path], what: str) -> Provider:
    """读取文件内容的提供者，路径未设置时不提供值"""
    def provide() -> Optional[bytes]:
        if path is None:
            return None
        try:
            return Path(path).read_bytes()
        except FileNotFoundError as e:
            raise SourceNotFoundError(f"{what}不存在: {path}", path=str(path)) from e
        except OSError as e:
            raise ArchiveIOError(f"无法读取{what} {path}: {e}", path=str(path)) from e
    return provide


def text_provider(content: Optional[str]) -> Provider:
    def provide() -> Optional[bytes]:
        if content is None:
            return None
        return content.encode("utf-8")
    return provide


def value_provider(value: Optional[T]) -> Provider:
    return lambda: value or None


def script_providers(config: MakeselfConfig) -> List[Provider]:
    """安装脚本：脚本文件优先于内联内容"""
    return [
        read_file_provider(config.install_script_file, "安装脚本文件"),
        text_provider(config.install_script),
    ]


def descriptor_providers(config: MakeselfConfig) -> List[Provider]:
    """LSM 描述：与安装脚本一致，文件优先于内联内容"""
    return [
        read_file_provider(config.lsm_file, "LSM 文件"),
        text_provider(config.lsm_content),
    ]


def output_path_providers(config: MakeselfConfig, output_path: Optional[str], target) -> List[Provider]:
    """输出路径：配置覆盖 > 调用方传入 > 目标文件自身路径"""
    return [
        value_provider(config.output_path),
        value_provider(output_path),
        lambda: nameable_path(target),
    ]


def resolve_install_script(config: MakeselfConfig) -> Optional[bytes]:
    return first_provided(script_providers(config))


def resolve_descriptor(config: MakeselfConfig) -> Optional[bytes]:
    return first_provided(descriptor_providers(config))


def resolve_output_path(config: MakeselfConfig, output_path: Optional[str], target) -> Optional[str]:
    """解析最终输出路径，结果为绝对路径或 None"""
    resolved = first_provided(output_path_providers(config, output_path, target))
    if resolved is None:
        return None
    return os.path.abspath(os.fspath(resolved))
