"""
外部生成器

封装 makeself 可执行文件的查找与调用，其余代码只依赖 locate/run 两个操作，
测试中可替换为假实现。
"""

import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..utils.logging import debug, LogStage
from .errors import GeneratorFailedError, ToolNotFoundError

# 按优先级排列：部分发行版安装为 makeself，传统名称为 makeself.sh
GENERATOR_NAMES: Tuple[str, ...] = ("makeself", "makeself.sh")


def not_found_message(names: Sequence[str]) -> str:
    tried = " 和 ".join(f"'{n}'" for n in names)
    return f"PATH 中找不到 makeself 命令 (已尝试 {tried})"


@dataclass
class GeneratorResult:
    """生成器执行结果"""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class MakeselfGenerator:
    """makeself 生成器"""

    def __init__(self, names: Sequence[str] = GENERATOR_NAMES):
        self.names = tuple(names)

    def locate(self) -> Optional[str]:
        """在 PATH 中查找生成器，返回命令名；都不存在时返回 None"""
        for name in self.names:
            if shutil.which(name):
                return name
        return None

    def require(self) -> str:
        """查找生成器，找不到时抛出 ToolNotFoundError"""
        command = self.locate()
        if command is None:
            raise ToolNotFoundError(not_found_message(self.names))
        return command

    def run(
        self,
        args: Sequence[str],
        cwd: Optional[str] = None,
        command: Optional[str] = None,
    ) -> GeneratorResult:
        """阻塞执行生成器，捕获标准输出和标准错误

        Args:
            args: 参数列表（不含命令名）
            cwd: 工作目录
            command: 已查找到的命令名，未给出时重新在 PATH 中查找

        Raises:
            ToolNotFoundError: 生成器不存在
        """
        if command is None:
            command = self.require()
        debug(f"执行: {command} {' '.join(args)}", stage=LogStage.GENERATE)
        try:
            proc = subprocess.run(
                [command, *args],
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(f"{not_found_message(self.names)}: {e}") from e
        return GeneratorResult(proc.returncode, proc.stdout or "", proc.stderr or "")

    def check_available(self) -> None:
        """检查生成器是否可用

        Raises:
            ToolNotFoundError: 附带安装提示
        """
        if self.locate() is None:
            raise ToolNotFoundError(f"{not_found_message(self.names)}，请安装 makeself 软件包")

    def version(self) -> str:
        """返回生成器版本字符串（去除首尾空白）

        Raises:
            ToolNotFoundError: 生成器不存在
            GeneratorFailedError: 版本查询失败
        """
        command = self.require()
        result = self.run(["--version"], command=command)
        if not result.ok:
            raise GeneratorFailedError(command, result.returncode, result.stderr, [command, "--version"])
        return result.stdout.strip()


default_generator = MakeselfGenerator()


def check_makeself_available() -> None:
    """便捷函数：检查系统中是否安装了 makeself"""
    default_generator.check_available()


def get_makeself_version() -> str:
    """便捷函数：获取 makeself 版本"""
    return default_generator.version()
