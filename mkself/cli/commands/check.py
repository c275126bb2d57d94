"""
Check 命令实现

检查 makeself 生成器是否可用并显示其版本。
"""

import typer
from rich.console import Console
from rich.table import Table

from ...archive.errors import GeneratorFailedError, ToolNotFoundError
from ...archive.generator import default_generator


console = Console()


def check_command() -> None:
    """检查 makeself 是否安装

    示例:
        mkself check
    """
    try:
        default_generator.check_available()
    except ToolNotFoundError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    command = default_generator.locate()
    try:
        version = default_generator.version()
    except GeneratorFailedError as e:
        version = f"未知 ({e})"

    table = Table(title="makeself")
    table.add_column("项目", style="cyan")
    table.add_column("值", style="green")
    table.add_row("命令", command or "")
    table.add_row("版本", version or "未知")
    console.print(table)
