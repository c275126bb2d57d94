"""
Build 命令实现

根据配置文件构建 makeself 归档。
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ...config import load_config, ConfigError, ConfigValidationError
from ...utils.logging import set_log_level, set_log_file, OutputLevel


console = Console()


def build_command(
    config: str = typer.Option(..., "--config", "-c", help="配置文件路径"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="输出归档路径（默认使用配置中的 output）"),
    force: bool = typer.Option(False, "--force", "-f", help="强制覆盖已存在的输出文件"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="日志输出文件"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出详细调试日志 (DEBUG 级别)"),
) -> None:
    """构建 makeself 归档

    示例:
        mkself build -c mkself.yaml
        mkself build -c mkself.yaml -o dist/myapp.run --force
    """
    from ...build.builder import Builder

    config_path = Path(config)

    set_log_level(OutputLevel.DEBUG if verbose else OutputLevel.INFO)
    if log_file:
        try:
            set_log_file(log_file)
        except OSError:
            console.print(f"[yellow]无法写入日志文件: {log_file}[/yellow]")

    try:
        console.print(f"[cyan]正在加载配置文件[/cyan]: {config_path}")
        config_obj = load_config(config_path)
    except ConfigValidationError as e:
        console.print("[red]配置验证失败:[/red]")
        console.print(e.format_errors())
        raise typer.Exit(1)
    except ConfigError as e:
        console.print(f"[red]配置错误[/red]: {e}")
        raise typer.Exit(1)

    output_path = Path(output) if output else Path(config_obj.default_output())
    if output_path.exists() and not force:
        console.print(f"[red]输出文件已存在: {output_path}[/red]")
        console.print("使用 --force 参数强制覆盖")
        raise typer.Exit(1)

    def progress_callback(stage: str, current: int, total: int, message: str = "") -> None:
        if verbose and total > 0:
            console.print(f"[blue]{stage}[/blue]: {message} ({current}/{total})")

    result = Builder().build(config_obj, output_path, progress_callback=progress_callback)

    if not result.success:
        console.print(f"[red]✗ 构建失败[/red]: {result.error}")
        if log_file:
            console.print(f"[yellow]请检查日志文件 {log_file} 获取详细信息。[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]✓ 归档构建完成[/green]: {result.output_path}")
    console.print(f"[blue]文件数量[/blue]: {result.file_count}")
    if result.output_size is not None:
        console.print(f"[blue]文件大小[/blue]: {result.output_size / (1024 * 1024):.1f} MB")
