"""
mkself CLI 主入口

提供命令行接口，支持 build/check/validate/example 等命令。
"""

from typing import Optional

import typer
from rich.console import Console

from .. import __version__
from ..utils import configure_logging, OutputLevel
from .commands import build, check, validate


app = typer.Typer(
    name="mkself",
    help="mkself - makeself 自解压归档构建工具",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """显示版本信息"""
    if value:
        console.print(f"mkself v{__version__}")
        raise typer.Exit()


def verbose_callback(verbose: bool) -> None:
    """配置详细输出"""
    configure_logging(level=OutputLevel.DEBUG if verbose else OutputLevel.INFO)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="显示版本信息"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        callback=verbose_callback,
        help="启用详细输出"
    )
) -> None:
    """mkself - makeself 自解压归档构建工具

    使用 --help 查看可用命令的详细信息。
    """
    pass


app.command("build", help="构建 makeself 归档")(build.build_command)
app.command("check", help="检查 makeself 是否可用")(check.check_command)
app.command("validate", help="验证配置文件")(validate.validate_command)


@app.command("example")
def example_command(
    output: str = typer.Option(
        "mkself.yaml",
        "--output", "-o",
        help="输出配置文件路径"
    )
) -> None:
    """生成示例配置文件"""
    from ..config import ConfigError, save_config
    from ..config.schema import FileInfoModel, FileModel, InputPathModel, MakeselfConfig, PackageConfig

    config = PackageConfig(
        name="myapp",
        version="1.0.0",
        inputs=[InputPathModel(path="./dist", prefix="", recursive=True)],
        files=[FileModel(src="./README.md", dst="README.md", info=FileInfoModel(mode=0o644))],
        exclude=["*.pyc", "__pycache__/"],
        makeself=MakeselfConfig(
            label="myapp installer",
            install_script_file="./install.sh",
            compression="gzip",
        ),
    )

    try:
        save_config(config, output)
    except ConfigError as e:
        console.print(f"[red]生成示例配置失败: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"✓ 示例配置文件已生成: [green]{output}[/green]")
    console.print("请根据需要修改配置文件，然后运行:")
    console.print(f"  [cyan]mkself build -c {output}[/cyan]")


if __name__ == "__main__":
    app()
