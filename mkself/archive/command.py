"""
makeself 命令行参数构建

makeself 按位置解析末尾的四个参数，因此额外参数必须位于它们之前。
"""

from typing import List, Optional

from ..config.schema import MakeselfConfig

QUIET_FLAG = "--quiet"
LSM_FLAG = "--lsm"
DEFAULT_LABEL = "Self-extracting archive"
INSTALL_SCRIPT_NAME = "install.sh"
STARTUP_SCRIPT = f"./{INSTALL_SCRIPT_NAME}"
LSM_FILE_NAME = "archive.lsm"


def build_arguments(
    config: MakeselfConfig,
    staging_dir: str,
    output_path: str,
    lsm_path: Optional[str] = None,
) -> List[str]:
    """构建 makeself 参数列表（不含可执行文件名）

    顺序: --quiet, 压缩参数, [--lsm 文件], 额外参数, 源目录, 输出文件, 标签, 启动脚本
    """
    args = [QUIET_FLAG, config.compression.flag]

    if lsm_path:
        args.extend([LSM_FLAG, lsm_path])

    args.extend(config.extra_args)

    args.append(staging_dir)
    args.append(output_path)
    args.append(config.label or DEFAULT_LABEL)
    args.append(STARTUP_SCRIPT)
    return args
