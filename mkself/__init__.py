"""
mkself - makeself 自解压归档构建工具

Build makeself self-extracting archives from a set of files.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .archive import FileEntry, MakeselfArchive, new_archive, new_archive_with_options
from .build import Builder
from .config import MakeselfConfig, PackageConfig

__all__ = [
    "Builder",
    "FileEntry",
    "MakeselfArchive",
    "MakeselfConfig",
    "PackageConfig",
    "new_archive",
    "new_archive_with_options",
    "__version__",
]
