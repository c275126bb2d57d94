"""
归档抽象接口
"""

from abc import ABC, abstractmethod

from .entry import FileEntry


class Archive(ABC):
    """可从磁盘逐个添加文件的归档"""

    @abstractmethod
    def add(self, entry: FileEntry) -> None:
        """添加文件"""
        pass

    @abstractmethod
    def close(self) -> None:
        """完成归档"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
