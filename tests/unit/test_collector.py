"""
文件收集器单元测试

测试目录展开、排除规则、目标路径计算等核心功能。
"""

from pathlib import Path

import pytest

from mkself.archive.entry import FileEntry
from mkself.build.collector import FileCollector, collect_entries, entries_from_files
from mkself.config.schema import FileInfoModel, FileModel, InputPathModel


@pytest.fixture
def tree(tmp_path):
    """创建测试目录结构"""
    root = tmp_path / "dist"
    (root / "bin").mkdir(parents=True)
    (root / "lib" / "__pycache__").mkdir(parents=True)
    (root / "bin" / "app").write_text("app")
    (root / "lib" / "core.py").write_text("core")
    (root / "lib" / "core.pyc").write_text("bytecode")
    (root / "lib" / "__pycache__" / "core.cpython.pyc").write_text("bytecode")
    (root / "README.md").write_text("readme")
    return root


class TestFileCollector:
    """FileCollector 测试"""

    def test_init(self):
        """测试初始化"""
        collector = FileCollector()
        assert collector.collected == []
        assert collector.excluded_patterns == []
        assert collector.total_size == 0

    def test_single_file(self, tree):
        """测试收集单个文件"""
        entries = collect_entries([InputPathModel(path=tree / "README.md")])
        assert [e.destination for e in entries] == ["README.md"]
        assert entries[0].source == (tree / "README.md").resolve()

    def test_single_file_with_prefix(self, tree):
        """测试单个文件加前缀"""
        entries = collect_entries([InputPathModel(path=tree / "README.md", prefix="docs")])
        assert [e.destination for e in entries] == ["docs/README.md"]

    def test_directory_preserve_structure(self, tree):
        """测试保持目录结构"""
        entries = collect_entries([InputPathModel(path=tree)])
        destinations = [e.destination for e in entries]
        assert "dist/bin/app" in destinations
        assert "dist/lib/core.py" in destinations
        assert destinations == sorted(destinations)
        assert all(isinstance(e, FileEntry) for e in entries)

    def test_directory_flat_root(self, tree):
        """测试以目录本身为根"""
        entries = collect_entries([InputPathModel(path=tree, preserve_structure=False)])
        destinations = {e.destination for e in entries}
        assert "bin/app" in destinations
        assert "README.md" in destinations

    def test_non_recursive(self, tree):
        """测试不递归"""
        entries = collect_entries([InputPathModel(path=tree, recursive=False, preserve_structure=False)])
        assert [e.destination for e in entries] == ["README.md"]

    def test_no_directories_in_result(self, tree):
        """测试结果中没有目录条目"""
        entries = collect_entries([InputPathModel(path=tree)])
        assert all(e.source.is_file() for e in entries)

    def test_exclude_patterns(self, tree):
        """测试排除模式"""
        entries = collect_entries(
            [InputPathModel(path=tree, preserve_structure=False)],
            exclude_patterns=["*.pyc", "__pycache__/", "README.*"],
        )
        destinations = {e.destination for e in entries}
        assert destinations == {"bin/app", "lib/core.py"}

    def test_exclude_path_pattern(self, tree):
        """测试包含分隔符的排除模式"""
        entries = collect_entries(
            [InputPathModel(path=tree, preserve_structure=False)],
            exclude_patterns=["lib/*"],
        )
        destinations = {e.destination for e in entries}
        assert "lib/core.py" not in destinations
        assert "bin/app" in destinations

    def test_duplicate_destinations_skipped(self, tree):
        """测试重复目标只保留第一个"""
        entries = collect_entries([
            InputPathModel(path=tree / "README.md"),
            InputPathModel(path=tree / "README.md"),
        ])
        assert len(entries) == 1

    def test_missing_input(self, tmp_path):
        """测试输入路径不存在"""
        with pytest.raises(FileNotFoundError):
            collect_entries([InputPathModel(path=tmp_path / "missing")])

    def test_statistics(self, tree):
        """测试统计信息"""
        collector = FileCollector()
        collector.collect([InputPathModel(path=tree / "bin")])
        stats = collector.get_statistics()
        assert stats["total_files"] == 1
        assert stats["total_size"] == 3


class TestEntriesFromFiles:
    """显式文件转换测试"""

    def test_conversion(self, tmp_path):
        """测试元信息透传"""
        files = [
            FileModel(src=tmp_path / "a.sh", dst="bin/a.sh", info=FileInfoModel(mode="0755", owner="root")),
            FileModel(src=tmp_path / "b.txt"),
        ]
        entries = entries_from_files(files)

        assert entries[0].destination == "bin/a.sh"
        assert entries[0].mode == 0o755
        assert entries[0].owner == "root"
        assert entries[1].destination == "b.txt"
        assert entries[1].mode is None
        assert entries[1].source == Path(tmp_path / "b.txt")
