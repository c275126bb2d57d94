"""
输出目标、配置解析与暂存区单元测试
"""

import io
import os
from pathlib import Path

import pytest

from mkself.archive.errors import SourceNotFoundError, UnsupportedEntryError
from mkself.archive.resolver import (
    first_provided,
    resolve_descriptor,
    resolve_install_script,
    resolve_output_path,
)
from mkself.archive.staging import StagingArea
from mkself.archive.target import BufferedTarget, DirectTarget, nameable_path, select_target
from mkself.config.schema import MakeselfConfig
from mkself.utils.paths import normalize_archive_path, safe_path_join


class TestFirstProvided:
    """提供者链测试"""

    def test_first_non_none_wins(self):
        assert first_provided([lambda: None, lambda: "b", lambda: "c"]) == "b"

    def test_nothing_provided(self):
        assert first_provided([lambda: None]) is None
        assert first_provided([]) is None

    def test_stops_at_first_value(self):
        """测试找到值后不再询问后续提供者"""
        def boom():
            raise AssertionError("不应被调用")
        assert first_provided([lambda: 1, boom]) == 1


class TestResolver:
    """配置解析测试"""

    def test_script_file_beats_inline(self, tmp_path):
        """测试脚本文件优先于内联脚本"""
        script = tmp_path / "install.sh"
        script.write_bytes(b"from file")
        config = MakeselfConfig(install_script="inline", install_script_file=script)
        assert resolve_install_script(config) == b"from file"

    def test_inline_script(self):
        assert resolve_install_script(MakeselfConfig(install_script="inline")) == b"inline"
        assert resolve_install_script(MakeselfConfig()) is None

    def test_missing_script_file(self, tmp_path):
        """测试脚本文件不存在"""
        config = MakeselfConfig(install_script="inline", install_script_file=tmp_path / "none.sh")
        with pytest.raises(SourceNotFoundError):
            resolve_install_script(config)

    def test_descriptor_file_beats_inline(self, tmp_path):
        """测试 LSM 文件优先于内联内容"""
        lsm = tmp_path / "a.lsm"
        lsm.write_bytes(b"Title: file")
        assert resolve_descriptor(MakeselfConfig(lsm_file=lsm, lsm_content="Title: inline")) == b"Title: file"
        assert resolve_descriptor(MakeselfConfig(lsm_content="Title: inline")) == b"Title: inline"
        assert resolve_descriptor(MakeselfConfig()) is None

    def test_output_path_precedence(self, tmp_path):
        """测试输出路径优先级：配置 > 参数 > 目标文件"""
        sink_path = tmp_path / "sink.run"
        with open(sink_path, "wb") as sink:
            config = MakeselfConfig(output_path=str(tmp_path / "config.run"))
            assert resolve_output_path(config, str(tmp_path / "arg.run"), sink) == str(tmp_path / "config.run")
            assert resolve_output_path(MakeselfConfig(), str(tmp_path / "arg.run"), sink) == str(tmp_path / "arg.run")
            assert resolve_output_path(MakeselfConfig(), None, sink) == str(sink_path)

    def test_output_path_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_output_path(MakeselfConfig(), "rel.run", io.BytesIO()) == str(tmp_path / "rel.run")

    def test_no_output_path(self):
        assert resolve_output_path(MakeselfConfig(), None, io.BytesIO()) is None


class TestTargets:
    """输出目标测试"""

    def test_nameable_path(self, tmp_path):
        """测试只有普通文件才可寻址"""
        assert nameable_path(io.BytesIO()) is None
        path = tmp_path / "a.run"
        with open(path, "wb") as f:
            assert nameable_path(f) == str(path)

    def test_select_target(self, tmp_path):
        assert isinstance(select_target(str(tmp_path / "a.run"), io.BytesIO()), DirectTarget)
        assert isinstance(select_target(None, io.BytesIO()), BufferedTarget)

    def test_direct_truncates_matching_sink(self, tmp_path):
        """测试目标文件即输出文件时先截断"""
        path = tmp_path / "a.run"
        with open(path, "wb") as f:
            f.write(b"stale data")
            assert DirectTarget(str(path), f).prepare() == str(path)
        assert path.read_bytes() == b""

    def test_direct_creates_parent(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "a.run"
        DirectTarget(str(path)).prepare()
        assert path.parent.is_dir()

    def test_buffered_copies_and_cleans_up(self, tmp_path, monkeypatch):
        """测试缓冲目标复制内容并删除临时文件"""
        monkeypatch.setattr("tempfile.tempdir", str(tmp_path))
        sink = io.BytesIO()
        target = BufferedTarget(sink)

        scratch = target.prepare()
        assert os.path.basename(scratch).startswith("makeself-output-")
        Path(scratch).write_bytes(b"payload")
        target.finalize()
        target.cleanup()

        assert sink.getvalue() == b"payload"
        assert target.bytes_written == 7
        assert not os.path.exists(scratch)

    def test_buffered_cleanup_without_finalize(self, tmp_path, monkeypatch):
        monkeypatch.setattr("tempfile.tempdir", str(tmp_path))
        target = BufferedTarget(io.BytesIO())
        scratch = target.prepare()
        target.cleanup()
        assert not os.path.exists(scratch)
        target.cleanup()


class TestStaging:
    """暂存区测试"""

    def test_write_and_destroy(self):
        staging = StagingArea.create()
        try:
            path = staging.write_text("bin/run.sh", "#!/bin/sh\n", 0o755)
            assert path.read_text() == "#!/bin/sh\n"
            assert staging.exists("bin/run.sh")
        finally:
            staging.destroy()
        assert staging.destroyed
        assert not staging.root.exists()
        staging.destroy()

    @pytest.mark.parametrize("bad", ["../escape", "a/../../b", "/etc/passwd"])
    def test_rejects_escaping_paths(self, bad):
        staging = StagingArea.create()
        try:
            with pytest.raises(UnsupportedEntryError):
                staging.path_for(bad)
        finally:
            staging.destroy()


class TestPaths:
    """路径工具测试"""

    @pytest.mark.parametrize("raw,expected", [
        ("a/b", "a/b"),
        ("./a//b", "a/b"),
        ("a/./b/", "a/b"),
        ("a\\b", "a/b"),
    ])
    def test_normalize_archive_path(self, raw, expected):
        assert normalize_archive_path(raw) == expected

    def test_safe_path_join(self, tmp_path):
        assert safe_path_join(tmp_path, "a/b") == tmp_path / "a" / "b"
        with pytest.raises(ValueError):
            safe_path_join(tmp_path, "../x")
